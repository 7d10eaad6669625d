from datetime import date
from decimal import Decimal
import pytest
from httpx import AsyncClient
from fastapi import status
from app.models.inventory.input import Input

COUNTS_URL = "/api/inventory-counts/"


def count_url(count_id: int, action: str = "") -> str:
    url = f"/api/inventory-counts/{count_id}"
    return f"{url}/{action}" if action else url


async def create_full_count(client: AsyncClient, headers: dict) -> dict:
    response = await client.post(COUNTS_URL, json={"countType": "FULL"}, headers=headers)
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()["data"]


@pytest.mark.asyncio
class TestAccessControl:
    """Authentication and permission checks"""

    async def test_requires_token(self, client: AsyncClient):
        response = await client.get(COUNTS_URL)
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"success": False, "message": "Token no proporcionado"}

    async def test_rejects_invalid_token(self, client: AsyncClient):
        response = await client.get(COUNTS_URL, headers={"Authorization": "Bearer invalid"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["message"] == "Token inválido o expirado"

    async def test_viewer_can_read_but_not_write(self, client: AsyncClient, viewer_headers: dict):
        response = await client.get(COUNTS_URL, headers=viewer_headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"success": True, "data": []}

        response = await client.post(COUNTS_URL, json={"countType": "FULL"}, headers=viewer_headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "No tienes permisos para realizar esta acción: inventory.manage"

    async def test_public_endpoints(self, client: AsyncClient):
        response = await client.get("/")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "active"

        response = await client.get("/health")
        assert response.status_code == status.HTTP_200_OK
        assert "timestamp" in response.json()

    async def test_unknown_route(self, client: AsyncClient):
        response = await client.get("/api/nothing-here")
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "Ruta no encontrada: GET /api/nothing-here"


@pytest.mark.asyncio
class TestInventoryCountsApi:
    """Inventory count workflow over HTTP"""

    async def test_full_workflow(self, client: AsyncClient, manager_headers: dict, make_input, session_maker):
        harina = await make_input("Harina", current_stock="10", unit_cost="2.00")
        azucar = await make_input("Azúcar", current_stock="5", unit_cost="3.00")

        response = await client.post(
            COUNTS_URL, json={"countType": "FULL", "notes": "Cierre de mes"}, headers=manager_headers
        )
        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Conteo de inventario creado correctamente"

        count = body["data"]
        assert count["countNumber"] == f"INV-{date.today().year}-0001"
        assert count["status"] == "DRAFT"
        assert count["countType"] == "FULL"
        assert count["totalItems"] == 2
        assert count["countedByName"] == "Laura Gestora"
        assert count["notes"] == "Cierre de mes"
        items = {item["inputName"]: item for item in count["items"]}
        assert set(items) == {"Harina", "Azúcar"}
        assert items["Harina"]["isCounted"] is False
        assert items["Harina"]["countedQuantity"] is None
        assert items["Harina"]["systemQuantity"] == 10
        assert items["Harina"]["unitCost"] == 2
        assert count["totalDiffValue"] == 0
        assert isinstance(count["totalDiffValue"], float)

        response = await client.patch(count_url(count["id"], "start"), headers=manager_headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["status"] == "IN_PROGRESS"

        response = await client.patch(
            count_url(count["id"], f"items/{items['Harina']['id']}"),
            json={"countedQuantity": 12},
            headers=manager_headers,
        )
        assert response.status_code == status.HTTP_200_OK
        line = response.json()["data"]
        assert line["isCounted"] is True
        assert line["difference"] == 2
        assert line["differenceValue"] == 4

        response = await client.patch(
            count_url(count["id"], f"items/{items['Azúcar']['id']}"),
            json={"countedQuantity": "5", "notes": "Sin novedad"},
            headers=manager_headers,
        )
        assert response.status_code == status.HTTP_200_OK

        response = await client.patch(count_url(count["id"], "submit"), headers=manager_headers)
        assert response.status_code == status.HTTP_200_OK
        submitted = response.json()["data"]
        assert submitted["status"] == "PENDING_APPROVAL"
        assert submitted["itemsWithDiff"] == 1
        assert submitted["totalDiffValue"] == 4

        response = await client.patch(count_url(count["id"], "approve"), headers=manager_headers)
        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["message"] == "Conteo aprobado y ajustes aplicados correctamente"
        approved = body["data"]
        assert approved["status"] == "APPROVED"
        assert approved["approvedByName"] == "Laura Gestora"
        assert approved["approvedAt"] is not None

        async with session_maker() as session:
            assert (await session.get(Input, harina.id)).current_stock == Decimal("12")
            assert (await session.get(Input, azucar.id)).current_stock == Decimal("5")

        response = await client.get(
            "/api/inventory-movements/",
            params={"referenceType": "inventory_count", "referenceId": count["id"]},
            headers=manager_headers,
        )
        assert response.status_code == status.HTTP_200_OK
        movements = response.json()["data"]
        assert len(movements) == 1
        assert movements[0]["movementType"] == "AJUSTE"
        assert movements[0]["inputId"] == harina.id
        assert movements[0]["quantity"] == 2

        response = await client.patch(count_url(count["id"], "approve"), headers=manager_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST

        response = await client.patch(count_url(count["id"], "cancel"), headers=manager_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "No se pueden cancelar conteos aprobados"

    async def test_counted_quantity_is_required(self, client: AsyncClient, manager_headers: dict, make_input):
        await make_input("Harina", current_stock="10")
        count = await create_full_count(client, manager_headers)

        response = await client.patch(
            count_url(count["id"], f"items/{count['items'][0]['id']}"),
            json={"notes": "olvidé la cantidad"},
            headers=manager_headers,
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"success": False, "message": "Se requiere la cantidad contada"}

    async def test_negative_quantity_fails_validation(self, client: AsyncClient, manager_headers: dict, make_input):
        await make_input("Harina", current_stock="10")
        count = await create_full_count(client, manager_headers)

        response = await client.patch(
            count_url(count["id"], f"items/{count['items'][0]['id']}"),
            json={"countedQuantity": -3},
            headers=manager_headers,
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        body = response.json()
        assert body["message"] == "Error de validación"
        assert "countedQuantity" in body["errors"]

    async def test_submit_with_uncounted_items(self, client: AsyncClient, manager_headers: dict, make_input):
        await make_input("Harina", current_stock="10")
        await make_input("Azúcar", current_stock="5")
        count = await create_full_count(client, manager_headers)
        await client.patch(count_url(count["id"], "start"), headers=manager_headers)

        response = await client.patch(count_url(count["id"], "submit"), headers=manager_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Hay 2 item(s) sin contar"

    async def test_partial_count_without_inputs(self, client: AsyncClient, manager_headers: dict, make_input):
        await make_input("Harina", current_stock="10")
        response = await client.post(COUNTS_URL, json={"countType": "PARTIAL"}, headers=manager_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    async def test_unknown_count_type(self, client: AsyncClient, manager_headers: dict):
        response = await client.post(COUNTS_URL, json={"countType": "WEEKLY"}, headers=manager_headers)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    async def test_unknown_count(self, client: AsyncClient, manager_headers: dict):
        response = await client.get(count_url(999), headers=manager_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"success": False, "message": "Conteo de inventario no encontrado"}

        response = await client.patch(count_url(999, "approve"), headers=manager_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_list_filters_and_delete(self, client: AsyncClient, manager_headers: dict, make_input):
        await make_input("Harina", current_stock="10")
        first = await create_full_count(client, manager_headers)
        second = await create_full_count(client, manager_headers)
        await client.patch(count_url(second["id"], "cancel"), headers=manager_headers)

        response = await client.get(COUNTS_URL, headers=manager_headers)
        assert [c["id"] for c in response.json()["data"]] == [second["id"], first["id"]]

        response = await client.get(COUNTS_URL, params={"status": "CANCELLED"}, headers=manager_headers)
        assert [c["id"] for c in response.json()["data"]] == [second["id"]]

        response = await client.get(
            COUNTS_URL, params={"fromDate": "2000-01-01", "toDate": "2000-12-31"}, headers=manager_headers
        )
        assert response.json()["data"] == []

        response = await client.get(COUNTS_URL, params={"status": "LOST"}, headers=manager_headers)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

        response = await client.delete(count_url(second["id"]), headers=manager_headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "success": True,
            "message": "Conteo de inventario eliminado correctamente",
        }

        response = await client.get(count_url(second["id"]), headers=manager_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_stats(self, client: AsyncClient, viewer_headers: dict, manager_headers: dict, make_input):
        await make_input("Harina", current_stock="10")
        await create_full_count(client, manager_headers)
        cancelled = await create_full_count(client, manager_headers)
        await client.patch(count_url(cancelled["id"], "cancel"), headers=manager_headers)

        response = await client.get("/api/inventory-counts/stats", headers=viewer_headers)
        assert response.status_code == status.HTTP_200_OK
        stats = response.json()["data"]
        assert stats["total"] == 2
        assert stats["byStatus"] == {
            "DRAFT": 1,
            "IN_PROGRESS": 0,
            "PENDING_APPROVAL": 0,
            "APPROVED": 0,
            "CANCELLED": 1,
        }
        assert stats["lastCount"] is None

    async def test_request_id_is_echoed(self, client: AsyncClient, viewer_headers: dict):
        headers = dict(viewer_headers, **{"X-Request-Id": "abc123"})
        response = await client.get(COUNTS_URL, headers=headers)
        assert response.headers["X-Request-Id"] == "abc123"
        assert "X-Process-Time" in response.headers
