from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.api.dependencies import require_permission
from app.core.database import get_async_session
from app.core.exceptions import BadRequestError
from app.models.auth.user import User
from app.models.shared.enums import InventoryCountStatus
from app.schemas.common.response import ApiResponse
from app.schemas.inventory.inventory_count import (
    InventoryCountCreate,
    InventoryCountFilters,
    InventoryCountItemResponse,
    InventoryCountItemUpdate,
    InventoryCountResponse,
    InventoryCountStats,
)
from app.services.inventory.inventory_count_service import InventoryCountService

router = APIRouter()

VIEW = "inventory.view"
MANAGE = "inventory.manage"


@router.get("/", response_model=ApiResponse[List[InventoryCountResponse]])
async def get_inventory_counts(
    status_filter: Optional[InventoryCountStatus] = Query(None, alias="status"),
    from_date: Optional[date] = Query(None, alias="fromDate"),
    to_date: Optional[date] = Query(None, alias="toDate"),
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(require_permission(VIEW))
):
    """Get all inventory counts with optional filters"""
    service = InventoryCountService(db)
    counts = await service.list_counts(
        InventoryCountFilters(status=status_filter, from_date=from_date, to_date=to_date)
    )
    return ApiResponse(data=[InventoryCountResponse.model_validate(c) for c in counts])


@router.get("/stats", response_model=ApiResponse[InventoryCountStats])
async def get_inventory_count_stats(
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(require_permission(VIEW))
):
    """Counts per status and last approval date"""
    service = InventoryCountService(db)
    stats = await service.get_count_stats()
    return ApiResponse(data=InventoryCountStats.model_validate(stats))


@router.get("/{count_id}", response_model=ApiResponse[InventoryCountResponse])
async def get_inventory_count(
    count_id: int,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(require_permission(VIEW))
):
    """Get inventory count by ID"""
    service = InventoryCountService(db)
    count = await service.get_count(count_id)
    return ApiResponse(data=InventoryCountResponse.model_validate(count))


@router.post("/", response_model=ApiResponse[InventoryCountResponse], status_code=status.HTTP_201_CREATED)
async def create_inventory_count(
    count_data: InventoryCountCreate,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(require_permission(MANAGE))
):
    """Create a new inventory count"""
    service = InventoryCountService(db)
    count = await service.create_inventory_count(
        count_data,
        counted_by_id=current_user.id,
        counted_by_name=current_user.full_name,
    )
    return ApiResponse(
        data=InventoryCountResponse.model_validate(count),
        message="Conteo de inventario creado correctamente",
    )


@router.patch("/{count_id}/start", response_model=ApiResponse[InventoryCountResponse])
async def start_inventory_count(
    count_id: int,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(require_permission(MANAGE))
):
    """Move a draft count to IN_PROGRESS"""
    service = InventoryCountService(db)
    count = await service.start_count(count_id)
    return ApiResponse(
        data=InventoryCountResponse.model_validate(count),
        message="Conteo iniciado correctamente",
    )


@router.patch("/{count_id}/items/{item_id}", response_model=ApiResponse[InventoryCountItemResponse])
async def update_inventory_count_item(
    count_id: int,
    item_id: int,
    item_data: InventoryCountItemUpdate,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(require_permission(MANAGE))
):
    """Record the counted quantity of one item"""
    if item_data.counted_quantity is None:
        raise BadRequestError("Se requiere la cantidad contada")

    service = InventoryCountService(db)
    item = await service.update_item_count(count_id, item_id, item_data)
    return ApiResponse(
        data=InventoryCountItemResponse.model_validate(item),
        message="Cantidad actualizada correctamente",
    )


@router.patch("/{count_id}/submit", response_model=ApiResponse[InventoryCountResponse])
async def submit_inventory_count(
    count_id: int,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(require_permission(MANAGE))
):
    """Send a fully counted inventory count to approval"""
    service = InventoryCountService(db)
    count = await service.submit_for_approval(count_id)
    return ApiResponse(
        data=InventoryCountResponse.model_validate(count),
        message="Conteo enviado a aprobación correctamente",
    )


@router.patch("/{count_id}/approve", response_model=ApiResponse[InventoryCountResponse])
async def approve_inventory_count(
    count_id: int,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(require_permission(MANAGE))
):
    """Approve count and apply stock adjustments"""
    service = InventoryCountService(db)
    count = await service.approve_count(
        count_id,
        approved_by_id=current_user.id,
        approved_by_name=current_user.full_name,
    )
    return ApiResponse(
        data=InventoryCountResponse.model_validate(count),
        message="Conteo aprobado y ajustes aplicados correctamente",
    )


@router.patch("/{count_id}/cancel", response_model=ApiResponse[InventoryCountResponse])
async def cancel_inventory_count(
    count_id: int,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(require_permission(MANAGE))
):
    """Cancel a count that has not been approved"""
    service = InventoryCountService(db)
    count = await service.cancel_count(count_id)
    return ApiResponse(
        data=InventoryCountResponse.model_validate(count),
        message="Conteo cancelado correctamente",
    )


@router.delete("/{count_id}", response_model=ApiResponse[None])
async def delete_inventory_count(
    count_id: int,
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(require_permission(MANAGE))
):
    """Delete a draft or cancelled count"""
    service = InventoryCountService(db)
    await service.delete_count(count_id)
    return ApiResponse(message="Conteo de inventario eliminado correctamente")
