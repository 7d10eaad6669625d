import logging
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from sqlalchemy.exc import IntegrityError
from sqlalchemy import and_, desc, func, update
from app.core.config import settings
from app.core.exceptions import BadRequestError, NotFoundError
from app.models.inventory.input import Input
from app.models.inventory.inventory_count import InventoryCount
from app.models.inventory.inventory_count_item import InventoryCountItem
from app.models.shared.enums import InventoryCountStatus, InventoryCountType
from app.schemas.inventory.inventory_count import (
    InventoryCountCreate,
    InventoryCountFilters,
    InventoryCountItemUpdate,
)
from app.services.inventory.stock_ledger_service import StockLedgerService

logger = logging.getLogger(__name__)

COUNT_NOT_FOUND = "Conteo de inventario no encontrado"
ITEM_NOT_FOUND = "Item de conteo no encontrado"

# Scales of the quantity and value columns
QUANTITY_STEP = Decimal("0.01")
VALUE_STEP = Decimal("0.0001")

EDITABLE_STATUSES = (InventoryCountStatus.DRAFT, InventoryCountStatus.IN_PROGRESS)
DELETABLE_STATUSES = (InventoryCountStatus.DRAFT, InventoryCountStatus.CANCELLED)


class CountNumberConflictError(RuntimeError):
    """Raised when no free count number was found after every retry"""


class InventoryCountService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.ledger = StockLedgerService(db)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_inventory_count_by_id(self, count_id: int) -> Optional[InventoryCount]:
        result = await self.db.execute(
            select(InventoryCount)
            .options(selectinload(InventoryCount.items))
            .where(InventoryCount.id == count_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_count(self, count_id: int) -> InventoryCount:
        """Get a count with its items or raise NotFoundError"""
        inventory_count = await self.get_inventory_count_by_id(count_id)
        if not inventory_count:
            raise NotFoundError(COUNT_NOT_FOUND)
        return inventory_count

    async def list_counts(self, filters: Optional[InventoryCountFilters] = None) -> List[InventoryCount]:
        """Get inventory counts, newest first"""
        query = select(InventoryCount).options(selectinload(InventoryCount.items))

        conditions = []
        if filters:
            if filters.status:
                conditions.append(InventoryCount.status == filters.status)
            if filters.from_date:
                conditions.append(InventoryCount.count_date >= filters.from_date)
            if filters.to_date:
                conditions.append(InventoryCount.count_date <= filters.to_date)

        if conditions:
            query = query.where(and_(*conditions))

        query = query.order_by(desc(InventoryCount.created_at), desc(InventoryCount.id))
        result = await self.db.execute(query.execution_options(populate_existing=True))
        return result.scalars().all()

    async def get_count_stats(self) -> Dict[str, Any]:
        """Totals per status and the date of the latest approval"""
        result = await self.db.execute(
            select(InventoryCount.status, func.count(InventoryCount.id))
            .group_by(InventoryCount.status)
        )
        by_status = {status.value: 0 for status in InventoryCountStatus}
        for status, total in result.all():
            by_status[InventoryCountStatus(status).value] = int(total)

        last_approved = await self.db.execute(
            select(func.max(InventoryCount.approved_at))
            .where(InventoryCount.status == InventoryCountStatus.APPROVED)
        )

        return {
            "total": sum(by_status.values()),
            "by_status": by_status,
            "last_count": last_approved.scalar(),
        }

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    async def _generate_count_number(self, offset: int = 0) -> str:
        """Generate count number as <prefix>-<year>-<sequence>"""
        prefix = f"{settings.COUNT_NUMBER_PREFIX}-{date.today().year}"

        result = await self.db.execute(
            select(func.count(InventoryCount.id))
            .where(InventoryCount.count_number.like(f"{prefix}%"))
        )
        sequence = (result.scalar() or 0) + 1 + offset

        return f"{prefix}-{sequence:04d}"

    async def _resolve_inputs(self, count_data: InventoryCountCreate) -> List[Input]:
        query = select(Input).where(Input.is_active == True)

        if count_data.count_type == InventoryCountType.PARTIAL:
            if not count_data.input_ids:
                raise BadRequestError("Debe indicar los insumos para un conteo parcial")
            query = query.where(Input.id.in_(count_data.input_ids))

        result = await self.db.execute(
            query.order_by(Input.name).execution_options(populate_existing=True)
        )
        return result.scalars().all()

    async def create_inventory_count(
        self,
        count_data: InventoryCountCreate,
        counted_by_id: Optional[int] = None,
        counted_by_name: Optional[str] = None,
    ) -> InventoryCount:
        """Create a count in DRAFT with one snapshot line per input to count"""
        for attempt in range(settings.COUNT_NUMBER_MAX_RETRIES):
            inputs = await self._resolve_inputs(count_data)
            if not inputs:
                raise BadRequestError("No hay insumos para contar")

            count_number = await self._generate_count_number(offset=attempt)

            inventory_count = InventoryCount(
                count_number=count_number,
                count_type=count_data.count_type,
                status=InventoryCountStatus.DRAFT,
                count_date=count_data.count_date or date.today(),
                counted_by_id=counted_by_id,
                counted_by_name=counted_by_name,
                notes=count_data.notes,
                total_items=len(inputs),
                items_with_diff=0,
                total_diff_value=Decimal("0"),
            )

            try:
                self.db.add(inventory_count)
                await self.db.flush()

                self.db.add_all([
                    InventoryCountItem(
                        inventory_count_id=inventory_count.id,
                        input_id=input_obj.id,
                        input_code=input_obj.code,
                        input_name=input_obj.name,
                        unit_of_measure=input_obj.unit_of_measure,
                        unit_cost=input_obj.unit_cost or Decimal("0"),
                        system_quantity=input_obj.current_stock or Decimal("0"),
                        counted_quantity=None,
                        difference=None,
                        difference_value=None,
                        is_counted=False,
                    )
                    for input_obj in inputs
                ])
                await self.db.commit()
            except IntegrityError:
                await self.db.rollback()
                logger.warning(f"Count number {count_number} already taken, retrying")
                continue
            except Exception as e:
                await self.db.rollback()
                logger.error(f"Error creating inventory count: {str(e)}")
                raise

            logger.info(
                f"Inventory count {count_number} created ({count_data.count_type.value}, "
                f"{len(inputs)} items) by user {counted_by_id}"
            )
            return await self.get_count(inventory_count.id)

        raise CountNumberConflictError(
            f"No se pudo asignar un número de conteo tras {settings.COUNT_NUMBER_MAX_RETRIES} intentos"
        )

    # ------------------------------------------------------------------
    # Workflow
    # ------------------------------------------------------------------

    async def _get_header(self, count_id: int) -> InventoryCount:
        result = await self.db.execute(
            select(InventoryCount)
            .where(InventoryCount.id == count_id)
            .execution_options(populate_existing=True)
        )
        inventory_count = result.scalar_one_or_none()
        if not inventory_count:
            raise NotFoundError(COUNT_NOT_FOUND)
        return inventory_count

    async def _commit(self, action: str) -> None:
        try:
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error on inventory count {action}: {str(e)}")
            raise

    async def start_count(self, count_id: int) -> InventoryCount:
        inventory_count = await self._get_header(count_id)

        if inventory_count.status != InventoryCountStatus.DRAFT:
            raise BadRequestError("Solo se pueden iniciar conteos en estado borrador")

        inventory_count.status = InventoryCountStatus.IN_PROGRESS
        await self._commit("start")

        logger.info(f"Inventory count {inventory_count.count_number} started")
        return await self.get_count(count_id)

    async def update_item_count(
        self,
        count_id: int,
        item_id: int,
        item_data: InventoryCountItemUpdate,
    ) -> InventoryCountItem:
        """Record the physical quantity for one line and derive its variance"""
        inventory_count = await self._get_header(count_id)

        if inventory_count.status not in EDITABLE_STATUSES:
            raise BadRequestError("No se pueden modificar conteos que no estén en borrador o en progreso")

        result = await self.db.execute(
            select(InventoryCountItem).where(
                and_(
                    InventoryCountItem.id == item_id,
                    InventoryCountItem.inventory_count_id == count_id,
                )
            )
        )
        item = result.scalar_one_or_none()
        if not item:
            raise NotFoundError(ITEM_NOT_FOUND)

        counted_quantity = Decimal(item_data.counted_quantity).quantize(QUANTITY_STEP, rounding=ROUND_HALF_UP)
        difference = counted_quantity - Decimal(item.system_quantity)

        item.counted_quantity = counted_quantity
        item.difference = difference
        item.difference_value = (difference * Decimal(item.unit_cost)).quantize(VALUE_STEP, rounding=ROUND_HALF_UP)
        item.is_counted = True
        if item_data.notes is not None:
            item.notes = item_data.notes

        # Recording the first quantity moves a draft into progress
        if inventory_count.status == InventoryCountStatus.DRAFT:
            inventory_count.status = InventoryCountStatus.IN_PROGRESS

        await self._commit("item update")
        await self.db.refresh(item)
        return item

    async def submit_for_approval(self, count_id: int) -> InventoryCount:
        inventory_count = await self.get_count(count_id)

        if inventory_count.status != InventoryCountStatus.IN_PROGRESS:
            raise BadRequestError("Solo se pueden enviar a aprobación conteos en progreso")

        uncounted = [item for item in inventory_count.items if not item.is_counted]
        if uncounted:
            raise BadRequestError(f"Hay {len(uncounted)} item(s) sin contar")

        items_with_diff = sum(
            1 for item in inventory_count.items
            if item.difference is not None and item.difference != 0
        )
        total_diff_value = sum(
            (abs(item.difference_value) for item in inventory_count.items if item.difference_value),
            Decimal("0"),
        )

        inventory_count.status = InventoryCountStatus.PENDING_APPROVAL
        inventory_count.items_with_diff = items_with_diff
        inventory_count.total_diff_value = total_diff_value
        await self._commit("submit")

        logger.info(
            f"Inventory count {inventory_count.count_number} submitted for approval "
            f"({items_with_diff} items with difference, value {total_diff_value})"
        )
        return await self.get_count(count_id)

    async def approve_count(
        self,
        count_id: int,
        approved_by_id: Optional[int],
        approved_by_name: Optional[str],
    ) -> InventoryCount:
        """Approve a pending count and apply every variance to the stock ledger.

        The status change and all ledger effects share one transaction, so a
        failure on any line leaves the count pending with no stock touched.
        """
        inventory_count = await self.get_count(count_id)

        if inventory_count.status != InventoryCountStatus.PENDING_APPROVAL:
            raise BadRequestError("Solo se pueden aprobar conteos pendientes de aprobación")

        count_number = inventory_count.count_number
        adjusted_items = [
            item for item in inventory_count.items
            if item.difference is not None and item.difference != 0
        ]

        try:
            result = await self.db.execute(
                update(InventoryCount)
                .where(
                    and_(
                        InventoryCount.id == count_id,
                        InventoryCount.status == InventoryCountStatus.PENDING_APPROVAL,
                    )
                )
                .values(
                    status=InventoryCountStatus.APPROVED,
                    approved_by_id=approved_by_id,
                    approved_by_name=approved_by_name,
                    approved_at=datetime.utcnow(),
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                # Someone else moved the count out of PENDING_APPROVAL first
                raise BadRequestError("Solo se pueden aprobar conteos pendientes de aprobación")

            for item in adjusted_items:
                await self.ledger.apply_adjustment(
                    input_id=item.input_id,
                    difference=Decimal(item.difference),
                    unit_cost=Decimal(item.unit_cost),
                    counted_quantity=item.counted_quantity,
                    reference_id=count_id,
                    reference_number=count_number,
                    notes=item.notes,
                )

            await self.db.commit()
        except BadRequestError:
            await self.db.rollback()
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error approving inventory count {count_number}: {str(e)}")
            raise

        logger.info(
            f"Inventory count {count_number} approved by user {approved_by_id} "
            f"({len(adjusted_items)} adjustments applied)"
        )
        return await self.get_count(count_id)

    async def cancel_count(self, count_id: int) -> InventoryCount:
        inventory_count = await self._get_header(count_id)

        if inventory_count.status == InventoryCountStatus.APPROVED:
            raise BadRequestError("No se pueden cancelar conteos aprobados")

        inventory_count.status = InventoryCountStatus.CANCELLED
        await self._commit("cancel")

        logger.info(f"Inventory count {inventory_count.count_number} cancelled")
        return await self.get_count(count_id)

    async def delete_count(self, count_id: int) -> None:
        inventory_count = await self.get_count(count_id)

        if inventory_count.status not in DELETABLE_STATUSES:
            raise BadRequestError("Solo se pueden eliminar conteos en borrador o cancelados")

        count_number = inventory_count.count_number
        await self.db.delete(inventory_count)
        await self._commit("delete")

        logger.info(f"Inventory count {count_number} deleted")
