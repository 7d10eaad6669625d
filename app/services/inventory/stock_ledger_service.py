import logging
from datetime import datetime, time
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import and_, desc, update
from app.core.config import settings
from app.models.inventory.input import Input
from app.models.inventory.input_batch import InputBatch
from app.models.inventory.input_batch_movement import InputBatchMovement
from app.models.shared.enums import MovementType
from app.schemas.inventory.inventory_movement import InventoryMovementFilters

logger = logging.getLogger(__name__)

INVENTORY_COUNT_REFERENCE = "inventory_count"


class StockLedgerService:
    """Per-input stock, batch breakdown and the movement log.

    Writes here only stage changes on the session; the caller owns the
    transaction and decides when to commit or roll back.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def increment_stock(self, input_id: int, quantity: Decimal) -> None:
        """Add a signed quantity to the input's current stock"""
        await self.db.execute(
            update(Input)
            .where(Input.id == input_id)
            .values(current_stock=Input.current_stock + quantity)
        )

    async def get_latest_active_batch(self, input_id: int) -> Optional[InputBatch]:
        result = await self.db.execute(
            select(InputBatch)
            .where(and_(InputBatch.input_id == input_id, InputBatch.is_active == True))
            .order_by(desc(InputBatch.created_at), desc(InputBatch.id))
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def apply_adjustment(
        self,
        input_id: int,
        difference: Decimal,
        unit_cost: Decimal,
        counted_quantity: Optional[Decimal],
        reference_id: int,
        reference_number: str,
        notes: Optional[str] = None,
    ) -> InputBatchMovement:
        """Reconcile one counted line against the ledger.

        Moves the input's stock by ``difference``, lands the same delta on the
        newest active batch (or opens an adjustment batch holding the counted
        quantity when the input has none) and appends an AJUSTE movement.
        """
        await self.increment_stock(input_id, difference)

        batch = await self.get_latest_active_batch(input_id)
        if batch is None:
            quantity = counted_quantity or Decimal("0")
            batch = InputBatch(
                input_id=input_id,
                batch_number=f"AJUSTE-{reference_number}",
                initial_quantity=quantity,
                current_quantity=quantity,
                reserved_quantity=Decimal("0"),
                unit_cost=unit_cost,
                total_cost=quantity * unit_cost,
                is_active=True,
                notes=f"Lote creado automáticamente por conteo físico {reference_number}",
            )
            self.db.add(batch)
            await self.db.flush()
        else:
            await self.db.execute(
                update(InputBatch)
                .where(InputBatch.id == batch.id)
                .values(current_quantity=InputBatch.current_quantity + difference)
            )

        movement = InputBatchMovement(
            input_id=input_id,
            input_batch_id=batch.id,
            movement_type=MovementType.AJUSTE,
            quantity=difference,
            reference_type=INVENTORY_COUNT_REFERENCE,
            reference_id=reference_id,
            reason=f"Ajuste por conteo físico {reference_number}",
            notes=notes,
        )
        self.db.add(movement)
        await self.db.flush()

        logger.info(
            f"Stock adjusted for input {input_id}: {difference:+} "
            f"(batch {batch.batch_number}, count {reference_number})"
        )
        return movement

    async def list_movements(self, filters: Optional[InventoryMovementFilters] = None) -> List[InputBatchMovement]:
        """Get movements with optional filters, newest first"""
        query = select(InputBatchMovement)

        conditions = []
        if filters:
            if filters.input_id:
                conditions.append(InputBatchMovement.input_id == filters.input_id)
            if filters.movement_type:
                conditions.append(InputBatchMovement.movement_type == filters.movement_type)
            if filters.reference_type:
                conditions.append(InputBatchMovement.reference_type == filters.reference_type)
            if filters.reference_id:
                conditions.append(InputBatchMovement.reference_id == filters.reference_id)
            if filters.from_date:
                conditions.append(InputBatchMovement.created_at >= datetime.combine(filters.from_date, time.min))
            if filters.to_date:
                conditions.append(InputBatchMovement.created_at <= datetime.combine(filters.to_date, time.max))

        if conditions:
            query = query.where(and_(*conditions))

        query = query.order_by(
            desc(InputBatchMovement.created_at), desc(InputBatchMovement.id)
        ).limit(settings.MOVEMENTS_LIST_LIMIT)

        result = await self.db.execute(query)
        return result.scalars().all()
