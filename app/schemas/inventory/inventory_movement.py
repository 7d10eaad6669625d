from typing import Optional
from datetime import datetime, date
from app.models.shared.enums import MovementType
from app.schemas.common.response import CamelModel, DecimalNumber

class InventoryMovementResponse(CamelModel):
    id: int
    input_id: int
    input_batch_id: int
    movement_type: MovementType
    quantity: DecimalNumber
    reference_type: Optional[str] = None
    reference_id: Optional[int] = None
    reason: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

class InventoryMovementFilters(CamelModel):
    input_id: Optional[int] = None
    movement_type: Optional[MovementType] = None
    reference_type: Optional[str] = None
    reference_id: Optional[int] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None
