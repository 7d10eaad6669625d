from pydantic import BaseModel, Field, validator
from typing import Optional, List
from datetime import datetime, date
from decimal import Decimal
from app.models.shared.enums import InventoryCountStatus, InventoryCountType
from app.schemas.common.response import CamelModel, DecimalNumber

class InventoryCountItemResponse(CamelModel):
    id: int
    input_id: int
    input_code: str
    input_name: str
    unit_of_measure: str
    unit_cost: DecimalNumber
    system_quantity: DecimalNumber
    counted_quantity: Optional[DecimalNumber] = None
    difference: Optional[DecimalNumber] = None
    difference_value: Optional[DecimalNumber] = None
    is_counted: bool
    notes: Optional[str] = None

class InventoryCountResponse(CamelModel):
    id: int
    count_number: str
    count_type: InventoryCountType
    status: InventoryCountStatus
    count_date: date
    counted_by_id: Optional[int] = None
    counted_by_name: Optional[str] = None
    approved_by_id: Optional[int] = None
    approved_by_name: Optional[str] = None
    approved_at: Optional[datetime] = None
    notes: Optional[str] = None
    total_items: int
    items_with_diff: int
    total_diff_value: DecimalNumber
    items: List[InventoryCountItemResponse] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class InventoryCountCreate(CamelModel):
    count_type: InventoryCountType
    count_date: Optional[date] = None
    notes: Optional[str] = None
    input_ids: Optional[List[int]] = None  # Only used by PARTIAL counts

class InventoryCountItemUpdate(CamelModel):
    # Presence is checked by the endpoint so a missing value answers 400
    counted_quantity: Optional[Decimal] = None
    notes: Optional[str] = None

    @validator("counted_quantity")
    def validate_counted_quantity(cls, v):
        if v is not None and v < 0:
            raise ValueError("La cantidad contada no puede ser negativa")
        return v

class InventoryCountFilters(CamelModel):
    status: Optional[InventoryCountStatus] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None

class InventoryCountStatusBreakdown(BaseModel):
    # Status keys are already in their wire form
    DRAFT: int = 0
    IN_PROGRESS: int = 0
    PENDING_APPROVAL: int = 0
    APPROVED: int = 0
    CANCELLED: int = 0

class InventoryCountStats(CamelModel):
    total: int
    by_status: InventoryCountStatusBreakdown
    last_count: Optional[datetime] = None
