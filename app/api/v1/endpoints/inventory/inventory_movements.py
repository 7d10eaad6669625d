from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from app.api.dependencies import require_permission
from app.core.database import get_async_session
from app.models.auth.user import User
from app.models.shared.enums import MovementType
from app.schemas.common.response import ApiResponse
from app.schemas.inventory.inventory_movement import InventoryMovementFilters, InventoryMovementResponse
from app.services.inventory.stock_ledger_service import StockLedgerService

router = APIRouter()

@router.get("/", response_model=ApiResponse[List[InventoryMovementResponse]])
async def get_inventory_movements(
    input_id: Optional[int] = Query(None, alias="inputId"),
    movement_type: Optional[MovementType] = Query(None, alias="movementType"),
    reference_type: Optional[str] = Query(None, alias="referenceType"),
    reference_id: Optional[int] = Query(None, alias="referenceId"),
    from_date: Optional[date] = Query(None, alias="fromDate"),
    to_date: Optional[date] = Query(None, alias="toDate"),
    db: AsyncSession = Depends(get_async_session),
    current_user: User = Depends(require_permission("inventory.view"))
):
    """Get stock movements with optional filters"""
    service = StockLedgerService(db)
    movements = await service.list_movements(
        InventoryMovementFilters(
            input_id=input_id,
            movement_type=movement_type,
            reference_type=reference_type,
            reference_id=reference_id,
            from_date=from_date,
            to_date=to_date,
        )
    )
    return ApiResponse(data=[InventoryMovementResponse.model_validate(m) for m in movements])
