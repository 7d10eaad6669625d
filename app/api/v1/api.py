from fastapi import APIRouter
from app.api.v1.endpoints.inventory import inventory_counts, inventory_movements

api_router = APIRouter()

# Inventory routes
api_router.include_router(inventory_counts.router, prefix="/inventory-counts", tags=["InventoryCounts"])
api_router.include_router(inventory_movements.router, prefix="/inventory-movements", tags=["InventoryMovements"])
