from app.models.auth.role import Role
from app.models.auth.user import User
from app.models.inventory.input import Input
from app.models.inventory.input_batch import InputBatch
from app.models.inventory.input_batch_movement import InputBatchMovement
from app.models.inventory.inventory_count import InventoryCount
from app.models.inventory.inventory_count_item import InventoryCountItem
