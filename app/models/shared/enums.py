from enum import Enum

# Enums
class InventoryCountStatus(str, Enum):
    DRAFT = "DRAFT"
    IN_PROGRESS = "IN_PROGRESS"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    APPROVED = "APPROVED"
    CANCELLED = "CANCELLED"

class InventoryCountType(str, Enum):
    FULL = "FULL"              # All active inputs
    PARTIAL = "PARTIAL"        # Caller-selected inputs

class MovementType(str, Enum):
    ENTRADA = "ENTRADA"        # Inbound
    SALIDA = "SALIDA"          # Outbound
    AJUSTE = "AJUSTE"          # Signed adjustment
    RESERVA = "RESERVA"        # Reservation
    LIBERACION = "LIBERACION"  # Reservation release
