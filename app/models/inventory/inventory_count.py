from sqlalchemy import Column, Integer, String, DateTime, Text, Numeric, Enum as SQLEnum, Date
from sqlalchemy.orm import relationship
from app.db.base import BaseModel
from app.models.shared.enums import InventoryCountStatus, InventoryCountType

class InventoryCount(BaseModel):
    __tablename__ = 'inventory_counts'
    
    count_number = Column(String(50), unique=True, nullable=False)
    count_type = Column(SQLEnum(InventoryCountType), nullable=False, default=InventoryCountType.FULL)
    status = Column(SQLEnum(InventoryCountStatus), nullable=False, default=InventoryCountStatus.DRAFT, index=True)
    count_date = Column(Date, nullable=False)
    counted_by_id = Column(Integer)  # User ID
    counted_by_name = Column(String(255))
    approved_by_id = Column(Integer)  # User ID
    approved_by_name = Column(String(255))
    approved_at = Column(DateTime(timezone=True))
    notes = Column(Text)
    total_items = Column(Integer, nullable=False, default=0)
    items_with_diff = Column(Integer, nullable=False, default=0)
    total_diff_value = Column(Numeric(14, 4), nullable=False, default=0)
    
    # Relationships
    items = relationship(
        "InventoryCountItem",
        back_populates="inventory_count",
        cascade="all, delete-orphan",
        order_by="InventoryCountItem.input_name",
    )
