from sqlalchemy import Column, Integer, String, Boolean, Text, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import BaseModel

class InventoryCountItem(BaseModel):
    __tablename__ = 'inventory_count_items'
    
    inventory_count_id = Column(Integer, ForeignKey('inventory_counts.id', ondelete="CASCADE"), nullable=False, index=True)
    input_id = Column(Integer, ForeignKey('inputs.id'), nullable=False)
    # Snapshot of the input when the count was created
    input_code = Column(String(50), nullable=False)
    input_name = Column(String(200), nullable=False)
    unit_of_measure = Column(String(20), nullable=False)
    unit_cost = Column(Numeric(12, 2), nullable=False, default=0)
    system_quantity = Column(Numeric(12, 2), nullable=False)
    counted_quantity = Column(Numeric(12, 2))
    difference = Column(Numeric(12, 2))
    difference_value = Column(Numeric(14, 4))
    is_counted = Column(Boolean, nullable=False, default=False)
    notes = Column(Text)
    
    # Relationships
    inventory_count = relationship("InventoryCount", back_populates="items")
    input = relationship("Input")
