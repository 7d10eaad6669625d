from sqlalchemy import Column, Integer, String, Boolean, Text, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import BaseModel

class InputBatch(BaseModel):
    __tablename__ = 'input_batches'
    
    input_id = Column(Integer, ForeignKey('inputs.id'), nullable=False, index=True)
    batch_number = Column(String(80), nullable=False)
    initial_quantity = Column(Numeric(12, 2), nullable=False, default=0)
    current_quantity = Column(Numeric(12, 2), nullable=False, default=0)
    reserved_quantity = Column(Numeric(12, 2), nullable=False, default=0)
    unit_cost = Column(Numeric(12, 2), nullable=False, default=0)
    total_cost = Column(Numeric(14, 4), nullable=False, default=0)
    is_active = Column(Boolean, default=True)
    notes = Column(Text)
    
    # Relationships
    input = relationship("Input", back_populates="batches")
    movements = relationship("InputBatchMovement", back_populates="batch")
