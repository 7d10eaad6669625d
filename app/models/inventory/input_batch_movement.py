from sqlalchemy import Column, Integer, String, Text, Numeric, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from app.db.base import BaseModel
from app.models.shared.enums import MovementType

class InputBatchMovement(BaseModel):
    __tablename__ = 'input_batch_movements'
    
    input_id = Column(Integer, ForeignKey('inputs.id'), nullable=False, index=True)
    input_batch_id = Column(Integer, ForeignKey('input_batches.id'), nullable=False)
    movement_type = Column(SQLEnum(MovementType), nullable=False)
    quantity = Column(Numeric(12, 2), nullable=False)  # Signed for AJUSTE
    reference_type = Column(String(50))  # inventory_count, purchase_order, ...
    reference_id = Column(Integer)
    reason = Column(String(255))
    notes = Column(Text)
    
    # Relationships
    input = relationship("Input", back_populates="movements")
    batch = relationship("InputBatch", back_populates="movements")
