from sqlalchemy import Column, String, Boolean, Text, Numeric
from sqlalchemy.orm import relationship
from app.db.base import BaseModel

class Input(BaseModel):
    __tablename__ = 'inputs'
    
    code = Column(String(50), unique=True, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text)
    unit_of_measure = Column(String(20), nullable=False, default="UNIDAD")
    unit_cost = Column(Numeric(12, 2), nullable=False, default=0)
    current_stock = Column(Numeric(12, 2), nullable=False, default=0)
    min_stock = Column(Numeric(12, 2), default=0)
    is_active = Column(Boolean, default=True, index=True)
    
    # Relationships
    batches = relationship("InputBatch", back_populates="input")
    movements = relationship("InputBatchMovement", back_populates="input")
