from sqlalchemy import Column, String, Text, Boolean, JSON
from sqlalchemy.orm import relationship
from app.db.base import BaseModel

class Role(BaseModel):
    __tablename__ = "roles"

    name = Column(String(100), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    permissions = Column(JSON, nullable=False, default=list)  # ["inventory.view", ...]
    is_system_role = Column(Boolean, default=False)

    # Relationships
    users = relationship("User", back_populates="role")

    def __repr__(self):
        return f"<Role {self.name}>"
