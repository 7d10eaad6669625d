from sqlalchemy import Column, Integer, String, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import BaseModel

class User(BaseModel):
    __tablename__ = "users"

    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=False)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=True)
    is_active = Column(Boolean, default=True)
    is_superuser = Column(Boolean, default=False)

    # Relationships
    role = relationship("Role", back_populates="users", lazy="joined")

    @property
    def permission_names(self):
        if self.role is None or not self.role.permissions:
            return []
        return list(self.role.permissions)

    def __repr__(self):
        return f"<User {self.email}>"
