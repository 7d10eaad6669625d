# app/models/auth/__init__.py

# Import models in dependency order
from .role import Role
from .user import User

__all__ = [
    "Role",
    "User",
]
