import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import joinedload
from app.models.auth.user import User

logger = logging.getLogger(__name__)

class UserService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID together with their role"""
        result = await self.session.execute(
            select(User)
            .options(joinedload(User.role))
            .where(User.id == user_id)
        )
        return result.scalar_one_or_none()

