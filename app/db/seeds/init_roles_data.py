"""
Role seed data (async, idempotent)
Run:  python -m app.db.seeds.init_roles_data
"""

import asyncio
import logging
from typing import Dict, List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from app.models.auth.role import Role

logger = logging.getLogger(__name__)

INVENTORY_VIEW = "inventory.view"
INVENTORY_MANAGE = "inventory.manage"

roles_data: List[Dict] = [
    {
        "name": "super_admin",
        "description": "Super Administrator with full system access",
        "permissions": ["system.admin"],
        "is_system_role": True,
    },
    {
        "name": "admin",
        "description": "Administrator managing the back office",
        "permissions": ["inventory.admin"],
    },
    {
        "name": "inventory_manager",
        "description": "Runs physical counts and approves stock adjustments",
        "permissions": [INVENTORY_VIEW, INVENTORY_MANAGE],
    },
    {
        "name": "inventory_viewer",
        "description": "Read-only access to counts and stock movements",
        "permissions": [INVENTORY_VIEW],
    },
]


async def seed_roles(session: AsyncSession) -> Dict[str, Role]:
    """Create missing roles and refresh permissions of existing ones"""
    roles: Dict[str, Role] = {}
    for data in roles_data:
        result = await session.execute(select(Role).where(Role.name == data["name"]))
        role = result.scalar_one_or_none()
        if role is None:
            role = Role(**data)
            session.add(role)
            logger.info(f"Role created: {data['name']}")
        else:
            role.permissions = list(data["permissions"])
            role.description = data["description"]
        roles[data["name"]] = role

    await session.commit()
    return roles


async def main():
    from app.core.database import async_session_maker

    async with async_session_maker() as session:
        roles = await seed_roles(session)
    print(f"✅ {len(roles)} roles seeded")


if __name__ == "__main__":
    asyncio.run(main())
