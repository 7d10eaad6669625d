import os

# Settings are read at import time, so the test environment goes first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["LOG_TO_FILE"] = "false"

from decimal import Decimal
from typing import AsyncGenerator
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.models as _all_models  # noqa: F401
from main import app
from app.core.database import Base, get_async_session
from app.core.security import create_access_token
from app.db.seeds.init_roles_data import seed_roles
from app.models.auth.user import User
from app.models.inventory.input import Input
from app.models.inventory.input_batch import InputBatch

# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


@pytest.fixture
async def roles(db_session):
    return await seed_roles(db_session)


async def _create_user(session: AsyncSession, email: str, full_name: str, role_id=None, **kwargs) -> User:
    user = User(email=email, full_name=full_name, role_id=role_id, is_active=True, **kwargs)
    session.add(user)
    await session.commit()
    return user


@pytest.fixture
async def manager_user(db_session, roles) -> User:
    return await _create_user(
        db_session, "gestor@tienda.test", "Laura Gestora", roles["inventory_manager"].id
    )


@pytest.fixture
async def viewer_user(db_session, roles) -> User:
    return await _create_user(
        db_session, "lector@tienda.test", "Pablo Lector", roles["inventory_viewer"].id
    )


@pytest.fixture
def make_input(db_session):
    """Factory for ledger inputs"""
    counter = {"n": 0}

    async def _make_input(
        name: str,
        current_stock: str = "0",
        unit_cost: str = "0",
        is_active: bool = True,
        unit_of_measure: str = "KG",
    ) -> Input:
        counter["n"] += 1
        input_obj = Input(
            code=f"INS-{counter['n']:03d}",
            name=name,
            unit_of_measure=unit_of_measure,
            unit_cost=Decimal(unit_cost),
            current_stock=Decimal(current_stock),
            is_active=is_active,
        )
        db_session.add(input_obj)
        await db_session.commit()
        return input_obj

    return _make_input


@pytest.fixture
def make_batch(db_session):
    async def _make_batch(input_obj: Input, batch_number: str, quantity: str, unit_cost: str = "0") -> InputBatch:
        batch = InputBatch(
            input_id=input_obj.id,
            batch_number=batch_number,
            initial_quantity=Decimal(quantity),
            current_quantity=Decimal(quantity),
            unit_cost=Decimal(unit_cost),
            total_cost=Decimal(quantity) * Decimal(unit_cost),
            is_active=True,
        )
        db_session.add(batch)
        await db_session.commit()
        return batch

    return _make_batch


@pytest.fixture
async def client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """Create test client bound to the test database"""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def auth_headers_for(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def manager_headers(manager_user) -> dict:
    return auth_headers_for(manager_user)


@pytest.fixture
def viewer_headers(viewer_user) -> dict:
    return auth_headers_for(viewer_user)
