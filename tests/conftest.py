"""Shared test fixtures."""

import os

# The application engine must not need a running PostgreSQL server
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SECRET_KEY"] = "test-secret-for-testing"

import uuid
from typing import Dict, List, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.permissions import PERMISSIONS, RequestContext
from app.core.security import create_access_token
from app.db.base import Base, get_db
from app.db.models import DailySale, Role, Staff, User
from app.server import app as application


@pytest.fixture()
async def engine(tmp_path):
    """File-backed SQLite database, so concurrent sessions use separate connections."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'incentives.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture()
async def staff(db) -> Staff:
    member = Staff(id=uuid.uuid4(), name="Aiko Tanaka")
    db.add(member)
    await db.commit()
    return member


async def _make_user(db: AsyncSession, email: str, permissions: Optional[List[str]]) -> User:
    role = None
    if permissions is not None:
        role = Role(id=uuid.uuid4(), name=f"role-{email}", permissions=permissions)
        db.add(role)
    user = User(id=uuid.uuid4(), email=email, role=role)
    db.add(user)
    await db.commit()
    return user


@pytest.fixture()
async def manager(db) -> User:
    return await _make_user(db, "manager@example.com", [PERMISSIONS.STAFF_INCENTIVES_MANAGE])


@pytest.fixture()
async def receptionist(db) -> User:
    return await _make_user(db, "front-desk@example.com", ["appointments:read"])


@pytest.fixture()
async def roleless_user(db) -> User:
    return await _make_user(db, "nobody@example.com", None)


@pytest.fixture()
def manager_context(manager) -> RequestContext:
    return RequestContext(user_id=manager.id, permissions=[PERMISSIONS.STAFF_INCENTIVES_MANAGE])


@pytest.fixture()
def auth_header():
    def _header(user: User) -> Dict[str, str]:
        token = create_access_token({"sub": str(user.id)})
        return {"Authorization": f"Bearer {token}"}
    return _header


@pytest.fixture()
async def client(session_factory):
    """HTTP client against the app, with requests served from the test database."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=application)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    application.dependency_overrides.clear()


@pytest.fixture()
def count_daily_sales(session_factory):
    async def _count() -> int:
        async with session_factory() as session:
            result = await session.execute(select(func.count()).select_from(DailySale))
            return result.scalar_one()
    return _count
