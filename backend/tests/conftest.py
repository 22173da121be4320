from __future__ import annotations

import os
import sys
from contextlib import asynccontextmanager
from decimal import Decimal
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-key-long-enough-for-hs256-signing"

from core.auth import current_active_user  # noqa: E402
from db.database import Base, get_async_session  # noqa: E402
from db.sweet import Sweet  # noqa: E402
from db.transaction import SweetTransaction  # noqa: E402,F401
from db.users import User  # noqa: E402
from main import app  # noqa: E402
from services.inventory import ActorContext  # noqa: E402


@pytest.fixture()
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture()
def session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture()
async def db_session(session_maker):
    async with session_maker() as session:
        yield session


async def _create_user(session_maker, *, email: str, is_superuser: bool) -> User:
    async with session_maker() as session:
        user = User(
            email=email,
            hashed_password="not-used",
            full_name=email.split("@")[0],
            is_active=True,
            is_superuser=is_superuser,
            is_verified=True,
        )
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user


@pytest.fixture()
async def admin_user(session_maker) -> User:
    return await _create_user(session_maker, email="admin@example.com", is_superuser=True)


@pytest.fixture()
async def customer_user(session_maker) -> User:
    return await _create_user(session_maker, email="customer@example.com", is_superuser=False)


@pytest.fixture()
def admin_actor(admin_user) -> ActorContext:
    return ActorContext(actor_id=admin_user.id, is_admin=True)


@pytest.fixture()
def customer_actor(customer_user) -> ActorContext:
    return ActorContext(actor_id=customer_user.id, is_admin=False)


@pytest.fixture()
def make_sweet(session_maker):
    async def _make(name: str = "Dark Chocolate Truffle", category: str = "Chocolate", price: str = "2.50", quantity: int = 10) -> Sweet:
        async with session_maker() as session:
            sweet = Sweet(name=name, category=category, price=Decimal(price), quantity=quantity)
            session.add(sweet)
            await session.commit()
            await session.refresh(sweet)
            return sweet

    return _make


@pytest.fixture()
async def sweet(make_sweet) -> Sweet:
    return await make_sweet()


@pytest.fixture()
def api_client(session_maker):
    """Factory for an httpx client against the app, optionally authenticated as `user`."""

    async def override_get_async_session():
        async with session_maker() as session:
            yield session

    @asynccontextmanager
    async def _client(user: User | None = None):
        app.dependency_overrides[get_async_session] = override_get_async_session
        if user is not None:
            app.dependency_overrides[current_active_user] = lambda: user
        try:
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                yield client
        finally:
            app.dependency_overrides.clear()

    return _client
