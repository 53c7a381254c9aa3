import os
import uuid
from typing import AsyncGenerator

# Settings are read at import time; point them at a throwaway database first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from goalquest.main import app
from goalquest.api.deps import get_current_user
from goalquest.core.auth import User
from goalquest.core.database import Base, get_async_session


# 1. Database: one in-memory SQLite database per test
@pytest.fixture(scope="function")
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)

    await engine.dispose()


@pytest.fixture(scope="function")
async def user(session_factory) -> User:
    async with session_factory() as session:
        user = User(
            id=uuid.uuid4(),
            email="quester@example.com",
            hashed_password="not-a-real-hash",
            is_active=True,
            is_superuser=False,
            is_verified=True,
        )
        session.add(user)
        await session.commit()
    return user


def _override_session(session_factory):
    async def override() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session
    return override


# 2. Clients
@pytest.fixture(scope="function")
async def client(session_factory, user) -> AsyncGenerator[AsyncClient, None]:
    """Client authenticated as ``user`` through a dependency override."""
    async def override_user():
        return user

    app.dependency_overrides[get_async_session] = _override_session(session_factory)
    app.dependency_overrides[get_current_user] = override_user

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def anonymous_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Client that goes through the real bearer-token dependency."""
    app.dependency_overrides[get_async_session] = _override_session(session_factory)

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
