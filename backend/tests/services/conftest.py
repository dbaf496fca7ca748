"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so readiness probes see the test engine

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (aiosqlite uses a StaticPool for :memory:, so every session shares one database)
    - Seed helpers go through the public API so tests exercise real dispatch
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from mockapi.db.base import Base
from mockapi.infrastructure.database import get_db, DatabaseSessionManager
import mockapi.infrastructure.database as db_module
import mockapi.models  # noqa: F401
from mockapi.main import app


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def declare_endpoint(client):
    """Declare an endpoint through the management API; returns its JSON."""
    async def _declare(
        path: str, method: str = "POST", fields: list | None = None, **extra,
    ) -> dict:
        res = await client.post("/api/endpoints", json={
            "name": extra.pop("name", f"{method} {path}"),
            "path": path,
            "method": method,
            "fields": fields or [],
            **extra,
        })
        assert res.status_code in (200, 201), res.text
        return res.json()

    return _declare


@pytest.fixture
def people_fields():
    return [
        {"name": "name", "type": "string", "required": True, "filterable": True},
        {"name": "age", "type": "number", "filterable": True},
        {"name": "email", "type": "string"},
    ]
