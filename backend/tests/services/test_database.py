"""Database tests — unit_of_work commit/rollback semantics and readiness.

Tests cover:
    - Successful unit commits
    - Domain exceptions roll back and propagate unchanged
    - SQLAlchemy errors roll back and surface as DatabaseError
    - health_check on a live engine
"""

import pytest
from sqlalchemy import select

from mockapi.core.errors import DatabaseError, RouteNotFoundError
from mockapi.infrastructure.database import DatabaseSessionManager, unit_of_work
from mockapi.models.data_table import DataTable


def _table(table_id: str, name: str = "T") -> DataTable:
    return DataTable(id=table_id, name=name, fields=[])


async def _names(session_factory) -> list[str]:
    async with session_factory() as session:
        result = await session.execute(select(DataTable.name))
        return list(result.scalars().all())


async def test_unit_commits(test_db, test_session_factory):
    async with unit_of_work(test_db, "create"):
        test_db.add(_table("1", "Kept"))
    assert await _names(test_session_factory) == ["Kept"]


async def test_domain_error_rolls_back(test_db, test_session_factory):
    with pytest.raises(RouteNotFoundError):
        async with unit_of_work(test_db, "create"):
            test_db.add(_table("1", "Dropped"))
            await test_db.flush()
            raise RouteNotFoundError("GET", "/x")
    assert await _names(test_session_factory) == []


async def test_integrity_error_becomes_database_error(test_db, test_session_factory):
    async with unit_of_work(test_db, "seed"):
        test_db.add(_table("1", "Original"))

    with pytest.raises(DatabaseError) as exc_info:
        async with unit_of_work(test_db, "duplicate"):
            test_db.add(_table("1", "Clash"))
            await test_db.flush()
    assert exc_info.value.http_status == 500
    assert exc_info.value.operation == "duplicate"
    assert await _names(test_session_factory) == ["Original"]


async def test_health_check(test_engine, test_session_factory):
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    assert await manager.health_check() is True
