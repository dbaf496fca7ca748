"""Table Management — tables that union several endpoints into one dataset."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mockapi.config import get_settings
from mockapi.core.domain_types import TableId
from mockapi.infrastructure.database import get_db
from mockapi.infrastructure.identifiers import IdGenerator, get_id_generator
from mockapi.schemas.table import TableCreate, TableUpdate
from mockapi.services.table_registry import TableRegistry

logger = logging.getLogger(__name__)
router = APIRouter(prefix=f"{get_settings().api_prefix}/tables", tags=["tables"])


def _registry(
    db: AsyncSession = Depends(get_db),
    ids: IdGenerator = Depends(get_id_generator),
) -> TableRegistry:
    return TableRegistry(db, ids)


@router.get("")
async def list_tables(registry: TableRegistry = Depends(_registry)):
    """Tables newest-first with member endpoints and aggregated data."""
    return await registry.list_tables()


@router.post("")
async def create_table(
    body: TableCreate, registry: TableRegistry = Depends(_registry),
):
    return await registry.create_table(body)


@router.put("/{table_id}")
async def update_table(
    table_id: str,
    body: TableUpdate,
    registry: TableRegistry = Depends(_registry),
):
    """Partial update; endpointIds, when given, replaces the association set."""
    return await registry.update_table(TableId(table_id), body)


@router.delete("/{table_id}")
async def delete_table(table_id: str, registry: TableRegistry = Depends(_registry)):
    return await registry.delete_table(TableId(table_id))
