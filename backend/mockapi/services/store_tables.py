"""Table Index — table definitions and their endpoint association edges.

Invariants:
    - A (table, endpoint) pair is stored at most once
    - replace_endpoints() leaves exactly the supplied set (deduplicated, unknown
      endpoint ids dropped), ordered as supplied
    - endpoint_ids() returns members in association order (position, id)
    - first_table_for() picks the oldest association of the endpoint

Design Decisions:
    - replace_endpoints() issues delete-then-insert inside the caller's transaction;
      since the caller commits once, concurrent readers see either the old set or
      the new one, never the empty intermediate state
    - Duplicates are skipped before insert rather than caught as IntegrityError,
      so a duplicate never aborts the surrounding transaction
"""

import logging
from typing import Any, Callable
from datetime import datetime

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from mockapi.core.domain_types import EndpointId, TableId
from mockapi.infrastructure.identifiers import IdGenerator, utc_now
from mockapi.models.data_table import DataTable
from mockapi.models.endpoint import Endpoint
from mockapi.models.table_endpoint import TableEndpoint

logger = logging.getLogger(__name__)

_UPDATABLE = ("name", "description", "fields")


class TableStore:
    """Tables and table-endpoint associations."""

    def __init__(
        self,
        db: AsyncSession,
        ids: IdGenerator,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.db = db
        self._ids = ids
        self._clock = clock

    async def list_all(self) -> list[DataTable]:
        """All tables, newest-first."""
        result = await self.db.execute(
            select(DataTable).order_by(DataTable.created_at.desc(), DataTable.id.desc()),
        )
        return list(result.scalars().all())

    async def get(self, table_id: TableId) -> DataTable | None:
        return await self.db.get(DataTable, table_id)

    async def create(
        self,
        name: str,
        description: str | None,
        fields: list[dict[str, Any]],
    ) -> DataTable:
        table = DataTable(
            id=self._ids.next_id(), name=name, description=description,
            fields=fields, created_at=self._clock(),
        )
        self.db.add(table)
        await self.db.flush()
        logger.info(f"Table created: {name}", extra={"table_id": table.id})
        return table

    async def update(self, table: DataTable, changes: dict[str, Any]) -> DataTable:
        for key in _UPDATABLE:
            if key in changes:
                setattr(table, key, changes[key])
        await self.db.flush()
        return table

    async def delete(self, table_id: TableId) -> bool:
        await self.db.execute(
            delete(TableEndpoint).where(TableEndpoint.table_id == table_id),
        )
        result = await self.db.execute(
            delete(DataTable).where(DataTable.id == table_id),
        )
        return bool(result.rowcount)

    async def endpoint_ids(self, table_id: TableId) -> list[EndpointId]:
        result = await self.db.execute(
            select(TableEndpoint.endpoint_id)
            .where(TableEndpoint.table_id == table_id)
            .order_by(TableEndpoint.position, TableEndpoint.id)
        )
        return [EndpointId(row) for row in result.scalars().all()]

    async def first_table_for(self, endpoint_id: EndpointId) -> TableId | None:
        result = await self.db.execute(
            select(TableEndpoint.table_id)
            .where(TableEndpoint.endpoint_id == endpoint_id)
            .order_by(TableEndpoint.created_at, TableEndpoint.id)
            .limit(1)
        )
        table_id = result.scalar_one_or_none()
        return TableId(table_id) if table_id is not None else None

    async def link(self, table_id: TableId, endpoint_id: EndpointId) -> bool:
        """Append endpoint to the table. False if the pair already exists."""
        existing = await self.db.execute(
            select(TableEndpoint.id)
            .where(TableEndpoint.table_id == table_id)
            .where(TableEndpoint.endpoint_id == endpoint_id)
        )
        if existing.scalar_one_or_none() is not None:
            return False
        count = await self.db.execute(
            select(func.count()).select_from(TableEndpoint)
            .where(TableEndpoint.table_id == table_id)
        )
        self.db.add(TableEndpoint(
            id=self._ids.next_id(), table_id=table_id, endpoint_id=endpoint_id,
            position=count.scalar_one(), created_at=self._clock(),
        ))
        await self.db.flush()
        return True

    async def unlink_endpoint(self, endpoint_id: EndpointId) -> None:
        """Remove the endpoint from every table."""
        await self.db.execute(
            delete(TableEndpoint).where(TableEndpoint.endpoint_id == endpoint_id),
        )

    async def replace_endpoints(
        self, table_id: TableId, endpoint_ids: list[str],
    ) -> list[EndpointId]:
        """Replace the table's association set. Returns the ids actually linked."""
        await self.db.execute(
            delete(TableEndpoint).where(TableEndpoint.table_id == table_id),
        )
        known = await self._existing_endpoint_ids(endpoint_ids)
        created_at = self._clock()
        linked: list[EndpointId] = []
        for endpoint_id in endpoint_ids:
            if endpoint_id in linked:
                continue
            if endpoint_id not in known:
                logger.warning(
                    f"Ignoring unknown endpoint '{endpoint_id}' in table association",
                    extra={"table_id": table_id},
                )
                continue
            self.db.add(TableEndpoint(
                id=self._ids.next_id(), table_id=table_id,
                endpoint_id=endpoint_id, position=len(linked),
                created_at=created_at,
            ))
            linked.append(EndpointId(endpoint_id))
        await self.db.flush()
        return linked

    async def _existing_endpoint_ids(self, endpoint_ids: list[str]) -> set[str]:
        if not endpoint_ids:
            return set()
        result = await self.db.execute(
            select(Endpoint.id).where(Endpoint.id.in_(set(endpoint_ids))),
        )
        return set(result.scalars().all())
