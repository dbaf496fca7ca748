"""Table Registry — management operations behind /tables.

Invariants:
    - Field updates and association updates are independent: either, both or neither
    - An association update replaces the whole set in one transaction
    - A blank name on update keeps the stored name
    - delete is idempotent
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from mockapi.core.domain_types import TableId
from mockapi.core.errors import ResourceNotFoundError
from mockapi.infrastructure.database import unit_of_work
from mockapi.infrastructure.identifiers import IdGenerator
from mockapi.schemas.table import TableCreate, TableUpdate
from mockapi.services.aggregation_view import AggregationView
from mockapi.services.serializers import table_summary
from mockapi.services.store_endpoints import EndpointStore
from mockapi.services.store_records import RecordStore
from mockapi.services.store_tables import TableStore

logger = logging.getLogger(__name__)


class TableRegistry:
    """Table Index operations exposed to management routes."""

    def __init__(self, db: AsyncSession, ids: IdGenerator):
        self.db = db
        self.tables = TableStore(db, ids)
        self.view = AggregationView(EndpointStore(db), RecordStore(db, ids), self.tables)

    async def list_tables(self) -> list[dict[str, Any]]:
        async with unit_of_work(self.db, "list tables"):
            return [await self.view.build(table) for table in await self.tables.list_all()]

    async def create_table(self, body: TableCreate) -> dict[str, Any]:
        async with unit_of_work(self.db, "create table"):
            table = await self.tables.create(
                body.name, body.description, body.dumped_fields(),
            )
            linked = await self.tables.replace_endpoints(table.id, body.endpoint_ids)
        payload = table_summary(table)
        payload["endpointIds"] = linked
        return payload

    async def update_table(self, table_id: TableId, body: TableUpdate) -> dict[str, Any]:
        async with unit_of_work(self.db, "update table"):
            table = await self.tables.get(table_id)
            if table is None:
                raise ResourceNotFoundError("Table", table_id)
            changes = body.changes()
            if changes:
                await self.tables.update(table, changes)
            if body.endpoint_ids is not None:
                linked = await self.tables.replace_endpoints(table_id, body.endpoint_ids)
                logger.info(
                    f"Table associations replaced ({len(linked)} endpoint(s))",
                    extra={"table_id": table_id},
                )
            else:
                linked = await self.tables.endpoint_ids(table_id)
        payload = table_summary(table)
        payload["message"] = "Table updated"
        payload["endpointIds"] = linked
        return payload

    async def delete_table(self, table_id: TableId) -> dict[str, Any]:
        async with unit_of_work(self.db, "delete table"):
            await self.tables.delete(table_id)
        return {"message": "Table deleted"}
