"""Endpoint Registry — management operations behind /endpoints.

Invariants:
    - create is idempotent on id: an existing id returns the stored endpoint untouched
    - The endpoint row commits before its optional table link is attempted; a failed
      link is reported in `warnings`, never undoes the endpoint
    - update applies name/path/method/fields as one unit, and relinks tables in the
      same transaction when tableId is supplied
    - delete cascades to records, request logs and table links

Design Decisions:
    - Two transactions on create (endpoint, then link) keep a missing table from
      blocking endpoint declaration; the gap is surfaced, not hidden
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from mockapi.core.domain_types import EndpointId, TableId
from mockapi.core.errors import DatabaseError, ResourceNotFoundError
from mockapi.infrastructure.database import unit_of_work
from mockapi.infrastructure.identifiers import IdGenerator
from mockapi.schemas.endpoint import EndpointCreate, EndpointUpdate
from mockapi.services.serializers import endpoint_detail, endpoint_summary
from mockapi.services.store_endpoints import EndpointStore
from mockapi.services.store_records import RecordStore
from mockapi.services.store_request_logs import RequestLogStore
from mockapi.services.store_tables import TableStore

logger = logging.getLogger(__name__)


class EndpointRegistry:
    """Schema Store operations exposed to management routes."""

    def __init__(self, db: AsyncSession, ids: IdGenerator, request_log_limit: int = 50):
        self.db = db
        self._ids = ids
        self._request_log_limit = request_log_limit
        self.endpoints = EndpointStore(db)
        self.records = RecordStore(db, ids)
        self.logs = RequestLogStore(db, ids)
        self.tables = TableStore(db, ids)

    async def list_endpoints(self) -> list[dict[str, Any]]:
        """Every endpoint with its schema, own records and recent request logs."""
        async with unit_of_work(self.db, "list endpoints"):
            result = []
            for endpoint in await self.endpoints.list_all():
                data = await self.records.list_for_endpoint(endpoint.id)
                logs = await self.logs.recent(endpoint.id, self._request_log_limit)
                result.append(endpoint_detail(endpoint, data, logs))
            return result

    async def create_endpoint(self, body: EndpointCreate) -> tuple[dict[str, Any], bool]:
        """Declare an endpoint. Returns (payload, created)."""
        endpoint_id = EndpointId(body.id or self._ids.next_id())
        async with unit_of_work(self.db, "create endpoint"):
            existing = await self.endpoints.get(endpoint_id)
            if existing is not None:
                logger.info(
                    "Endpoint already exists; returning stored definition",
                    extra={"endpoint_id": endpoint_id},
                )
                return endpoint_detail(existing, []), False
            endpoint = await self.endpoints.create(
                endpoint_id, body.name, body.path, body.method.value,
                body.dumped_fields(),
            )
        payload = endpoint_detail(endpoint, [])
        payload["warnings"] = []
        if body.table_id:
            warning = await self._link_after_create(endpoint_id, TableId(body.table_id))
            if warning:
                payload["warnings"].append(warning)
        return payload, True

    async def _link_after_create(
        self, endpoint_id: EndpointId, table_id: TableId,
    ) -> str | None:
        try:
            async with unit_of_work(self.db, "link endpoint"):
                if await self.tables.get(table_id) is None:
                    raise ResourceNotFoundError("Table", table_id)
                await self.tables.link(table_id, endpoint_id)
        except (ResourceNotFoundError, DatabaseError) as e:
            logger.warning(
                f"Endpoint created without table link: {e.message}",
                extra={"endpoint_id": endpoint_id, "table_id": table_id},
            )
            return f"Endpoint was created but could not be linked to table '{table_id}': {e.message}"
        return None

    async def update_endpoint(
        self, endpoint_id: EndpointId, body: EndpointUpdate,
    ) -> dict[str, Any]:
        warnings: list[str] = []
        async with unit_of_work(self.db, "update endpoint"):
            endpoint = await self.endpoints.get(endpoint_id)
            if endpoint is None:
                raise ResourceNotFoundError("Endpoint", endpoint_id)
            await self.endpoints.update(endpoint, body.changes())
            if body.relinks_table:
                await self.tables.unlink_endpoint(endpoint_id)
                if body.table_id:
                    if await self.tables.get(TableId(body.table_id)) is None:
                        warnings.append(f"Table '{body.table_id}' not found; endpoint left unlinked")
                    else:
                        await self.tables.link(TableId(body.table_id), endpoint_id)
        payload = endpoint_summary(endpoint)
        payload["warnings"] = warnings
        return payload

    async def delete_endpoint(self, endpoint_id: EndpointId) -> dict[str, Any]:
        async with unit_of_work(self.db, "delete endpoint"):
            if not await self.endpoints.delete(endpoint_id):
                raise ResourceNotFoundError("Endpoint", endpoint_id)
        return {"message": "Endpoint deleted successfully"}
