"""Schema Store — persistence of endpoint definitions with cascading delete.

Invariants:
    - No two endpoints share an id (primary key)
    - Duplicate (path, method) pairs are accepted; lookups return the oldest match
    - delete() removes the endpoint's records, request logs and table links in the
      same transaction as the endpoint row

Design Decisions:
    - Explicit child deletes instead of relying on FK cascade: SQLite only enforces
      ON DELETE CASCADE with PRAGMA foreign_keys, and the result must not depend on it
    - Oldest-first lookup order (created_at, id) makes "first endpoint found" stable
"""

import logging
from typing import Any

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from mockapi.core.domain_types import EndpointId
from mockapi.models.endpoint import Endpoint
from mockapi.models.endpoint_record import EndpointRecord
from mockapi.models.request_log import RequestLog
from mockapi.models.table_endpoint import TableEndpoint
from mockapi.infrastructure.identifiers import utc_now

logger = logging.getLogger(__name__)

_UPDATABLE = ("name", "path", "method", "fields")


class EndpointStore:
    """Endpoint definitions keyed by id."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_all(self) -> list[Endpoint]:
        result = await self.db.execute(
            select(Endpoint).order_by(Endpoint.created_at, Endpoint.id),
        )
        return list(result.scalars().all())

    async def get(self, endpoint_id: EndpointId) -> Endpoint | None:
        return await self.db.get(Endpoint, endpoint_id)

    async def get_many(self, endpoint_ids: list[EndpointId]) -> list[Endpoint]:
        """Endpoints for the given ids, in the order the ids were given."""
        if not endpoint_ids:
            return []
        result = await self.db.execute(
            select(Endpoint).where(Endpoint.id.in_(endpoint_ids)),
        )
        by_id = {ep.id: ep for ep in result.scalars().all()}
        return [by_id[i] for i in endpoint_ids if i in by_id]

    async def find_by_path(self, path: str) -> Endpoint | None:
        """First endpoint declared on path, whatever its method."""
        result = await self.db.execute(
            select(Endpoint)
            .where(Endpoint.path == path)
            .order_by(Endpoint.created_at, Endpoint.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def find_by_path_and_method(
        self, path: str, method: str,
    ) -> Endpoint | None:
        result = await self.db.execute(
            select(Endpoint)
            .where(Endpoint.path == path)
            .where(Endpoint.method == method)
            .order_by(Endpoint.created_at, Endpoint.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def create(
        self,
        endpoint_id: EndpointId,
        name: str,
        path: str,
        method: str,
        fields: list[dict[str, Any]],
    ) -> Endpoint:
        endpoint = Endpoint(
            id=endpoint_id, name=name, path=path, method=method,
            fields=fields, created_at=utc_now(),
        )
        self.db.add(endpoint)
        await self.db.flush()
        logger.info(
            f"Endpoint declared: {method} {path}",
            extra={"endpoint_id": endpoint_id},
        )
        return endpoint

    async def update(self, endpoint: Endpoint, changes: dict[str, Any]) -> Endpoint:
        """Apply name/path/method/fields changes together; other keys ignored."""
        for key in _UPDATABLE:
            if key in changes:
                setattr(endpoint, key, changes[key])
        await self.db.flush()
        return endpoint

    async def delete(self, endpoint_id: EndpointId) -> bool:
        """Delete endpoint and cascade. False if it did not exist."""
        endpoint = await self.get(endpoint_id)
        if endpoint is None:
            return False
        await self.db.execute(
            delete(EndpointRecord).where(EndpointRecord.endpoint_id == endpoint_id),
        )
        await self.db.execute(
            delete(RequestLog).where(RequestLog.endpoint_id == endpoint_id),
        )
        await self.db.execute(
            delete(TableEndpoint).where(TableEndpoint.endpoint_id == endpoint_id),
        )
        await self.db.delete(endpoint)
        await self.db.flush()
        logger.info("Endpoint deleted", extra={"endpoint_id": endpoint_id})
        return True
