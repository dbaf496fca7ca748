"""Record Store — append-only JSON records per endpoint with newest-first reads.

Invariants:
    - append() synthesizes id + createdAt and stores body merged with them
    - Reads are newest-first by (created_at, id) and never include empty records
    - A row whose JSON does not decode to an object is skipped with a warning;
      sibling rows are still returned
    - Reads fill a missing/blank id or createdAt from the row columns

Design Decisions:
    - Decoding happens row by row in Python so one corrupt payload cannot fail
      the query for the rest
    - delete(record_id) is not scoped to an endpoint: record ids are unique across
      the store, and table reads surface other endpoints' records on one path
"""

import json
import logging
from typing import Any, Callable
from datetime import datetime

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from mockapi.core.domain_types import (
    EndpointId, RecordId, RECORD_ID_KEY, RECORD_TIMESTAMP_KEY,
)
from mockapi.core.record_rules import is_empty_record, synthesize_record
from mockapi.infrastructure.identifiers import IdGenerator, utc_now, wire_timestamp
from mockapi.models.endpoint_record import EndpointRecord

logger = logging.getLogger(__name__)


class RecordStore:
    """Records written through dynamic endpoints."""

    def __init__(
        self,
        db: AsyncSession,
        ids: IdGenerator,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.db = db
        self._ids = ids
        self._clock = clock

    async def append(
        self, endpoint_id: EndpointId, body: dict[str, Any],
    ) -> dict[str, Any]:
        record_id = self._ids.next_id()
        created_at = self._clock()
        record = synthesize_record(body, record_id, wire_timestamp(created_at))
        self.db.add(EndpointRecord(
            id=record_id,
            endpoint_id=endpoint_id,
            data=json.dumps(record, ensure_ascii=False),
            created_at=created_at,
        ))
        await self.db.flush()
        logger.info(
            "Record stored",
            extra={"endpoint_id": endpoint_id, "record_id": record_id},
        )
        return record

    async def list_for_endpoint(
        self, endpoint_id: EndpointId,
    ) -> list[dict[str, Any]]:
        return await self.list_for_endpoints([endpoint_id])

    async def list_for_endpoints(
        self, endpoint_ids: list[EndpointId],
    ) -> list[dict[str, Any]]:
        """Non-empty records across endpoint_ids, newest-first overall."""
        if not endpoint_ids:
            return []
        result = await self.db.execute(
            select(EndpointRecord)
            .where(EndpointRecord.endpoint_id.in_(endpoint_ids))
            .order_by(EndpointRecord.created_at.desc(), EndpointRecord.id.desc())
        )
        records = []
        for row in result.scalars().all():
            record = self._decode(row)
            if record is not None and not is_empty_record(record):
                records.append(record)
        return records

    def _decode(self, row: EndpointRecord) -> dict[str, Any] | None:
        try:
            parsed = json.loads(row.data)
        except (TypeError, ValueError) as e:
            logger.warning(
                f"Skipping malformed record: {e}",
                extra={"endpoint_id": row.endpoint_id, "record_id": row.id},
            )
            return None
        if parsed is None:
            return None
        if not isinstance(parsed, dict):
            logger.warning(
                f"Skipping record that is not a JSON object ({type(parsed).__name__})",
                extra={"endpoint_id": row.endpoint_id, "record_id": row.id},
            )
            return None
        if not parsed.get(RECORD_ID_KEY):
            parsed[RECORD_ID_KEY] = row.id
        if not parsed.get(RECORD_TIMESTAMP_KEY):
            parsed[RECORD_TIMESTAMP_KEY] = wire_timestamp(row.created_at)
        return parsed

    async def delete(self, record_id: RecordId) -> int:
        result = await self.db.execute(
            delete(EndpointRecord).where(EndpointRecord.id == record_id),
        )
        return result.rowcount or 0

    async def delete_all(self, endpoint_id: EndpointId) -> int:
        result = await self.db.execute(
            delete(EndpointRecord).where(EndpointRecord.endpoint_id == endpoint_id),
        )
        return result.rowcount or 0
