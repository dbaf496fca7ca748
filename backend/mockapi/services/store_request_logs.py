"""Request Log — per-endpoint request/response snapshots, newest surfaced first.

Invariants:
    - recent() returns at most `limit` entries, newest-first
    - An entry whose stored JSON is corrupt is still returned, with null payloads

Design Decisions:
    - Payloads stored as JSON text (same tolerance rule as records)
    - No pruning: retention beyond the surfaced window is allowed
"""

import json
import logging
from typing import Any, Callable
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mockapi.core.domain_types import EndpointId
from mockapi.infrastructure.identifiers import IdGenerator, utc_now, wire_timestamp
from mockapi.models.request_log import RequestLog

logger = logging.getLogger(__name__)


def _dump(payload: Any) -> str | None:
    if payload is None:
        return None
    return json.dumps(payload, ensure_ascii=False)


class RequestLogStore:
    """Bounded request history per endpoint."""

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
        self,
        endpoint_id: EndpointId,
        path: str,
        method: str,
        request_body: Any,
        response_status: int,
        response_data: Any,
    ) -> None:
        self.db.add(RequestLog(
            id=self._ids.next_id(),
            endpoint_id=endpoint_id,
            endpoint_path=path,
            method=method,
            request_body=_dump(request_body),
            response_status=response_status,
            response_data=_dump(response_data),
            created_at=self._clock(),
        ))
        await self.db.flush()

    async def recent(
        self, endpoint_id: EndpointId, limit: int,
    ) -> list[dict[str, Any]]:
        result = await self.db.execute(
            select(RequestLog)
            .where(RequestLog.endpoint_id == endpoint_id)
            .order_by(RequestLog.created_at.desc(), RequestLog.id.desc())
            .limit(limit)
        )
        return [self._to_entry(log) for log in result.scalars().all()]

    def _to_entry(self, log: RequestLog) -> dict[str, Any]:
        entry = {
            "id": log.id,
            "method": log.method,
            "path": log.endpoint_path,
            "requestBody": None,
            "responseStatus": log.response_status,
            "responseData": None,
            "createdAt": wire_timestamp(log.created_at),
        }
        try:
            entry["requestBody"] = json.loads(log.request_body) if log.request_body else None
            entry["responseData"] = json.loads(log.response_data) if log.response_data else None
        except ValueError as e:
            logger.warning(
                f"Request log payload unreadable: {e}",
                extra={"endpoint_id": log.endpoint_id},
            )
            entry["requestBody"] = None
            entry["responseData"] = None
        return entry
