"""Request Router — dynamic dispatch of inbound calls to runtime-declared endpoints.

Invariants:
    - GET / DELETE (and any verb outside the declared set) resolve by path alone,
      first endpoint found, regardless of its declared method
    - POST / PUT resolve by exact (path, method); a method mismatch is "not found"
    - GET reads from every endpoint of the first table containing the match,
      otherwise from the match alone; records newest-first, then filtered
    - POST / PUT reject with every missing required field before anything is written
    - DELETE always succeeds, whether or not anything existed
    - Each dispatch is one unit of work: record write and log entry commit together

Design Decisions:
    - Path-only resolution for reads lets write-only endpoints be inspected via GET
    - Verbs outside GET/POST/PUT/DELETE resolve by path so a known path answers 405
      instead of 404
    - Filtering uses the matched endpoint's field schema even when the read set
      spans a whole table
    - query maps each parameter to one string; a repeated parameter arrives with
      its values joined by "," (see api/routes/dynamic_dispatch.py)
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from mockapi.core.domain_types import EndpointId, HttpMethod
from mockapi.core.errors import (
    MethodNotAllowedError, RequiredFieldsMissingError, RouteNotFoundError,
    ErrorContext,
)
from mockapi.core.field_schema import parse_fields
from mockapi.core.filter_records import apply_filters
from mockapi.core.record_rules import find_missing_required
from mockapi.core.route_paths import normalize_request_path
from mockapi.infrastructure.database import unit_of_work
from mockapi.infrastructure.identifiers import IdGenerator
from mockapi.models.endpoint import Endpoint
from mockapi.services.store_endpoints import EndpointStore
from mockapi.services.store_records import RecordStore
from mockapi.services.store_request_logs import RequestLogStore
from mockapi.services.store_tables import TableStore

logger = logging.getLogger(__name__)

_WRITE_METHODS = frozenset({HttpMethod.POST.value, HttpMethod.PUT.value})


@dataclass
class DispatchResult:
    """Status code and JSON body for a dispatched request."""
    status_code: int
    body: Any


class RequestRouter:
    """Resolves, validates and serves one dynamic request."""

    def __init__(self, db: AsyncSession, ids: IdGenerator, api_prefix: str):
        self.db = db
        self.endpoints = EndpointStore(db)
        self.records = RecordStore(db, ids)
        self.tables = TableStore(db, ids)
        self.logs = RequestLogStore(db, ids)
        self._api_prefix = api_prefix

    async def dispatch(
        self,
        method: str,
        raw_path: str,
        query: Mapping[str, str],
        body: dict[str, Any] | None,
    ) -> DispatchResult:
        method = method.upper()
        path = normalize_request_path(raw_path, self._api_prefix)
        async with unit_of_work(self.db, f"dispatch {method}"):
            endpoint = await self.resolve(method, path)
            if endpoint is None:
                logger.debug(f"No endpoint for {method} {path}")
                raise RouteNotFoundError(method, path)
            if method == HttpMethod.GET.value:
                return await self._handle_get(endpoint, path, query)
            if method in _WRITE_METHODS:
                return await self._handle_write(endpoint, path, method, body or {})
            if method == HttpMethod.DELETE.value:
                return await self._handle_delete(endpoint, query)
            raise MethodNotAllowedError(
                method, path, ErrorContext(endpoint_id=endpoint.id),
            )

    async def resolve(self, method: str, path: str) -> Endpoint | None:
        if method in _WRITE_METHODS:
            return await self.endpoints.find_by_path_and_method(path, method)
        return await self.endpoints.find_by_path(path)

    async def read_set(self, endpoint: Endpoint) -> list[EndpointId]:
        """Endpoints whose records a GET on this endpoint returns."""
        table_id = await self.tables.first_table_for(endpoint.id)
        if table_id is None:
            return [EndpointId(endpoint.id)]
        members = await self.tables.endpoint_ids(table_id)
        logger.debug(
            f"Read set expanded to {len(members)} endpoint(s) via table",
            extra={"endpoint_id": endpoint.id, "table_id": table_id},
        )
        return members or [EndpointId(endpoint.id)]

    async def _handle_get(
        self, endpoint: Endpoint, path: str, query: Mapping[str, str],
    ) -> DispatchResult:
        records = await self.records.list_for_endpoints(await self.read_set(endpoint))
        data = apply_filters(records, query, parse_fields(endpoint.fields))
        if query and not data and records:
            logger.info(
                f"All {len(records)} records filtered out by {sorted(query)}",
                extra={"endpoint_id": endpoint.id},
            )
        logger.debug(
            f"GET {path} served",
            extra={"endpoint_id": endpoint.id, "record_count": len(data)},
        )
        await self.logs.append(endpoint.id, path, "GET", dict(query), 200, data)
        return DispatchResult(200, data)

    async def _handle_write(
        self, endpoint: Endpoint, path: str, method: str, body: dict[str, Any],
    ) -> DispatchResult:
        missing = find_missing_required(parse_fields(endpoint.fields), body)
        if missing:
            raise RequiredFieldsMissingError(
                missing, ErrorContext(endpoint_id=endpoint.id),
            )
        record = await self.records.append(endpoint.id, body)
        await self.logs.append(
            endpoint.id, path, method, body or None, 201, record,
        )
        return DispatchResult(201, record)

    async def _handle_delete(
        self, endpoint: Endpoint, query: Mapping[str, str],
    ) -> DispatchResult:
        record_id = query.get("id")
        if record_id:
            deleted = await self.records.delete(record_id)
            message = "Record deleted"
        else:
            deleted = await self.records.delete_all(endpoint.id)
            message = "All records deleted"
        logger.info(
            f"{message} ({deleted})", extra={"endpoint_id": endpoint.id},
        )
        return DispatchResult(200, {"message": message, "deleted": deleted})
