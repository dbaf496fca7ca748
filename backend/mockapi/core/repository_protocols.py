"""Boundary Protocols — contracts between the dispatch core and the storage shell.

Invariants:
    - Core NEVER imports from the shell: dependency arrows point inward only
    - Stores flush but never commit: the calling service owns the transaction
    - Record reads return plain dicts already parsed, newest-first, empties removed

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async methods: implementations do IO; the pure rules that consume their
      results (record_rules, filter_records, aggregate_view) stay synchronous
"""

from datetime import datetime
from typing import Any, Protocol

from mockapi.core.domain_types import EndpointId, RecordId, TableId


class EndpointLike(Protocol):
    """Structural contract for stored endpoint definitions."""
    id: str
    name: str
    path: str
    method: str
    fields: list
    created_at: datetime


class EndpointRepository(Protocol):
    """Schema Store: endpoint definitions."""
    async def list_all(self) -> list[EndpointLike]: ...
    async def get(self, endpoint_id: EndpointId) -> EndpointLike | None: ...
    async def get_many(self, endpoint_ids: list[EndpointId]) -> list[EndpointLike]: ...
    async def find_by_path(self, path: str) -> EndpointLike | None: ...
    async def find_by_path_and_method(
        self, path: str, method: str,
    ) -> EndpointLike | None: ...
    async def delete(self, endpoint_id: EndpointId) -> bool: ...


class RecordRepository(Protocol):
    """Record Store: per-endpoint append-only JSON records."""
    async def append(
        self, endpoint_id: EndpointId, body: dict[str, Any],
    ) -> dict[str, Any]: ...
    async def list_for_endpoint(
        self, endpoint_id: EndpointId,
    ) -> list[dict[str, Any]]: ...
    async def list_for_endpoints(
        self, endpoint_ids: list[EndpointId],
    ) -> list[dict[str, Any]]: ...
    async def delete(self, record_id: RecordId) -> int: ...
    async def delete_all(self, endpoint_id: EndpointId) -> int: ...


class TableRepository(Protocol):
    """Table Index: table definitions and endpoint associations."""
    async def endpoint_ids(self, table_id: TableId) -> list[EndpointId]: ...
    async def first_table_for(self, endpoint_id: EndpointId) -> TableId | None: ...
    async def replace_endpoints(
        self, table_id: TableId, endpoint_ids: list[str],
    ) -> list[EndpointId]: ...

