"""Wire Serializers — ORM rows to the camelCase JSON shapes clients consume.

Invariants:
    - Timestamps rendered with wire_timestamp (UTC, millisecond precision, "Z")
    - fields always serialized as a list (stored NULL becomes [])
"""

from typing import Any

from mockapi.core.repository_protocols import EndpointLike
from mockapi.infrastructure.identifiers import wire_timestamp
from mockapi.models.data_table import DataTable


def endpoint_summary(endpoint: EndpointLike) -> dict[str, Any]:
    return {
        "id": endpoint.id,
        "name": endpoint.name,
        "path": endpoint.path,
        "method": endpoint.method,
        "fields": endpoint.fields or [],
        "createdAt": wire_timestamp(endpoint.created_at),
    }


def endpoint_detail(
    endpoint: EndpointLike,
    data: list[dict[str, Any]],
    request_logs: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    detail = endpoint_summary(endpoint)
    detail["data"] = data
    if request_logs is not None:
        detail["requestLogs"] = request_logs
    return detail


def table_summary(table: DataTable) -> dict[str, Any]:
    return {
        "id": table.id,
        "name": table.name,
        "description": table.description,
        "fields": table.fields or [],
        "createdAt": wire_timestamp(table.created_at),
    }
