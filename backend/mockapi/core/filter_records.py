"""Record Filtering — query-parameter filtering for GET dispatch.

Invariants:
    - Every supplied parameter must match (logical AND)
    - With a non-empty filterable set, parameters naming no filterable field are ignored
    - With an empty filterable set, every parameter filters
    - Keys are matched case-insensitively (exact key first); a missing key fails the record
    - Textual values: case-insensitive substring; other values: exact string-form equality
    - Input order is preserved; the function never mutates records

Design Decisions:
    - Unknown filters are harmless: clients may send paging or cache-busting params
      without emptying the result
    - to_query_string renders booleans and integral floats the way query strings
      spell them ("true", "30"), so ?active=true and ?age=30 match JSON values
"""

import json
from typing import Any, Mapping

from mockapi.core.field_schema import FieldDefinition, filterable_field_names


def to_query_string(value: Any) -> str:
    """String form of a JSON value as it would appear in a query string."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, list):
        return ",".join("" if v is None else to_query_string(v) for v in value)
    if isinstance(value, dict):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def lookup_key(record: Mapping[str, Any], name: str) -> str | None:
    """Find the record key for name: exact match, then case-insensitive, else None."""
    if name in record:
        return name
    lowered = name.lower()
    for key in record:
        if key.lower() == lowered:
            return key
    return None


def active_filters(
    query: Mapping[str, str], fields: list[FieldDefinition],
) -> dict[str, str]:
    """Drop parameters that name no filterable field (when any field is filterable)."""
    allowed = {name.lower() for name in filterable_field_names(fields)}
    if not allowed:
        return dict(query)
    return {k: v for k, v in query.items() if k.lower() in allowed}


def matches_filter(record: Mapping[str, Any], name: str, expected: str) -> bool:
    key = lookup_key(record, name)
    if key is None:
        return False
    value = record[key]
    if value is None:
        return False
    if isinstance(value, str):
        return str(expected).lower() in value.lower()
    return to_query_string(value) == str(expected)


def apply_filters(
    records: list[dict[str, Any]],
    query: Mapping[str, str],
    fields: list[FieldDefinition],
) -> list[dict[str, Any]]:
    """Keep records satisfying every active query parameter."""
    filters = active_filters(query, fields)
    if not filters:
        return list(records)
    return [
        r for r in records
        if all(matches_filter(r, name, value) for name, value in filters.items())
    ]
