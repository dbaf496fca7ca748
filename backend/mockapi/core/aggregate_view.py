"""Aggregate View — display projection for records unioned across a table's endpoints.

Invariants:
    - Aggregation never rewrites record keys: values are resolved at read time
    - resolve_value: exact key first, then case-insensitive, else None
    - Columns never include id/createdAt (rows carry them separately)
    - Column order is stable: table fields in declaration order, otherwise first-seen

Design Decisions:
    - Fallback chain instead of a case-normalizing write path: endpoints feeding the
      same table may spell keys differently ("Email" vs "email") and the originals stay intact
"""

from typing import Any, Iterable, Mapping

from mockapi.core.domain_types import (
    RECORD_ID_KEY, RECORD_TIMESTAMP_KEY, SYNTHESIZED_KEYS,
)
from mockapi.core.field_schema import FieldDefinition
from mockapi.core.filter_records import lookup_key


def resolve_value(record: Mapping[str, Any], name: str) -> Any:
    """Value for a display column, tolerant of key casing."""
    key = lookup_key(record, name)
    return record[key] if key is not None else None


def derive_columns(
    table_fields: list[FieldDefinition],
    endpoint_fields: Iterable[list[FieldDefinition]],
    records: Iterable[Mapping[str, Any]],
) -> list[str]:
    """Table fields when declared; else union of endpoint fields and record keys."""
    if table_fields:
        return [f.name for f in table_fields]
    columns: list[str] = []
    seen: set[str] = set()

    def _add(name: str) -> None:
        if name not in seen and name not in SYNTHESIZED_KEYS:
            seen.add(name)
            columns.append(name)

    for fields in endpoint_fields:
        for f in fields:
            _add(f.name)
    for record in records:
        for key in record:
            _add(key)
    return columns


def project_row(record: Mapping[str, Any], columns: list[str]) -> dict[str, Any]:
    """One display row: id, createdAt, then one resolved value per column."""
    row = {
        RECORD_ID_KEY: record.get(RECORD_ID_KEY),
        RECORD_TIMESTAMP_KEY: record.get(RECORD_TIMESTAMP_KEY),
    }
    row["values"] = {column: resolve_value(record, column) for column in columns}
    return row
