"""Record Rules — empty-record detection, required-field checks, record synthesis.

Invariants:
    - A record is empty when every key besides id/createdAt is None or ""
    - A record with no keys besides id/createdAt is empty
    - find_missing_required reports every missing field in declaration order
    - synthesize_record lets the synthesized id/createdAt win over body keys

Design Decisions:
    - Required means present AND non-empty: None, "", [] and {} are missing;
      0 and false are real values for number and boolean fields
"""

from typing import Any

from mockapi.core.domain_types import (
    RECORD_ID_KEY, RECORD_TIMESTAMP_KEY, SYNTHESIZED_KEYS,
)
from mockapi.core.field_schema import FieldDefinition, required_field_names


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def is_empty_record(record: dict[str, Any]) -> bool:
    """True when no payload key beyond id/createdAt carries a value."""
    payload_keys = [k for k in record if k not in SYNTHESIZED_KEYS]
    return all(_is_blank(record[k]) for k in payload_keys)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list, dict)) and len(value) == 0:
        return True
    return False


def find_missing_required(
    fields: list[FieldDefinition], body: dict[str, Any],
) -> list[str]:
    """Names of required fields absent or empty in body."""
    return [
        name for name in required_field_names(fields)
        if _is_missing(body.get(name))
    ]


def synthesize_record(
    body: dict[str, Any], record_id: str, created_at: str,
) -> dict[str, Any]:
    """Merge the synthesized identifier and timestamp into a request body."""
    return {**body, RECORD_ID_KEY: record_id, RECORD_TIMESTAMP_KEY: created_at}
