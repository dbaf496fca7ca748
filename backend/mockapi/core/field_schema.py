"""Field Schema — FieldDefinition as a tagged variant over the declared field types.

Invariants:
    - FieldDefinition.type is always a FieldType member (unknown tags fall back to STRING)
    - children only populated for OBJECT / ARRAY fields
    - parse_fields never raises on stored data: entries without a name are dropped
    - The stored field list stays opaque: parsing reads it, never rewrites it

Design Decisions:
    - Frozen dataclass, not the pydantic schema: the core reads stored JSON that
      predates the current API contract, so parsing is tolerant here and strict
      only at the HTTP boundary (schemas/endpoint.py)
    - Validation is structural only (presence of required values), never type-checking
"""

from dataclasses import dataclass, field
from typing import Any

from mockapi.core.domain_types import FieldType


@dataclass(frozen=True)
class FieldDefinition:
    """One declared field of an endpoint or table."""
    name: str
    type: FieldType = FieldType.STRING
    required: bool = False
    filterable: bool = False
    format: str | None = None
    children: tuple["FieldDefinition", ...] = field(default_factory=tuple)


def _parse_type(raw: Any) -> FieldType:
    try:
        return FieldType(str(raw).lower())
    except ValueError:
        return FieldType.STRING


def parse_field(raw: dict[str, Any]) -> FieldDefinition | None:
    """Build a FieldDefinition from a stored/declared dict. None if unnamed."""
    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    field_type = _parse_type(raw.get("type", FieldType.STRING.value))
    children: tuple[FieldDefinition, ...] = ()
    if field_type.is_container and isinstance(raw.get("fields"), list):
        children = tuple(parse_fields(raw["fields"]))
    return FieldDefinition(
        name=name,
        type=field_type,
        required=bool(raw.get("required", False)),
        filterable=bool(raw.get("filterable", False)),
        format=raw.get("format") or None,
        children=children,
    )


def parse_fields(raw_fields: Any) -> list[FieldDefinition]:
    """Parse an ordered field list; non-list input yields an empty schema."""
    if not isinstance(raw_fields, list):
        return []
    parsed = []
    for raw in raw_fields:
        if isinstance(raw, dict):
            definition = parse_field(raw)
            if definition is not None:
                parsed.append(definition)
    return parsed


def required_field_names(fields: list[FieldDefinition]) -> list[str]:
    return [f.name for f in fields if f.required]


def filterable_field_names(fields: list[FieldDefinition]) -> list[str]:
    return [f.name for f in fields if f.filterable]
