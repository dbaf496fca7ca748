"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - EndpointId, RecordId, TableId wrap strings: identifiers are opaque to the core
    - All valid verbs and field types encoded as Enums, no raw string matching
    - RECORD_ID_KEY / RECORD_TIMESTAMP_KEY are the only keys the engine synthesizes

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
    - Identifiers are strings, not UUIDs: callers may supply their own endpoint ids
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

EndpointId = NewType("EndpointId", str)
RecordId = NewType("RecordId", str)
TableId = NewType("TableId", str)


# ─── Synthesized record keys ─────────────────────────────────────

RECORD_ID_KEY = "id"
RECORD_TIMESTAMP_KEY = "createdAt"
SYNTHESIZED_KEYS = frozenset({RECORD_ID_KEY, RECORD_TIMESTAMP_KEY})


# ─── Enums ───────────────────────────────────────────────────────

class HttpMethod(str, Enum):
    """Verbs an endpoint may be declared with."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class FieldType(str, Enum):
    """Value types a FieldDefinition may declare."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    OBJECT = "object"
    ARRAY = "array"

    @property
    def is_container(self) -> bool:
        return self in (FieldType.OBJECT, FieldType.ARRAY)
