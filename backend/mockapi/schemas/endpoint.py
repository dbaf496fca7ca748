"""Endpoint Schemas — declaration and update payloads with field-level validation.

Invariants:
    - path starts with "/" and uses only letters, digits, "/", "-", "_"
    - method is one of GET/POST/PUT/DELETE (input case-insensitive)
    - field names are non-blank and unique within one list
    - Unknown keys on a field definition are kept (UI hints pass through opaquely)
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mockapi.core.domain_types import FieldType, HttpMethod
from mockapi.core.route_paths import DECLARED_PATH_PATTERN


class FieldDefinitionSchema(BaseModel):
    """One declared field; nested `fields` for object/array types."""
    model_config = ConfigDict(extra="allow")

    name: str = Field(min_length=1, max_length=200)
    type: FieldType = FieldType.STRING
    required: bool = False
    filterable: bool = False
    format: str | None = Field(None, max_length=200)
    fields: list["FieldDefinitionSchema"] | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field name cannot be empty or whitespace")
        return v

    @field_validator("type", mode="before")
    @classmethod
    def lower_type(cls, v: Any) -> Any:
        return v.lower() if isinstance(v, str) else v

    @field_validator("fields")
    @classmethod
    def unique_children(cls, v: list["FieldDefinitionSchema"] | None):
        if v is not None:
            check_unique_names(v)
        return v


def check_unique_names(fields: list[FieldDefinitionSchema]) -> None:
    seen: set[str] = set()
    for f in fields:
        if f.name in seen:
            raise ValueError(f"duplicate field name '{f.name}'")
        seen.add(f.name)


def _coerce_id(v: Any) -> Any:
    # Clients historically sent numeric timestamp ids
    if isinstance(v, int) and not isinstance(v, bool):
        return str(v)
    return v


class _EndpointFieldsMixin(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    @field_validator("method", mode="before", check_fields=False)
    @classmethod
    def upper_method(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @field_validator("name", check_fields=False)
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v

    @field_validator("fields", check_fields=False)
    @classmethod
    def unique_fields(cls, v: list[FieldDefinitionSchema] | None):
        if v is not None:
            check_unique_names(v)
        return v

    @field_validator("table_id", mode="before", check_fields=False)
    @classmethod
    def coerce_table_id(cls, v: Any) -> Any:
        return _coerce_id(v)

    def dumped_fields(self) -> list[dict[str, Any]]:
        return [
            f.model_dump(mode="json", exclude_none=True)
            for f in (getattr(self, "fields", None) or [])
        ]


class EndpointCreate(_EndpointFieldsMixin):
    """Endpoint declaration. `id` optional (generated when absent)."""
    id: str | None = Field(None, min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=200)
    path: str = Field(pattern=DECLARED_PATH_PATTERN, max_length=500)
    method: HttpMethod = HttpMethod.GET
    fields: list[FieldDefinitionSchema] = Field(default_factory=list)
    table_id: str | None = Field(None, alias="tableId")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        return _coerce_id(v)


class EndpointUpdate(_EndpointFieldsMixin):
    """Partial endpoint update. Supplying tableId (even null) relinks tables."""
    name: str | None = Field(None, min_length=1, max_length=200)
    path: str | None = Field(None, pattern=DECLARED_PATH_PATTERN, max_length=500)
    method: HttpMethod | None = None
    fields: list[FieldDefinitionSchema] | None = None
    table_id: str | None = Field(None, alias="tableId")

    @property
    def relinks_table(self) -> bool:
        return "table_id" in self.model_fields_set

    def changes(self) -> dict[str, Any]:
        """Stored-column changes for the keys the caller supplied (nulls ignored)."""
        changes: dict[str, Any] = {}
        if self.name is not None:
            changes["name"] = self.name
        if self.path is not None:
            changes["path"] = self.path
        if self.method is not None:
            changes["method"] = self.method.value
        if self.fields is not None:
            changes["fields"] = self.dumped_fields()
        return changes
