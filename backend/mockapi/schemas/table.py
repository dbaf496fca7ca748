"""Table Schemas — table creation and partial update payloads.

Invariants:
    - name required and non-blank on create (missing name → 400)
    - endpointIds is a list of endpoint ids; order is the association order
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mockapi.schemas.endpoint import FieldDefinitionSchema, check_unique_names


class _TableBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    @field_validator("fields", check_fields=False)
    @classmethod
    def unique_fields(cls, v: list[FieldDefinitionSchema] | None):
        if v is not None:
            check_unique_names(v)
        return v

    @field_validator("endpoint_ids", mode="before", check_fields=False)
    @classmethod
    def coerce_ids(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [str(i) if isinstance(i, int) and not isinstance(i, bool) else i for i in v]
        return v

    def dumped_fields(self) -> list[dict[str, Any]]:
        return [
            f.model_dump(mode="json", exclude_none=True)
            for f in (getattr(self, "fields", None) or [])
        ]


class TableCreate(_TableBase):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    fields: list[FieldDefinitionSchema] = Field(default_factory=list)
    endpoint_ids: list[str] = Field(default_factory=list, alias="endpointIds")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Table name is required")
        return v


class TableUpdate(_TableBase):
    name: str | None = None
    description: str | None = None
    fields: list[FieldDefinitionSchema] | None = None
    endpoint_ids: list[str] | None = Field(None, alias="endpointIds")

    def changes(self) -> dict[str, Any]:
        """Column changes: blank name ignored; description/fields when supplied."""
        changes: dict[str, Any] = {}
        if self.name and self.name.strip():
            changes["name"] = self.name.strip()
        if "description" in self.model_fields_set:
            changes["description"] = self.description or None
        if self.fields is not None:
            changes["fields"] = self.dumped_fields()
        return changes
