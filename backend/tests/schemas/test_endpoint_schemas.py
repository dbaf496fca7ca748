"""Endpoint schema tests — declaration validation at the HTTP boundary.

Tests cover:
    - Path pattern accepted / rejected
    - Method case-insensitivity and default
    - Field names stripped, duplicates rejected (top level and nested)
    - Unknown field keys preserved by dumped_fields
    - Numeric id / tableId coerced to strings
    - EndpointUpdate.changes and relinks_table
"""

import pytest
from pydantic import ValidationError

from mockapi.core.domain_types import HttpMethod
from mockapi.schemas.endpoint import EndpointCreate, EndpointUpdate


# ─── EndpointCreate ──────────────────────────────────────────────

def test_minimal_declaration_defaults_to_get():
    body = EndpointCreate(name="Users", path="/users")
    assert body.method is HttpMethod.GET
    assert body.fields == []
    assert body.id is None and body.table_id is None


def test_method_is_case_insensitive():
    assert EndpointCreate(name="x", path="/x", method="post").method is HttpMethod.POST


def test_unknown_method_rejected():
    with pytest.raises(ValidationError):
        EndpointCreate(name="x", path="/x", method="PATCH")


@pytest.mark.parametrize("path", ["users", "/a b", "/a?b=1", ""])
def test_invalid_paths_rejected(path):
    with pytest.raises(ValidationError):
        EndpointCreate(name="x", path=path)


def test_blank_name_rejected():
    with pytest.raises(ValidationError):
        EndpointCreate(name="   ", path="/x")


def test_duplicate_field_names_rejected():
    with pytest.raises(ValidationError, match="duplicate field name"):
        EndpointCreate(name="x", path="/x", fields=[{"name": "a"}, {"name": "a"}])


def test_duplicate_nested_field_names_rejected():
    with pytest.raises(ValidationError, match="duplicate field name"):
        EndpointCreate(name="x", path="/x", fields=[{
            "name": "address", "type": "object",
            "fields": [{"name": "city"}, {"name": "city"}],
        }])


def test_dumped_fields_keep_extra_keys_and_drop_nulls():
    body = EndpointCreate(name="x", path="/x", fields=[
        {"name": " email ", "type": "STRING", "required": True, "placeholder": "you@x"},
    ])
    assert body.dumped_fields() == [{
        "name": "email", "type": "string", "required": True,
        "filterable": False, "placeholder": "you@x",
    }]


def test_numeric_ids_are_coerced():
    body = EndpointCreate(id=1714564800000, name="x", path="/x", tableId=7)
    assert body.id == "1714564800000"
    assert body.table_id == "7"


# ─── EndpointUpdate ──────────────────────────────────────────────

def test_update_changes_only_supplied_keys():
    body = EndpointUpdate(name="Renamed", method="put")
    assert body.changes() == {"name": "Renamed", "method": "PUT"}
    assert not body.relinks_table


def test_update_with_null_table_id_relinks():
    body = EndpointUpdate.model_validate({"tableId": None})
    assert body.relinks_table
    assert body.changes() == {}


def test_update_rejects_bad_path():
    with pytest.raises(ValidationError):
        EndpointUpdate(path="no-slash")
