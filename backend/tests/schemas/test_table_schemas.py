"""Table schema tests — creation and partial update payloads.

Tests cover:
    - name required and non-blank on create
    - endpointIds alias, numeric ids coerced
    - TableUpdate.changes: blank name ignored, description cleared when supplied
"""

import pytest
from pydantic import ValidationError

from mockapi.schemas.table import TableCreate, TableUpdate


def test_create_requires_name():
    with pytest.raises(ValidationError):
        TableCreate.model_validate({"endpointIds": []})


def test_create_rejects_blank_name():
    with pytest.raises(ValidationError, match="Table name is required"):
        TableCreate(name="  ")


def test_create_endpoint_ids_alias_and_coercion():
    body = TableCreate.model_validate({"name": "People", "endpointIds": [1, "2"]})
    assert body.endpoint_ids == ["1", "2"]


def test_create_duplicate_fields_rejected():
    with pytest.raises(ValidationError):
        TableCreate(name="t", fields=[{"name": "a"}, {"name": "a"}])


def test_update_ignores_blank_name():
    assert TableUpdate(name="  ").changes() == {}


def test_update_clears_description_when_supplied():
    body = TableUpdate.model_validate({"description": ""})
    assert body.changes() == {"description": None}


def test_update_leaves_endpoint_ids_unset_by_default():
    body = TableUpdate(name="People")
    assert body.endpoint_ids is None
    assert body.changes() == {"name": "People"}
