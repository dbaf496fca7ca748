"""Domain Types tests — enum values and synthesized record keys.

Tests cover:
    - HttpMethod / FieldType serialize as plain strings
    - FieldType.is_container for object and array only
    - SYNTHESIZED_KEYS holds exactly id and createdAt
"""

from mockapi.core.domain_types import (
    FieldType, HttpMethod, RECORD_ID_KEY, RECORD_TIMESTAMP_KEY, SYNTHESIZED_KEYS,
)


def test_http_method_values_are_uppercase_verbs():
    assert [m.value for m in HttpMethod] == ["GET", "POST", "PUT", "DELETE"]
    assert HttpMethod("POST") is HttpMethod.POST


def test_field_type_is_str_enum():
    assert FieldType.NUMBER == "number"
    assert FieldType("date") is FieldType.DATE


def test_container_types():
    containers = {t for t in FieldType if t.is_container}
    assert containers == {FieldType.OBJECT, FieldType.ARRAY}


def test_synthesized_keys():
    assert RECORD_ID_KEY == "id"
    assert RECORD_TIMESTAMP_KEY == "createdAt"
    assert SYNTHESIZED_KEYS == {"id", "createdAt"}
