"""Record Filtering tests — query-parameter matching for GET dispatch.

Tests cover:
    - to_query_string: booleans, integral floats, lists, objects
    - lookup_key: exact then case-insensitive
    - active_filters: unknown params ignored only with a filterable set
    - apply_filters: substring for text, equality for other values, AND semantics
    - Order preserved, input not mutated
"""

from mockapi.core.field_schema import parse_fields
from mockapi.core.filter_records import (
    active_filters,
    apply_filters,
    lookup_key,
    matches_filter,
    to_query_string,
)

PEOPLE = [
    {"id": "1", "name": "Alice", "age": 30, "active": True},
    {"id": "2", "name": "Bob", "age": 25, "active": False},
    {"id": "3", "name": "alicia", "age": 30.0, "active": True},
]

FILTERABLE = parse_fields([
    {"name": "name", "filterable": True},
    {"name": "age", "filterable": True},
    {"name": "active", "filterable": True},
])


# ─── to_query_string ─────────────────────────────────────────────

def test_to_query_string():
    assert to_query_string(True) == "true"
    assert to_query_string(False) == "false"
    assert to_query_string(30.0) == "30"
    assert to_query_string(2.5) == "2.5"
    assert to_query_string(7) == "7"
    assert to_query_string(["a", 1, None]) == "a,1,"
    assert to_query_string({"a": 1}) == '{"a":1}'


# ─── lookup_key ──────────────────────────────────────────────────

def test_lookup_key_prefers_exact_match():
    assert lookup_key({"Email": "x", "email": "y"}, "email") == "email"


def test_lookup_key_case_insensitive_fallback():
    assert lookup_key({"Email": "x"}, "EMAIL") == "Email"


def test_lookup_key_missing():
    assert lookup_key({"name": "x"}, "email") is None


# ─── active_filters ──────────────────────────────────────────────

def test_unknown_params_dropped_with_filterable_set():
    assert active_filters({"name": "al", "page": "2"}, FILTERABLE) == {"name": "al"}


def test_all_params_kept_without_filterable_set():
    fields = parse_fields([{"name": "name"}])
    assert active_filters({"name": "al", "page": "2"}, fields) == {"name": "al", "page": "2"}


# ─── matches_filter / apply_filters ──────────────────────────────

def test_text_filter_is_case_insensitive_substring():
    result = apply_filters(PEOPLE, {"name": "ALI"}, FILTERABLE)
    assert [r["id"] for r in result] == ["1", "3"]


def test_number_filter_is_exact():
    result = apply_filters(PEOPLE, {"age": "30"}, FILTERABLE)
    assert [r["id"] for r in result] == ["1", "3"]
    assert apply_filters(PEOPLE, {"age": "3"}, FILTERABLE) == []


def test_boolean_filter():
    result = apply_filters(PEOPLE, {"active": "false"}, FILTERABLE)
    assert [r["id"] for r in result] == ["2"]


def test_filters_are_anded():
    result = apply_filters(PEOPLE, {"name": "ali", "active": "true", "age": "30"}, FILTERABLE)
    assert [r["id"] for r in result] == ["1", "3"]
    assert apply_filters(PEOPLE, {"name": "bob", "age": "30"}, FILTERABLE) == []


def test_unknown_param_does_not_empty_result():
    result = apply_filters(PEOPLE, {"page": "9"}, FILTERABLE)
    assert result == PEOPLE
    assert result is not PEOPLE


def test_without_filterable_fields_unknown_param_filters():
    assert apply_filters(PEOPLE, {"page": "9"}, []) == []


def test_null_or_missing_value_never_matches():
    assert not matches_filter({"name": None}, "name", "")
    assert not matches_filter({}, "name", "a")


def test_apply_filters_does_not_mutate():
    records = [dict(r) for r in PEOPLE]
    apply_filters(records, {"name": "bob"}, FILTERABLE)
    assert records == PEOPLE
