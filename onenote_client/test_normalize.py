"""Tests for response normalization."""

import json
from datetime import datetime, timezone

import pytest

from onenote_client.errors import ParseError, SchemaError
from onenote_client.normalize import (
    extract_parent,
    normalize_created,
    normalize_list,
    parse_timestamp,
    structural_kind,
)
from onenote_client.types import ContainerKind, NormalizeMode, ParentRef


def _listing(*elements):
    return json.dumps({"value": list(elements)}).encode("utf-8")


def test_two_elements_two_records():
    raw = _listing(
        {"id": "s1", "displayName": "Alpha"},
        {"id": "s2", "displayName": "Beta"},
    )
    records = normalize_list(raw, ContainerKind.SECTION)

    assert [r.id for r in records] == ["s1", "s2"]
    assert [r.display_name for r in records] == ["Alpha", "Beta"]
    assert all(r.kind is ContainerKind.SECTION for r in records)


def test_element_without_id_is_dropped():
    raw = _listing(
        {"displayName": "No id"},
        {"id": "", "displayName": "Blank id"},
        "not an object",
        {"id": "s3", "displayName": "Kept"},
    )
    records = normalize_list(raw, ContainerKind.SECTION)

    assert [r.id for r in records] == ["s3"]


@pytest.mark.parametrize("kind, placeholder", [
    (ContainerKind.SECTION, "Unnamed Section"),
    (ContainerKind.SECTION_GROUP, "Unnamed Section Group"),
    (ContainerKind.NOTEBOOK, "Unnamed Notebook"),
])
def test_missing_display_name_gets_placeholder(kind, placeholder):
    records = normalize_list(_listing({"id": "x1"}), kind)

    assert records[0].display_name == placeholder
    assert records[0].raw["displayName"] == placeholder


def test_empty_listing():
    assert normalize_list(_listing(), ContainerKind.SECTION) == []


def test_invalid_json_is_parse_error():
    with pytest.raises(ParseError, match="failed to parse"):
        normalize_list(b"{invalid json}", ContainerKind.SECTION)
    with pytest.raises(ParseError, match="failed to parse"):
        normalize_created(b"{invalid json}", ContainerKind.SECTION_GROUP)


def test_missing_value_is_schema_error():
    with pytest.raises(SchemaError, match="no value field"):
        normalize_list(b'{"@odata.context": "x"}', ContainerKind.SECTION)


def test_missing_value_allowed_when_asked():
    assert normalize_list(b"{}", ContainerKind.SECTION, missing_ok=True) == []


@pytest.mark.parametrize("raw", [b"[]", b'"text"', b'{"value": {"id": "s1"}}'])
def test_wrong_shapes_are_schema_errors(raw):
    with pytest.raises(SchemaError):
        normalize_list(raw, ContainerKind.SECTION)


def test_schema_error_is_a_parse_error():
    assert issubclass(SchemaError, ParseError)


def test_full_mode_keeps_raw_payload():
    element = {
        "id": "s1",
        "displayName": "Alpha",
        "self": "https://graph.example/sections/s1",
        "pagesUrl": "https://graph.example/sections/s1/pages",
    }
    record = normalize_list(_listing(element), ContainerKind.SECTION, NormalizeMode.FULL)[0]

    assert record.raw == element
    assert record.child_collection_refs == {"page": element["pagesUrl"]}


def test_filtered_mode_drops_raw_and_projects_parent():
    element = {
        "id": "s1",
        "displayName": "Alpha",
        "parentSectionGroup": {"id": "sg1", "displayName": "Group", "self": "https://x"},
    }
    record = normalize_list(_listing(element), ContainerKind.SECTION, NormalizeMode.FILTERED)[0]

    assert record.raw is None
    assert record.parent == ParentRef(ContainerKind.SECTION_GROUP, "sg1", "Group")
    assert "raw" not in record.to_dict()


def test_section_group_parent_wins_over_notebook():
    element = {
        "id": "s1",
        "parentNotebook": {"id": "nb1", "displayName": "Notebook"},
        "parentSectionGroup": {"id": "sg1", "displayName": "Group"},
    }
    parent = extract_parent(element)

    assert parent.kind is ContainerKind.SECTION_GROUP
    assert parent.id == "sg1"


def test_null_section_group_falls_back_to_notebook():
    element = {
        "id": "s1",
        "parentNotebook": {"id": "nb1", "displayName": "Notebook"},
        "parentSectionGroup": None,
    }
    assert extract_parent(element).kind is ContainerKind.NOTEBOOK


def test_no_parent():
    assert extract_parent({"id": "nb1"}) is None
    assert extract_parent({"id": "s1", "parentNotebook": {"displayName": "no id"}}) is None


def test_created_record():
    raw = json.dumps({
        "id": "sg-new",
        "displayName": "Project Alpha",
        "createdDateTime": "2024-03-01T10:15:30.1234567Z",
        "lastModifiedDateTime": "2024-03-02T08:00:00Z",
        "parentNotebook": {"id": "nb1", "displayName": "Work"},
        "sectionsUrl": "https://graph.example/sectionGroups/sg-new/sections",
        "sectionGroupsUrl": "https://graph.example/sectionGroups/sg-new/sectionGroups",
    })
    record = normalize_created(raw, ContainerKind.SECTION_GROUP)

    assert record.id == "sg-new"
    assert record.kind is ContainerKind.SECTION_GROUP
    assert record.parent.kind is ContainerKind.NOTEBOOK
    assert record.created_at == datetime(2024, 3, 1, 10, 15, 30, 123456, tzinfo=timezone.utc)
    assert record.modified_at == datetime(2024, 3, 2, 8, 0, tzinfo=timezone.utc)
    assert set(record.child_collection_refs) == {"section", "sectionGroup"}


def test_created_missing_id_is_schema_error():
    with pytest.raises(SchemaError, match="create section group response missing ID field"):
        normalize_created(b'{"displayName": "x"}', ContainerKind.SECTION_GROUP)


def test_created_uses_fallback_parent_only_when_absent():
    fallback = ParentRef(ContainerKind.SECTION_GROUP, "sg1")

    bare = normalize_created(b'{"id": "s1"}', ContainerKind.SECTION, fallback_parent=fallback)
    assert bare.parent == fallback

    with_parent = normalize_created(
        b'{"id": "s1", "parentNotebook": {"id": "nb1"}}',
        ContainerKind.SECTION,
        fallback_parent=fallback,
    )
    assert with_parent.parent.id == "nb1"


@pytest.mark.parametrize("value, expected", [
    ("2024-01-15T09:30:00Z", datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)),
    ("2024-01-15T09:30:00.5Z", datetime(2024, 1, 15, 9, 30, 0, 500000, tzinfo=timezone.utc)),
    ("2024-01-15T09:30:00.1234567+00:00",
     datetime(2024, 1, 15, 9, 30, 0, 123456, tzinfo=timezone.utc)),
])
def test_parse_timestamp(value, expected):
    assert parse_timestamp(value) == expected


@pytest.mark.parametrize("value", [None, 12345, "yesterday", ""])
def test_unparseable_timestamps_are_none(value):
    assert parse_timestamp(value) is None


def test_record_to_dict():
    raw = _listing({
        "id": "s1",
        "displayName": "Alpha",
        "createdDateTime": "2024-01-15T09:30:00Z",
        "parentNotebook": {"id": "nb1", "displayName": "Work"},
    })
    out = normalize_list(raw, ContainerKind.SECTION, NormalizeMode.FILTERED)[0].to_dict()

    assert out == {
        "id": "s1",
        "displayName": "Alpha",
        "kind": "section",
        "parent": {"kind": "notebook", "id": "nb1", "displayName": "Work"},
        "createdAt": "2024-01-15T09:30:00+00:00",
    }


@pytest.mark.parametrize("raw", [b"[" * 100000, b'{"value": ' * 100000])
def test_deeply_nested_input_is_parse_error(raw):
    with pytest.raises(ParseError, match="failed to parse"):
        normalize_list(raw, ContainerKind.SECTION)
    with pytest.raises(ParseError, match="failed to parse"):
        normalize_created(raw, ContainerKind.SECTION)


@pytest.mark.parametrize("element, listed_as, expected", [
    ({"id": "x", "pagesUrl": "p"}, ContainerKind.SECTION_GROUP, ContainerKind.SECTION),
    ({"id": "x", "sectionsUrl": "s"}, ContainerKind.SECTION, ContainerKind.SECTION_GROUP),
    ({"id": "x", "sectionGroupsUrl": "g"}, ContainerKind.SECTION, ContainerKind.SECTION_GROUP),
    ({"id": "x"}, ContainerKind.SECTION_GROUP, ContainerKind.SECTION_GROUP),
    ({"id": "x"}, ContainerKind.SECTION, ContainerKind.SECTION),
])
def test_structural_kind(element, listed_as, expected):
    record = normalize_list(_listing(element), listed_as)[0]
    assert structural_kind(record) is expected
