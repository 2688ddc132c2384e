"""
Conversion of raw service JSON into CanonicalRecord objects.

Listings and create responses come back from several endpoints with
overlapping but inconsistent fields. Everything is funnelled through
``record_from_element`` so each entity kind gets the same treatment
regardless of which endpoint produced it.

Two listing variants exist and are selected by the call site:

- ``NormalizeMode.FULL`` keeps the complete raw element on the record.
  Used where callers walk the hierarchy further (immediate-children view,
  section group listings).
- ``NormalizeMode.FILTERED`` keeps only canonical fields and projects the
  parent down to id and display name. Used for the sections-in-group view.
"""

import json
import logging
import re
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from .errors import ParseError, SchemaError
from .types import (
    PLACEHOLDER_NAMES,
    CanonicalRecord,
    ContainerKind,
    NormalizeMode,
    ParentRef,
)

logger = logging.getLogger(__name__)

RawPayload = Union[str, bytes, bytearray]

# Locator fields the service attaches to container entities.
_CHILD_COLLECTION_FIELDS = {
    "sectionsUrl": ContainerKind.SECTION.value,
    "sectionGroupsUrl": ContainerKind.SECTION_GROUP.value,
    "pagesUrl": "page",
}

# Parent fields in precedence order: the section group is the immediate
# container whenever both are present.
_PARENT_FIELDS = (
    ("parentSectionGroup", ContainerKind.SECTION_GROUP),
    ("parentNotebook", ContainerKind.NOTEBOOK),
)

_FRACTION = re.compile(r"\.(\d+)")


def decode_json(raw: RawPayload, context: str) -> Any:
    """
    Parse a response body.

    Raises:
        ParseError: Body is not valid JSON, not valid UTF-8, or nested too
            deeply to decode
    """
    try:
        return json.loads(raw)
    except (ValueError, TypeError, RecursionError) as exc:
        raise ParseError(f"failed to parse {context} response: {exc}") from exc


def normalize_list(
    raw: RawPayload,
    entity_kind: ContainerKind,
    mode: NormalizeMode = NormalizeMode.FULL,
    missing_ok: bool = False,
) -> List[CanonicalRecord]:
    """
    Normalize a ``{"value": [...]}`` listing.

    Args:
        raw: Response body
        entity_kind: Kind of entity the listing contains
        mode: FULL or FILTERED (see module docstring)
        missing_ok: Treat an absent ``value`` field as an empty listing
            instead of a schema error

    Returns:
        One record per usable element, in source order. Elements without
        an id are dropped.

    Raises:
        ParseError: Body is not valid JSON
        SchemaError: Body is not an object, or ``value`` is missing
            (unless ``missing_ok``) or not an array
    """
    context = f"{entity_kind.label} list"
    data = decode_json(raw, context)
    if not isinstance(data, dict):
        raise SchemaError(f"{context} response is not a JSON object")

    if "value" not in data:
        if missing_ok:
            logger.debug("No value field in %s response; treating as empty", context)
            return []
        raise SchemaError(f"no value field found in {context} response")

    items = data["value"]
    if not isinstance(items, list):
        raise SchemaError(f"value field in {context} response is not an array")

    records = []
    for index, element in enumerate(items):
        if not isinstance(element, dict):
            logger.warning("Dropping %s element %d: not an object", entity_kind.label, index)
            continue
        if not _has_id(element):
            logger.warning("Dropping %s element %d: missing id", entity_kind.label, index)
            continue
        records.append(record_from_element(element, entity_kind, mode))

    logger.debug("Normalized %d of %d %s elements", len(records), len(items), entity_kind.label)
    return records


def normalize_created(
    raw: RawPayload,
    entity_kind: ContainerKind,
    fallback_parent: Optional[ParentRef] = None,
    context: Optional[str] = None,
) -> CanonicalRecord:
    """
    Normalize the body of a create (or single-get) response.

    Args:
        raw: Response body
        entity_kind: Kind of the created entity
        fallback_parent: Parent to record when the response carries none,
            normally the container the entity was created in
        context: Label for error messages (default "create <kind>")

    Raises:
        ParseError: Body is not valid JSON
        SchemaError: Body is not an object or has no usable id
    """
    context = context or f"create {entity_kind.label}"
    data = decode_json(raw, context)
    if not isinstance(data, dict):
        raise SchemaError(f"{context} response is not a JSON object")
    if not _has_id(data):
        raise SchemaError(f"{context} response missing ID field")

    record = record_from_element(data, entity_kind, NormalizeMode.FULL)
    if record.parent is None and fallback_parent is not None:
        record = _with_parent(record, fallback_parent)
    return record


def record_from_element(
    element: Dict[str, Any],
    entity_kind: ContainerKind,
    mode: NormalizeMode,
) -> CanonicalRecord:
    """Build a record from one raw element that is known to have an id."""
    name = element.get("displayName")
    if not isinstance(name, str) or not name:
        name = PLACEHOLDER_NAMES.get(entity_kind, "Unnamed")
        logger.debug("Defaulted displayName for %s %s", entity_kind.label, element["id"])

    raw = None
    if mode is NormalizeMode.FULL:
        raw = dict(element)
        raw["displayName"] = name

    return CanonicalRecord(
        id=element["id"],
        display_name=name,
        kind=entity_kind,
        parent=extract_parent(element),
        created_at=parse_timestamp(element.get("createdDateTime"), "createdDateTime"),
        modified_at=parse_timestamp(element.get("lastModifiedDateTime"), "lastModifiedDateTime"),
        child_collection_refs=_child_refs(element),
        raw=raw,
    )


def extract_parent(element: Dict[str, Any]) -> Optional[ParentRef]:
    """
    Return the immediate parent of an element, or None.

    A parent field that is present but null, not an object, or lacking an id
    is treated as absent.
    """
    for field_name, kind in _PARENT_FIELDS:
        value = element.get(field_name)
        if value is None:
            continue
        if not isinstance(value, dict) or not _has_id(value):
            logger.debug("Ignoring malformed %s on %s", field_name, element.get("id"))
            continue
        name = value.get("displayName")
        return ParentRef(
            kind=kind,
            id=value["id"],
            display_name=name if isinstance(name, str) else "",
        )
    return None


def parse_timestamp(value: Any, field_name: str = "timestamp") -> Optional[datetime]:
    """
    Parse an ISO-8601 service timestamp.

    Missing values return None silently; values of the wrong type or shape
    return None with a warning.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        logger.warning("Ignoring non-string %s: %r", field_name, value)
        return None

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # The service sends up to seven fractional digits.
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        logger.warning("Ignoring unparseable %s: %r", field_name, value)
        return None


def structural_kind(record: CanonicalRecord) -> ContainerKind:
    """
    Decide whether a listed record behaves as a section or a section group.

    Reads the locator fields of the raw element: ``pagesUrl`` marks a
    section, ``sectionsUrl`` or ``sectionGroupsUrl`` a section group. When
    none is present the kind of the listing the record came from is kept.
    """
    refs = record.child_collection_refs
    if "page" in refs:
        return ContainerKind.SECTION
    if ContainerKind.SECTION.value in refs or ContainerKind.SECTION_GROUP.value in refs:
        return ContainerKind.SECTION_GROUP
    logger.debug("No locator fields on %s; keeping %s", record.id, record.kind.value)
    return record.kind


def _has_id(element: Dict[str, Any]) -> bool:
    value = element.get("id")
    return isinstance(value, str) and bool(value.strip())


def _child_refs(element: Dict[str, Any]) -> Dict[str, str]:
    refs = {}
    for field_name, child_kind in _CHILD_COLLECTION_FIELDS.items():
        value = element.get(field_name)
        if isinstance(value, str) and value:
            refs[child_kind] = value
    return refs


def _with_parent(record: CanonicalRecord, parent: ParentRef) -> CanonicalRecord:
    return replace(record, parent=parent)
