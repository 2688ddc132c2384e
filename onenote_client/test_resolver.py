"""Tests for container kind resolution."""

import pytest

from onenote_client.conftest import BASE_URL
from onenote_client.errors import InvalidArgumentError, NotFoundError, UnavailableError
from onenote_client.resolver import (
    DEFAULT_PROBES,
    ContainerResolver,
    Probe,
    ResolvedContainer,
    classify_by_shape,
)
from onenote_client.types import ContainerKind


def test_probe_order():
    assert [p.kind for p in DEFAULT_PROBES] == [
        ContainerKind.NOTEBOOK,
        ContainerKind.SECTION_GROUP,
        ContainerKind.SECTION,
    ]


def test_notebook_stops_after_first_probe(transport):
    transport.add("GET", "notebooks/nb1", body={"id": "nb1"})
    resolver = ContainerResolver(transport, BASE_URL)

    assert resolver.resolve("nb1") is ContainerKind.NOTEBOOK
    assert transport.urls() == [f"{BASE_URL}/notebooks/nb1"]


def test_section_group_is_second_probe(transport):
    transport.add("GET", "sectionGroups/sg1", body={"id": "sg1"})
    resolver = ContainerResolver(transport, BASE_URL)

    assert resolver.resolve("sg1") is ContainerKind.SECTION_GROUP
    assert transport.urls() == [
        f"{BASE_URL}/notebooks/sg1",
        f"{BASE_URL}/sectionGroups/sg1",
    ]


def test_section_only_after_both_container_probes_fail(transport):
    transport.add("GET", "notebooks/s1", status=403)
    transport.add("GET", "sections/s1", body={"id": "s1"})
    resolver = ContainerResolver(transport, BASE_URL)

    assert resolver.resolve("s1") is ContainerKind.SECTION
    assert len(transport.calls) == 3


def test_unrecognised_id_is_not_found(transport):
    resolver = ContainerResolver(transport, BASE_URL)

    with pytest.raises(NotFoundError, match="not a valid notebook, section group, or section"):
        resolver.resolve("ghost")
    assert len(transport.calls) == 3


def test_invalid_id_makes_no_request(transport):
    resolver = ContainerResolver(transport, BASE_URL)

    with pytest.raises(InvalidArgumentError):
        resolver.resolve("bad/id")
    assert transport.calls == []


def test_transport_failure_propagates(transport):
    transport.fail("GET", "notebooks/nb1", UnavailableError("connection refused"))
    resolver = ContainerResolver(transport, BASE_URL)

    with pytest.raises(UnavailableError):
        resolver.resolve("nb1")
    assert len(transport.calls) == 1


def test_custom_probe_list(transport):
    transport.add("GET", "sections/s1", body={"id": "s1"})
    resolver = ContainerResolver(
        transport, BASE_URL, probes=[Probe("sections/{id}", ContainerKind.SECTION)]
    )

    assert resolver.resolve("s1") is ContainerKind.SECTION
    assert len(transport.calls) == 1


@pytest.mark.parametrize("container_id, expected", [
    ("0-ABC!123", ContainerKind.NOTEBOOK),
    ("1-DEF!456", ContainerKind.SECTION),
    ("ABC_DEF", ContainerKind.SECTION_GROUP),
    ("XYZ", ContainerKind.UNKNOWN),
    ("", ContainerKind.INVALID),
    ("   ", ContainerKind.INVALID),
])
def test_classify_by_shape(container_id, expected):
    assert classify_by_shape(container_id) is expected


def test_shape_tier_skips_probes_when_conclusive(transport):
    resolver = ContainerResolver(transport, BASE_URL, shape_classifier=classify_by_shape)

    assert resolver.resolve("1-DEF!456") is ContainerKind.SECTION
    assert transport.calls == []


def test_shape_tier_falls_through_to_probes(transport):
    transport.add("GET", "sectionGroups/XYZ", body={"id": "XYZ"})
    resolver = ContainerResolver(transport, BASE_URL, shape_classifier=classify_by_shape)

    assert resolver.resolve("XYZ") is ContainerKind.SECTION_GROUP
    assert len(transport.calls) == 2


def test_shape_tier_is_off_by_default(transport):
    resolver = ContainerResolver(transport, BASE_URL)

    with pytest.raises(NotFoundError):
        resolver.resolve("0-ABC")
    assert len(transport.calls) == 3


def test_identify_returns_probe_display_name(transport):
    transport.add("GET", "sectionGroups/sg1", body={"id": "sg1", "displayName": "Projects"})
    resolver = ContainerResolver(transport, BASE_URL)

    assert resolver.identify("sg1") == ResolvedContainer(ContainerKind.SECTION_GROUP, "Projects")


@pytest.mark.parametrize("body", [b"", b"not json", b'{"id": "nb1"}', b'{"displayName": 7}'])
def test_identify_without_usable_name(transport, body):
    transport.add("GET", "notebooks/nb1", body=body)
    resolver = ContainerResolver(transport, BASE_URL)

    assert resolver.identify("nb1") == ResolvedContainer(ContainerKind.NOTEBOOK, "")


def test_identify_from_shape_has_no_name(transport):
    resolver = ContainerResolver(transport, BASE_URL, shape_classifier=classify_by_shape)

    assert resolver.identify("0-ABC") == ResolvedContainer(ContainerKind.NOTEBOOK, "")
