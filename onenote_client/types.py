"""
Type definitions for the OneNote client library.

Uses dataclasses for structured types and TypedDict for dict-like structures.
Records are immutable (frozen dataclasses); the remote service is the only
source of truth, so nothing here is ever updated in place.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, TypedDict


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class ContainerKind(str, Enum):
    """Classification of a container identifier."""

    NOTEBOOK = "notebook"
    SECTION_GROUP = "sectionGroup"
    SECTION = "section"
    UNKNOWN = "unknown"
    INVALID = "invalid"

    @property
    def is_target(self) -> bool:
        """True for kinds that name a real entity on the service."""
        return self in (
            ContainerKind.NOTEBOOK,
            ContainerKind.SECTION_GROUP,
            ContainerKind.SECTION,
        )

    @property
    def label(self) -> str:
        """Human-readable name used in error messages."""
        return _KIND_LABELS[self]

    @property
    def collection(self) -> str:
        """URL collection segment for this kind (``notebooks``, ...)."""
        try:
            return _KIND_COLLECTIONS[self]
        except KeyError:
            raise ValueError(f"{self.value} has no service collection") from None


_KIND_LABELS = {
    ContainerKind.NOTEBOOK: "notebook",
    ContainerKind.SECTION_GROUP: "section group",
    ContainerKind.SECTION: "section",
    ContainerKind.UNKNOWN: "unknown container",
    ContainerKind.INVALID: "invalid container",
}

_KIND_COLLECTIONS = {
    ContainerKind.NOTEBOOK: "notebooks",
    ContainerKind.SECTION_GROUP: "sectionGroups",
    ContainerKind.SECTION: "sections",
}

PLACEHOLDER_NAMES = {
    ContainerKind.NOTEBOOK: "Unnamed Notebook",
    ContainerKind.SECTION_GROUP: "Unnamed Section Group",
    ContainerKind.SECTION: "Unnamed Section",
}


class Operation(str, Enum):
    """Operations governed by the hierarchy policy."""

    CREATE_SECTION = "create_section"
    CREATE_SECTION_GROUP = "create_section_group"
    LIST_SECTIONS = "list_sections"
    LIST_SECTION_GROUPS = "list_section_groups"


class NormalizeMode(str, Enum):
    """
    How much of a raw listing element a record keeps.

    FULL keeps the complete raw payload for later hierarchical traversal.
    FILTERED keeps only canonical fields, with parents projected to id+name.
    """

    FULL = "full"
    FILTERED = "filtered"


# ---------------------------------------------------------------------------
# TypedDict types for serialized output
# ---------------------------------------------------------------------------


class ParentDict(TypedDict):
    """Serialized parent reference."""

    kind: str
    id: str
    displayName: str


class RecordDict(TypedDict, total=False):
    """Serialized CanonicalRecord as returned by ``to_dict()``."""

    id: str
    displayName: str
    kind: str
    parent: ParentDict
    createdAt: str
    modifiedAt: str
    childCollectionRefs: Dict[str, str]
    raw: Dict[str, Any]


class TreeNodeDict(TypedDict, total=False):
    """Serialized TreeNode; ``children`` is present only on section groups."""

    type: str
    id: str
    name: str
    children: List["TreeNodeDict"]


# ---------------------------------------------------------------------------
# Dataclass types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ParentRef:
    """
    Reference to the immediate container of a section or section group.

    Only notebooks and section groups can be parents.
    """

    kind: ContainerKind
    id: str
    display_name: str = ""

    def __post_init__(self) -> None:
        if self.kind not in (ContainerKind.NOTEBOOK, ContainerKind.SECTION_GROUP):
            raise ValueError(f"a {self.kind.label} cannot be a parent")
        if not self.id:
            raise ValueError("parent reference requires an id")

    def to_dict(self) -> ParentDict:
        return {
            "kind": self.kind.value,
            "id": self.id,
            "displayName": self.display_name,
        }


@dataclass(frozen=True)
class CanonicalRecord:
    """
    Normalized representation of a listed or created entity.

    ``raw`` holds the full source element when the record was built in
    FULL mode and is None for FILTERED records.
    """

    id: str
    display_name: str
    kind: ContainerKind
    parent: Optional[ParentRef] = None
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    child_collection_refs: Dict[str, str] = field(default_factory=dict)
    raw: Optional[Dict[str, Any]] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("CanonicalRecord requires a non-empty id")

    def to_dict(self) -> RecordDict:
        """Serialize to the wire shape returned to callers."""
        out: RecordDict = {
            "id": self.id,
            "displayName": self.display_name,
            "kind": self.kind.value,
        }
        if self.parent is not None:
            out["parent"] = self.parent.to_dict()
        if self.created_at is not None:
            out["createdAt"] = self.created_at.isoformat()
        if self.modified_at is not None:
            out["modifiedAt"] = self.modified_at.isoformat()
        if self.child_collection_refs:
            out["childCollectionRefs"] = dict(self.child_collection_refs)
        if self.raw is not None:
            out["raw"] = dict(self.raw)
        return out


@dataclass(frozen=True)
class TreeNode:
    """
    One section or section group in a notebook outline.

    Sections are leaves; section groups carry their own sections followed
    by their nested section groups, in listing order.
    """

    kind: ContainerKind
    id: str
    display_name: str
    children: Tuple["TreeNode", ...] = ()

    def walk(self):
        """Yield this node and every descendant, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> TreeNodeDict:
        out: TreeNodeDict = {
            "type": self.kind.value,
            "id": self.id,
            "name": self.display_name,
        }
        if self.kind is ContainerKind.SECTION_GROUP:
            out["children"] = [child.to_dict() for child in self.children]
        return out
