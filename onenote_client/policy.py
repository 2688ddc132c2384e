"""
Hierarchy rules: which container kinds may hold which child kinds.

Sections are leaves. Notebooks and section groups may contain sections and
further section groups. Pure functions only; nothing here touches the
network.
"""

from .errors import InvalidArgumentError, PermissionDeniedError
from .types import ContainerKind, Operation

_CONTAINERS = frozenset({ContainerKind.NOTEBOOK, ContainerKind.SECTION_GROUP})

ALLOWED = {
    Operation.CREATE_SECTION: _CONTAINERS,
    Operation.CREATE_SECTION_GROUP: _CONTAINERS,
    Operation.LIST_SECTIONS: _CONTAINERS,
    Operation.LIST_SECTION_GROUPS: _CONTAINERS,
}

# (action, rule) used in denial messages.
_PHRASES = {
    Operation.CREATE_SECTION: ("create a section inside", "Sections can only be created inside"),
    Operation.CREATE_SECTION_GROUP: (
        "create a section group inside",
        "Section groups can only be created inside",
    ),
    Operation.LIST_SECTIONS: ("list sections from", "Sections can only be listed from"),
    Operation.LIST_SECTION_GROUPS: (
        "list section groups from",
        "Section groups can only be listed from",
    ),
}


def is_allowed(kind: ContainerKind, operation: Operation) -> bool:
    """Return True if ``operation`` may target a container of ``kind``."""
    return as_kind(kind) in ALLOWED.get(Operation(operation), frozenset())


def as_kind(value) -> ContainerKind:
    """Coerce a kind or its wire string; unrecognised values are INVALID."""
    try:
        return ContainerKind(value)
    except ValueError:
        return ContainerKind.INVALID


def check_allowed(kind: ContainerKind, operation: Operation, container_id: str) -> None:
    """
    Raise if the policy forbids ``operation`` on this container.

    Raises:
        PermissionDeniedError: The container is a section
        InvalidArgumentError: The kind is unknown or invalid
    """
    kind = as_kind(kind)
    operation = Operation(operation)
    if is_allowed(kind, operation):
        return

    action, rule = _PHRASES[operation]
    if kind is ContainerKind.SECTION:
        raise PermissionDeniedError(
            f"cannot {action} a section. Container ID {container_id} is a section. "
            f"{rule} notebooks or section groups",
            container_kind=kind.value,
        )
    raise InvalidArgumentError(
        f"container ID {container_id} is a {kind.label}. "
        f"{rule} notebooks or section groups"
    )
