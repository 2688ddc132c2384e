"""
OneNote Client - organizer for the OneNote notebook hierarchy.

Lists and creates sections and section groups, resolving which kind of
container an opaque ID refers to and refusing operations the hierarchy
does not allow (sections cannot hold sections or section groups).

Example usage:
    >>> from onenote_client import ClientConfig, OneNoteClient
    >>>
    >>> client = OneNoteClient(config=ClientConfig.from_env())
    >>>
    >>> # List notebooks
    >>> notebooks = client.list_notebooks()
    >>>
    >>> # Create a section group, then a section inside it
    >>> group = client.create_section_group(notebooks[0].id, "Project Alpha")
    >>> section = client.create_section(group.id, "Meeting Notes")
    >>>
    >>> # Sections and section groups directly under the notebook
    >>> for record in client.list_immediate_children(notebooks[0].id):
    ...     print(f"{record.kind.value}: {record.display_name}")
    >>>
    >>> # Whole outline, section groups expanded
    >>> outline = client.list_notebook_tree(notebooks[0].id)
"""

__version__ = "0.1.0"

# Main client
from .client import OneNoteClient
from .config import ClientConfig

# Building blocks
from .normalize import normalize_created, normalize_list, structural_kind
from .policy import check_allowed, is_allowed
from .resolver import (
    DEFAULT_PROBES,
    ContainerResolver,
    Probe,
    ResolvedContainer,
    classify_by_shape,
)
from .transport import GraphTransport, Transport, TransportResponse
from .validation import sanitize_id, suggest_valid_name, validate_display_name

# Types
from .types import (
    CanonicalRecord,
    ContainerKind,
    NormalizeMode,
    Operation,
    ParentRef,
    TreeNode,
)

# Errors
from .errors import (
    AuthenticationError,
    InvalidArgumentError,
    NotFoundError,
    OneNoteError,
    ParseError,
    PermissionDeniedError,
    RateLimitedError,
    RemoteError,
    SchemaError,
    ServerError,
    UnavailableError,
)

__all__ = [
    # Version
    "__version__",
    # Client
    "OneNoteClient",
    "ClientConfig",
    # Building blocks
    "normalize_created",
    "normalize_list",
    "structural_kind",
    "check_allowed",
    "is_allowed",
    "DEFAULT_PROBES",
    "ContainerResolver",
    "Probe",
    "ResolvedContainer",
    "classify_by_shape",
    "GraphTransport",
    "Transport",
    "TransportResponse",
    "sanitize_id",
    "suggest_valid_name",
    "validate_display_name",
    # Types
    "CanonicalRecord",
    "ContainerKind",
    "NormalizeMode",
    "Operation",
    "ParentRef",
    "TreeNode",
    # Errors
    "AuthenticationError",
    "InvalidArgumentError",
    "NotFoundError",
    "OneNoteError",
    "ParseError",
    "PermissionDeniedError",
    "RateLimitedError",
    "RemoteError",
    "SchemaError",
    "ServerError",
    "UnavailableError",
]
