"""
OneNote client for notebooks, section groups and sections.

Provides list and create operations over the OneNote hierarchy, resolving
container identifiers and enforcing nesting rules before any request that
could fail on the service side.
"""

import logging
from typing import List, Optional, Tuple

from .config import ClientConfig
from .errors import InvalidArgumentError, NotFoundError, OneNoteError, RemoteError, SchemaError
from .normalize import (
    decode_json,
    extract_parent,
    normalize_created,
    normalize_list,
    structural_kind,
)
from .policy import check_allowed
from .resolver import ContainerResolver, classify_by_shape
from .transport import GraphTransport, Transport, TransportResponse
from .types import CanonicalRecord, ContainerKind, NormalizeMode, Operation, ParentRef, TreeNode
from .validation import sanitize_id, validate_display_name

logger = logging.getLogger(__name__)

_CREATE_OPERATIONS = {
    ContainerKind.SECTION: Operation.CREATE_SECTION,
    ContainerKind.SECTION_GROUP: Operation.CREATE_SECTION_GROUP,
}


class OneNoteClient:
    """
    Client for the OneNote notebook hierarchy.

    Provides:
    - Notebooks: list, get, find by name
    - Containers: resolve an ID to notebook / section group / section
    - Sections and section groups: list children, outline a notebook,
      create children

    Every call is an independent round trip; nothing learned about a
    container is kept between calls.

    Example:
        >>> client = OneNoteClient(config=ClientConfig.from_env())
        >>> notebooks = client.list_notebooks()
        >>> group = client.create_section_group(notebooks[0].id, "Project Alpha")
        >>> children = client.list_immediate_children(group.id)
    """

    def __init__(
        self,
        transport: Optional[Transport] = None,
        config: Optional[ClientConfig] = None,
    ):
        """
        Initialize the client.

        Args:
            transport: Transport to use; a GraphTransport built from
                ``config`` when omitted
            config: Client settings (defaults when omitted)
        """
        self.config = config or ClientConfig()
        self.base_url = self.config.graph_url.rstrip("/")
        self._owns_transport = transport is None
        self.transport = transport or GraphTransport(
            base_url=self.base_url,
            token=self.config.token,
            timeout=self.config.timeout,
        )
        self.resolver = ContainerResolver(
            self.transport,
            self.base_url,
            shape_classifier=classify_by_shape if self.config.trust_id_shape else None,
        )

    def _url(self, path: str) -> str:
        """Build full URL from path."""
        return f"{self.base_url}/{path.lstrip('/')}"

    def _get(self, path: str, operation: str) -> TransportResponse:
        """GET ``path`` and raise a classified error unless it succeeded."""
        response = self.transport.request("GET", self._url(path))
        self.transport.handle_status(response.status, operation, response.body)
        return response

    # -------------------------------------------------------------------------
    # Notebooks
    # -------------------------------------------------------------------------

    def list_notebooks(self) -> List[CanonicalRecord]:
        """
        List all notebooks of the signed-in user.

        Only the first page the service returns is read.

        Returns:
            Notebook records (FULL mode, no parent)
        """
        response = self._get("notebooks", "ListNotebooks")
        notebooks = normalize_list(response.body, ContainerKind.NOTEBOOK, NormalizeMode.FULL)
        logger.info("Found %d notebooks", len(notebooks))
        return notebooks

    def get_notebook(self, notebook_id: str) -> CanonicalRecord:
        """
        Get a single notebook.

        Raises:
            InvalidArgumentError: Malformed ID
            NotFoundError: No such notebook
            SchemaError: Response has no id
        """
        clean = sanitize_id(notebook_id, "notebookID")
        response = self._get(f"notebooks/{clean}", "GetNotebook")
        return normalize_created(response.body, ContainerKind.NOTEBOOK, context="get notebook")

    def find_notebook_by_name(self, name: str) -> CanonicalRecord:
        """
        Find a notebook by exact display name.

        Raises:
            InvalidArgumentError: Blank name
            NotFoundError: No notebook has that name
        """
        if not name or not name.strip():
            raise InvalidArgumentError("notebook name cannot be empty")
        for notebook in self.list_notebooks():
            if notebook.display_name == name:
                logger.debug("Found notebook %r: %s", name, notebook.id)
                return notebook
        raise NotFoundError(f"notebook '{name}' not found")

    def default_notebook_id(self) -> str:
        """
        ID of the notebook named by ``config.default_notebook``.

        Raises:
            InvalidArgumentError: No default notebook configured
            NotFoundError: Configured notebook does not exist
        """
        if not self.config.default_notebook:
            raise InvalidArgumentError("no default notebook name configured")
        return self.find_notebook_by_name(self.config.default_notebook).id

    # -------------------------------------------------------------------------
    # Container resolution
    # -------------------------------------------------------------------------

    def resolve_container(self, container_id: str) -> ContainerKind:
        """
        Determine whether an ID names a notebook, section group or section.

        Raises:
            InvalidArgumentError: Malformed ID
            NotFoundError: ID matches no container
            UnavailableError: Transport failure
        """
        return self.resolver.resolve(container_id)

    def _resolve_for(self, container_id: str, *operations: Operation):
        """Sanitize, resolve, and policy-check a container in one step."""
        clean = sanitize_id(container_id, "containerID")
        resolved = self.resolver.identify(clean)
        for operation in operations:
            check_allowed(resolved.kind, operation, clean)
        return clean, resolved

    # -------------------------------------------------------------------------
    # Listing
    # -------------------------------------------------------------------------

    def _list_children(
        self,
        container_id: str,
        container_kind: ContainerKind,
        child_kind: ContainerKind,
    ) -> List[CanonicalRecord]:
        """List direct children of one kind from an already-resolved container."""
        path = f"{container_kind.collection}/{container_id}/{child_kind.collection}"
        operation = f"list {child_kind.label}s from {container_kind.label}"
        response = self._get(path, operation)
        return normalize_list(response.body, child_kind, NormalizeMode.FULL)

    def list_sections(self, container_id: str) -> List[CanonicalRecord]:
        """
        List the sections directly inside a notebook or section group.

        Raises:
            PermissionDeniedError: Container is a section
            NotFoundError: Container does not exist
        """
        clean, (kind, _) = self._resolve_for(container_id, Operation.LIST_SECTIONS)
        sections = self._list_children(clean, kind, ContainerKind.SECTION)
        logger.info("Listed %d sections from %s %s", len(sections), kind.label, clean)
        return sections

    def list_section_groups(self, container_id: str) -> List[CanonicalRecord]:
        """
        List the section groups directly inside a notebook or section group.

        Raises:
            PermissionDeniedError: Container is a section
            NotFoundError: Container does not exist
        """
        clean, (kind, _) = self._resolve_for(container_id, Operation.LIST_SECTION_GROUPS)
        groups = self._list_children(clean, kind, ContainerKind.SECTION_GROUP)
        logger.info("Listed %d section groups from %s %s", len(groups), kind.label, clean)
        return groups

    def list_immediate_children(self, container_id: str) -> List[CanonicalRecord]:
        """
        List direct sections followed by direct section groups.

        Partial results: if the sections are listed but the section-group
        request fails, the sections are still returned and the failure is
        logged as a warning. A failure listing the sections themselves is
        raised as usual.

        Raises:
            PermissionDeniedError: Container is a section
            NotFoundError: Container does not exist
        """
        clean, (kind, _) = self._resolve_for(
            container_id, Operation.LIST_SECTIONS, Operation.LIST_SECTION_GROUPS
        )
        return self._immediate_children(clean, kind)

    def _immediate_children(
        self, container_id: str, kind: ContainerKind
    ) -> List[CanonicalRecord]:
        children = self._list_children(container_id, kind, ContainerKind.SECTION)
        section_count = len(children)

        try:
            children.extend(self._list_children(container_id, kind, ContainerKind.SECTION_GROUP))
        except OneNoteError as exc:
            logger.warning(
                "Returning sections only for %s %s; listing section groups failed: %s",
                kind.label, container_id, exc,
            )

        logger.info(
            "Listed %d sections and %d section groups from %s %s",
            section_count, len(children) - section_count, kind.label, container_id,
        )
        return children

    def list_notebook_tree(self, container_id: str) -> List[TreeNode]:
        """
        Outline every section and section group below a container.

        The container is resolved and policy-checked once. Each section
        group found is then expanded with the same sections-then-groups
        listing as ``list_immediate_children``, so the partial-results rule
        applies at every level. Whether a listed item is a section or a
        section group is read from its locator fields (see
        ``structural_kind``).

        Args:
            container_id: Notebook or section group at the root of the outline

        Returns:
            Top-level nodes; section groups carry their children

        Raises:
            PermissionDeniedError: Container is a section
            NotFoundError: Container does not exist
        """
        clean, (kind, _) = self._resolve_for(
            container_id, Operation.LIST_SECTIONS, Operation.LIST_SECTION_GROUPS
        )
        nodes = self._tree_level(clean, kind, visited={clean})
        logger.info(
            "Built outline of %s %s: %d items",
            kind.label, clean, sum(1 for node in nodes for _ in node.walk()),
        )
        return nodes

    def _tree_level(self, container_id: str, kind: ContainerKind, visited: set) -> List[TreeNode]:
        nodes = []
        for record in self._immediate_children(container_id, kind):
            item_kind = structural_kind(record)
            children: Tuple[TreeNode, ...] = ()
            if item_kind is ContainerKind.SECTION_GROUP:
                if record.id in visited:
                    logger.warning("Section group %s listed twice; not expanding again", record.id)
                else:
                    visited.add(record.id)
                    group_id = sanitize_id(record.id, "sectionGroupID")
                    children = tuple(
                        self._tree_level(group_id, ContainerKind.SECTION_GROUP, visited)
                    )
            nodes.append(TreeNode(item_kind, record.id, record.display_name, children))
        return nodes

    def list_sections_in_section_group(self, section_group_id: str) -> List[CanonicalRecord]:
        """
        List sections of a known section group, projected to id, name and parent.

        No kind probe is made; the caller vouches that the ID is a section
        group.
        """
        clean = sanitize_id(section_group_id, "sectionGroupID")
        response = self._get(f"sectionGroups/{clean}/sections", "ListSectionsInSectionGroup")
        return normalize_list(response.body, ContainerKind.SECTION, NormalizeMode.FILTERED)

    def list_all_sections(self) -> List[CanonicalRecord]:
        """List every section across all notebooks (id and name only)."""
        response = self._get("sections?$select=displayName,id", "ListAllSections")
        sections = normalize_list(response.body, ContainerKind.SECTION, NormalizeMode.FILTERED)
        logger.info("Found %d sections", len(sections))
        return sections

    def get_section(self, section_id: str) -> CanonicalRecord:
        """
        Get a single section.

        Raises:
            NotFoundError: No such section
            SchemaError: Response has no id
        """
        clean = sanitize_id(section_id, "sectionID")
        response = self._get(f"sections/{clean}", "GetSection")
        return normalize_created(response.body, ContainerKind.SECTION, context="get section")

    def resolve_section_notebook(self, section_id: str) -> ParentRef:
        """
        Find the notebook that owns a section.

        Raises:
            SchemaError: Response carries no parent notebook
        """
        clean = sanitize_id(section_id, "sectionID")
        response = self._get(
            f"sections/{clean}?$expand=parentNotebook", "ResolveSectionNotebook"
        )
        data = decode_json(response.body, "section")
        if not isinstance(data, dict):
            raise SchemaError("section response is not a JSON object")
        parent = extract_parent({"parentNotebook": data.get("parentNotebook")})
        if parent is None:
            raise SchemaError(f"unable to determine parent notebook for section {clean}")
        return parent

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------

    def create_child(
        self,
        container_id: str,
        display_name: str,
        child_kind: ContainerKind,
    ) -> CanonicalRecord:
        """
        Create a section or section group inside a container.

        Args:
            container_id: Notebook or section group to create in
            display_name: Name of the new entity
            child_kind: ContainerKind.SECTION or ContainerKind.SECTION_GROUP

        Returns:
            The created entity, parented to the container when the service
            omits parent information

        Raises:
            InvalidArgumentError: Bad name, bad ID, or unsupported child kind
            PermissionDeniedError: Container is a section
            NotFoundError: Container does not exist
            RemoteError: Service did not answer 201 Created
            SchemaError: Created entity has no id
        """
        try:
            operation = _CREATE_OPERATIONS[ContainerKind(child_kind)]
        except (ValueError, KeyError):
            requested = getattr(child_kind, "value", child_kind)
            raise InvalidArgumentError(
                f"cannot create a {requested}; only sections and section groups"
            ) from None
        child_kind = ContainerKind(child_kind)

        validate_display_name(display_name)
        clean, (kind, container_name) = self._resolve_for(container_id, operation)

        url = self._url(f"{kind.collection}/{clean}/{child_kind.collection}")
        response = self.transport.request(
            "POST",
            url,
            body={"displayName": display_name.strip()},
            headers={"Content-Type": "application/json"},
        )
        if response.status != 201:
            raise RemoteError(
                f"failed to create {child_kind.label} in {kind.label}",
                response.status,
                response.body,
                context=kind.label,
            )

        record = normalize_created(
            response.body, child_kind, fallback_parent=ParentRef(kind, clean, container_name)
        )
        logger.info(
            "Created %s %r (%s) in %s %s",
            child_kind.label, record.display_name, record.id, kind.label, clean,
        )
        return record

    def create_section(self, container_id: str, display_name: str) -> CanonicalRecord:
        """Create a section in a notebook or section group."""
        return self.create_child(container_id, display_name, ContainerKind.SECTION)

    def create_section_group(self, container_id: str, display_name: str) -> CanonicalRecord:
        """Create a section group in a notebook or section group."""
        return self.create_child(container_id, display_name, ContainerKind.SECTION_GROUP)

    # -------------------------------------------------------------------------
    # Session Management
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport:
            self.transport.close()

    def __enter__(self) -> "OneNoteClient":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()
