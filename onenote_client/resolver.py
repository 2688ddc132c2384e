"""
Container type resolution.

Given an opaque identifier, work out whether it names a notebook, a section
group, or a section. The service makes no promise about identifier shape,
so the lexical check is only an opt-in shortcut; the existence probes are
authoritative.
"""

import logging
from typing import Callable, NamedTuple, Optional, Sequence

from .errors import NotFoundError, ParseError
from .normalize import decode_json
from .transport import Transport
from .types import ContainerKind
from .validation import sanitize_id

logger = logging.getLogger(__name__)


class Probe(NamedTuple):
    """One read-only existence check and the kind it proves."""

    path_template: str
    kind: ContainerKind


# Probed in this order; the first endpoint answering 200 wins.
DEFAULT_PROBES: Sequence[Probe] = (
    Probe("notebooks/{id}", ContainerKind.NOTEBOOK),
    Probe("sectionGroups/{id}", ContainerKind.SECTION_GROUP),
    Probe("sections/{id}", ContainerKind.SECTION),
)

class ResolvedContainer(NamedTuple):
    """Kind of a container plus the display name its probe reported."""

    kind: ContainerKind
    display_name: str = ""


ShapeClassifier = Callable[[str], ContainerKind]


def classify_by_shape(container_id: str) -> ContainerKind:
    """
    Guess a kind from the identifier's lexical shape.

    Returns UNKNOWN rather than guessing when no pattern applies, and
    INVALID for blank input.
    """
    if not container_id or not container_id.strip():
        return ContainerKind.INVALID
    if "_" in container_id:
        return ContainerKind.SECTION_GROUP
    if container_id.startswith("0-"):
        return ContainerKind.NOTEBOOK
    if container_id.startswith("1-"):
        return ContainerKind.SECTION
    return ContainerKind.UNKNOWN


class ContainerResolver:
    """
    Two-tier resolver: optional shape shortcut, then ordered probes.

    Holds no state between calls; every ``resolve`` probes afresh.

    Example:
        >>> resolver = ContainerResolver(transport, base_url)
        >>> resolver.resolve("0-ABC!123")
        <ContainerKind.NOTEBOOK: 'notebook'>
    """

    def __init__(
        self,
        transport: Transport,
        base_url: str,
        probes: Sequence[Probe] = DEFAULT_PROBES,
        shape_classifier: Optional[ShapeClassifier] = None,
    ):
        """
        Args:
            transport: Transport used for probe requests
            base_url: Root of the OneNote API
            probes: Ordered probe list
            shape_classifier: Lexical shortcut; None disables the pattern tier
        """
        self.transport = transport
        self.base_url = base_url.rstrip("/")
        self.probes = tuple(probes)
        self.shape_classifier = shape_classifier

    def resolve(self, container_id: str) -> ContainerKind:
        """
        Determine the kind of ``container_id``.

        Raises:
            InvalidArgumentError: Identifier is empty or malformed
            NotFoundError: No probe endpoint recognises the identifier
            UnavailableError: Transport failure during a probe
        """
        return self.identify(container_id).kind

    def identify(self, container_id: str) -> ResolvedContainer:
        """
        Like ``resolve``, but also return the display name from the probe.

        The name is empty when the shape tier answered (no request is made)
        or the probe body carries no usable ``displayName``.
        """
        clean = sanitize_id(container_id, "containerID")

        if self.shape_classifier is not None:
            guess = self.shape_classifier(clean)
            if guess.is_target:
                logger.debug("Resolved %s as %s from identifier shape", clean, guess.value)
                return ResolvedContainer(guess)
            logger.debug("Identifier shape of %s is inconclusive", clean)

        for probe in self.probes:
            url = f"{self.base_url}/{probe.path_template.format(id=clean)}"
            response = self.transport.request("GET", url)
            if response.status == 200:
                logger.debug("Resolved %s as %s by probe", clean, probe.kind.value)
                return ResolvedContainer(probe.kind, _probe_name(response.body))
            logger.debug("Probe %s for %s returned %d", probe.kind.value, clean, response.status)

        raise NotFoundError(
            f"container ID {clean} is not a valid notebook, section group, or section"
        )


def _probe_name(body: bytes) -> str:
    # A 200 already proves the kind; an unreadable body only costs the name.
    try:
        data = decode_json(body, "probe")
    except ParseError:
        return ""
    name = data.get("displayName") if isinstance(data, dict) else None
    return name if isinstance(name, str) else ""
