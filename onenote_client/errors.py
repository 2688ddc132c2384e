"""
Exception classes for the OneNote client library.

Provides a hierarchy of exceptions for different error conditions:
- OneNoteError: Base exception for all client errors
- InvalidArgumentError: Bad identifier or display name, raised before any I/O
- NotFoundError: Container kind could not be resolved, or HTTP 404
- PermissionDeniedError: Hierarchy policy violation (wrong container kind)
- ParseError: Remote payload is not well-formed JSON
- SchemaError: Remote payload is JSON but structurally incomplete
- RemoteError: Non-success status code from a well-formed request
- UnavailableError: Transport-level failure (connection, timeout)
"""

from typing import Any, Optional


class OneNoteError(Exception):
    """
    Base exception for all OneNote client errors.

    Attributes:
        message: Human-readable error message
        status_code: HTTP status code if applicable
        response: Raw response data for debugging
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response: Optional[Any] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response = response

    def __str__(self) -> str:
        if self.status_code:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message


class InvalidArgumentError(OneNoteError):
    """
    Raised when caller-supplied input is rejected before any request is made.

    This includes:
    - Empty or whitespace-only identifiers
    - Identifiers with characters outside the identifier alphabet
    - Display names containing reserved characters
    - Container kinds that are not valid operational targets
    """


class NotFoundError(OneNoteError):
    """
    Raised when a container or resource does not exist.

    This includes:
    - Container ID that matches no notebook, section group, or section
    - Notebook lookups by display name with no match
    - HTTP 404 responses classified by the transport
    """


class PermissionDeniedError(OneNoteError):
    """
    Raised when the hierarchy policy forbids an operation.

    The container exists, but its kind cannot hold the requested child kind
    (for example, creating a section group inside a section).
    """

    def __init__(
        self,
        message: str,
        container_kind: Optional[str] = None,
        status_code: Optional[int] = None,
        response: Optional[Any] = None,
    ):
        super().__init__(message, status_code, response)
        self.container_kind = container_kind


class ParseError(OneNoteError):
    """Raised when a response body is not well-formed JSON."""


class SchemaError(ParseError):
    """
    Raised when a response body is JSON but lacks required structure.

    This includes:
    - Top-level payload that is not an object
    - Missing ``value`` collection on a listing
    - Missing ``id`` on a create or get response
    """


class RemoteError(OneNoteError):
    """
    Raised when the service answers a well-formed request with a
    non-success status code.

    Attributes:
        context: Container-kind context of the failed operation, if any
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response: Optional[Any] = None,
        context: Optional[str] = None,
    ):
        super().__init__(message, status_code, response)
        self.context = context


class AuthenticationError(RemoteError):
    """Raised for 401/403 responses."""


class RateLimitedError(RemoteError):
    """Raised for 429 responses."""


class ServerError(RemoteError):
    """Raised for 5xx responses."""


class UnavailableError(OneNoteError):
    """
    Raised when the transport cannot complete a request at all.

    The underlying ``requests`` exception is chained as ``__cause__``.
    """
