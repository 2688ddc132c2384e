"""
HTTP transport for the OneNote service.

The rest of the library only talks to the ``Transport`` protocol, so tests
and embedding applications can substitute their own implementation. The
default ``GraphTransport`` wraps a ``requests.Session``.
"""

import json
import logging
from typing import Any, Dict, NamedTuple, Optional, Protocol

import requests

from .errors import (
    AuthenticationError,
    NotFoundError,
    RateLimitedError,
    RemoteError,
    ServerError,
    UnavailableError,
)

logger = logging.getLogger(__name__)

SUCCESS_CODES = (200, 201, 204)


class TransportResponse(NamedTuple):
    """Status code and fully-read body of one round trip."""

    status: int
    body: bytes


class Transport(Protocol):
    """Minimal collaborator interface consumed by the client."""

    def request(
        self,
        method: str,
        url: str,
        body: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> TransportResponse:
        """Perform one request; raise UnavailableError on network failure."""
        ...

    def handle_status(self, status: int, operation: str, body: bytes = b"") -> None:
        """Raise a classified error for non-success statuses."""
        ...


def classify_status(status: int, operation: str, body: bytes = b"") -> None:
    """
    Map a non-success status code onto the error taxonomy.

    Args:
        status: HTTP status code
        operation: Label of the operation, used in the message
        body: Raw response body, attached to the error for debugging

    Raises:
        AuthenticationError: 401/403
        NotFoundError: 404
        RateLimitedError: 429
        ServerError: 5xx
        RemoteError: any other non-success status
    """
    if status in SUCCESS_CODES:
        return

    detail = _error_detail(body)
    message = f"{operation} failed"
    if detail:
        message = f"{message}: {detail}"

    if status in (401, 403):
        raise AuthenticationError(message, status, body)
    elif status == 404:
        raise NotFoundError(message, status, body)
    elif status == 429:
        raise RateLimitedError(message, status, body)
    elif status >= 500:
        raise ServerError(message, status, body)
    else:
        raise RemoteError(message, status, body)


def _error_detail(body: bytes) -> str:
    """Pull ``error.message`` out of a service error body if there is one."""
    if not body:
        return ""
    try:
        data = json.loads(body)
    except ValueError:
        return body[:200].decode("utf-8", errors="replace")
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict):
            return str(error.get("message", ""))
        if error:
            return str(error)
    return ""


class GraphTransport:
    """
    ``requests``-backed transport with bearer-token authentication.

    Example:
        >>> transport = GraphTransport(token="...")
        >>> resp = transport.request("GET", transport.url("notebooks"))
        >>> resp.status
        200
    """

    def __init__(
        self,
        base_url: str = "https://graph.microsoft.com/v1.0/me/onenote",
        token: str = "",
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the transport.

        Args:
            base_url: Root of the OneNote API
            token: Bearer token; omitted from requests when empty
            timeout: Request timeout in seconds
            session: Optional pre-configured session
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"

    def url(self, path: str) -> str:
        """Build full URL from path."""
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        url: str,
        body: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> TransportResponse:
        """
        Send one request and return its status and complete body.

        The response is always closed before returning, so the connection
        goes back to the pool on every path.

        Raises:
            UnavailableError: Connection failure, timeout, or other
                ``requests`` error
        """
        logger.debug("%s %s", method, url)
        try:
            response = self._session.request(
                method,
                url,
                json=body,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise UnavailableError(f"{method} {url} failed: {exc}") from exc

        try:
            content = response.content
        except requests.RequestException as exc:
            raise UnavailableError(f"reading response from {url} failed: {exc}") from exc
        finally:
            response.close()

        logger.debug("%s %s -> %d (%d bytes)", method, url, response.status_code, len(content))
        return TransportResponse(response.status_code, content)

    def handle_status(self, status: int, operation: str, body: bytes = b"") -> None:
        classify_status(status, operation, body)

    def close(self) -> None:
        """Close the underlying session."""
        self._session.close()

    def __enter__(self) -> "GraphTransport":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
