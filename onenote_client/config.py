"""
Client configuration.

Configuration via environment variables:
    ONENOTE_GRAPH_URL         Root of the OneNote API
                              (default: https://graph.microsoft.com/v1.0/me/onenote)
    ONENOTE_TOKEN             Bearer token for authentication
    ONENOTE_TIMEOUT           Request timeout in seconds (default: 30)
    ONENOTE_TRUST_ID_SHAPE    1/true/yes to resolve container kinds from the
                              identifier shape before probing (default: off)
    ONENOTE_DEFAULT_NOTEBOOK  Display name of the notebook used when no
                              container ID is given
    ONENOTE_LOG_LEVEL         Logging level name (default: WARNING)
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import InvalidArgumentError

DEFAULT_GRAPH_URL = "https://graph.microsoft.com/v1.0/me/onenote"

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ClientConfig:
    """Settings needed to build a client."""

    graph_url: str = DEFAULT_GRAPH_URL
    token: str = ""
    timeout: float = 30.0
    trust_id_shape: bool = False
    default_notebook: Optional[str] = None
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientConfig":
        """
        Build a config from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``

        Raises:
            InvalidArgumentError: ONENOTE_TIMEOUT is not a positive number, or
                ONENOTE_LOG_LEVEL is not a logging level name
        """
        env = os.environ if environ is None else environ

        raw_timeout = env.get("ONENOTE_TIMEOUT", "30")
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise InvalidArgumentError(
                f"ONENOTE_TIMEOUT must be a number, got {raw_timeout!r}"
            ) from None
        if timeout <= 0:
            raise InvalidArgumentError("ONENOTE_TIMEOUT must be positive")

        log_level = (env.get("ONENOTE_LOG_LEVEL") or "WARNING").strip().upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise InvalidArgumentError(
                f"ONENOTE_LOG_LEVEL must be a logging level name, got {log_level!r}"
            )

        return cls(
            graph_url=env.get("ONENOTE_GRAPH_URL", DEFAULT_GRAPH_URL).rstrip("/"),
            token=env.get("ONENOTE_TOKEN", ""),
            timeout=timeout,
            trust_id_shape=env.get("ONENOTE_TRUST_ID_SHAPE", "").strip().lower() in _TRUE_VALUES,
            default_notebook=env.get("ONENOTE_DEFAULT_NOTEBOOK") or None,
            log_level=log_level,
        )
