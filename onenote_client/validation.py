"""
Input validation for identifiers and display names.

Everything here runs before a request is built, so a rejected input never
produces a network call.
"""

import logging
import string

from .errors import InvalidArgumentError

logger = logging.getLogger(__name__)

MAX_ID_LENGTH = 100

_ID_ALPHABET = frozenset(string.ascii_letters + string.digits + "-!_")

# Order matters: the first reserved character found in this order is reported.
RESERVED_CHARACTERS = ("?", "*", "\\", "/", ":", "<", ">", "|", "&", "#", "'", "’", "%", "~")

_REPLACEMENTS = {
    "?": ".",
    "*": ".",
    "\\": "-",
    "/": "-",
    ":": "-",
    "<": "(",
    ">": ")",
    "|": "-",
    "&": "and",
    "#": "number",
    "%": "percent",
    "~": "-",
}


def sanitize_id(raw: str, field_label: str = "containerID") -> str:
    """
    Validate an identifier and return a copy safe for path interpolation.

    Args:
        raw: Identifier as supplied by the caller
        field_label: Name of the argument, used in error messages

    Returns:
        The identifier with surrounding whitespace removed

    Raises:
        InvalidArgumentError: Empty, too long, or containing characters
            outside letters, digits, ``-``, ``!`` and ``_``
    """
    if raw is None or not isinstance(raw, str):
        raise InvalidArgumentError(f"{field_label} must be a string")

    clean = raw.strip()
    if not clean:
        logger.debug("Empty %s rejected", field_label)
        raise InvalidArgumentError(f"{field_label} cannot be empty")

    if len(clean) > MAX_ID_LENGTH:
        logger.debug("%s too long: %d characters", field_label, len(clean))
        raise InvalidArgumentError(f"{field_label} is too long")

    for char in clean:
        if char not in _ID_ALPHABET:
            logger.debug("Invalid character %r in %s", char, field_label)
            raise InvalidArgumentError(f"{field_label} contains invalid characters")

    return clean


def validate_display_name(name: str) -> None:
    """
    Check a display name for a new section or section group.

    Raises:
        InvalidArgumentError: Name is blank or contains a reserved character.
            The message carries a suggested replacement name.
    """
    if name is None or not isinstance(name, str) or not name.strip():
        raise InvalidArgumentError("display name cannot be empty")

    for char in RESERVED_CHARACTERS:
        if char in name:
            suggestion = suggest_valid_name(name, char)
            raise InvalidArgumentError(
                f"display name contains illegal character '{char}'. "
                f"Illegal characters are: ?*\\/:<>|&#'%~\n\n"
                f"Suggestion: Try using '{replacement_for(char)}' instead of '{char}'.\n\n"
                f"Suggested valid name: '{suggestion}'"
            )


def replacement_for(char: str) -> str:
    """Suggested stand-in for a reserved character."""
    return _REPLACEMENTS.get(char, "-")


def suggest_valid_name(name: str, char: str) -> str:
    """Replace every occurrence of ``char`` in ``name`` with its stand-in."""
    return name.replace(char, replacement_for(char))
