"""Endpoint URL construction and identifier validation."""
from typing import Any
from urllib.parse import quote

from .exceptions import EmptyIDError


def _escape_segment(segment: str) -> str:
    escaped = quote(segment, safe="")
    # quote() leaves "." alone, so "." and ".." would still be dot-segments
    if escaped and set(escaped) == {"."}:
        escaped = escaped.replace(".", "%2E")
    return escaped


def build_url(base: str, *segments: Any) -> str:
    """Join path segments onto ``base``, percent-escaping each one.

    Every segment is escaped on its own, so a value containing ``/``, ``?``,
    ``#``, spaces or a bare ``..`` cannot change the path structure.

    Example:
        >>> build_url("https://api.example.com/v1", "users", "user/admin")
        'https://api.example.com/v1/users/user%2Fadmin'
    """
    parts = [base.rstrip("/")]
    parts.extend(_escape_segment(str(segment)) for segment in segments)
    return "/".join(parts)


def validate_id(value: Any, field: str = "id") -> str:
    """Return ``value`` unchanged if it is a usable identifier.

    Raises:
        EmptyIDError: If the value is None, empty or only whitespace
    """
    if value is None or not str(value).strip():
        raise EmptyIDError(f"{field} must not be empty", field=field)
    return str(value)
