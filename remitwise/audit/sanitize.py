"""Sanitization utilities for audit payloads.

This module makes sure no secret (password, key, token, ...) ever reaches an
audit sink:
- sanitize: Recursively redact deny-listed keys and truncate long strings
- mask_address: Partially obfuscate an identity string for display
- sanitize_error: Reduce an error to its message, never a traceback
- extract_safe_metadata: Sanitize a request body and cap its size
- limit_metadata_size: Replace oversized metadata by a size note

Recursion is bounded: containers already on the current path are replaced by
CIRCULAR_MARKER and nesting beyond MAX_DEPTH by DEPTH_MARKER.
"""

import json
from collections.abc import Mapping
from typing import Any

SENSITIVE_FIELDS: tuple[str, ...] = (
    "password",
    "privateKey",
    "private_key",
    "secret",
    "signature",
    "token",
    "accessToken",
    "access_token",
    "refreshToken",
    "refresh_token",
    "authorization",
    "cookie",
    "sessionId",
    "session_id",
    "apiKey",
    "api_key",
    "AUTH_SECRET",
    "SESSION_PASSWORD",
)
"""Key fragments that are never logged, matched case-insensitively as substrings."""

_SENSITIVE_PATTERNS: tuple[str, ...] = tuple(field.lower() for field in SENSITIVE_FIELDS)

REDACTED_MARKER = "[REDACTED]"
TRUNCATION_MARKER = "... [TRUNCATED]"
CIRCULAR_MARKER = "[CIRCULAR]"
DEPTH_MARKER = "[MAX_DEPTH]"
ADDRESS_MASK = "***"

MAX_STRING_LENGTH: int = 500
"""Strings longer than this are cut and suffixed with TRUNCATION_MARKER."""

MAX_METADATA_SIZE: int = 1000
"""Maximum length of serialized metadata before it is replaced by a size note."""

MAX_DEPTH: int = 32
"""Maximum container nesting followed by sanitize()."""


def is_sensitive_key(key: Any) -> bool:
    """Check whether a mapping key matches the deny-list."""
    lower_key = str(key).lower()
    return any(pattern in lower_key for pattern in _SENSITIVE_PATTERNS)


def _truncate(value: str) -> str:
    if len(value) > MAX_STRING_LENGTH:
        return value[:MAX_STRING_LENGTH] + TRUNCATION_MARKER
    return value


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _sanitize_child(value: Any, deep: bool, path: set[int], depth: int) -> Any:
    """Sanitize a value found inside a container."""
    if deep and (isinstance(value, Mapping) or _is_sequence(value)):
        return _sanitize(value, deep, path, depth + 1)
    if isinstance(value, str):
        return _truncate(value)
    return value


def _sanitize(data: Any, deep: bool, path: set[int], depth: int) -> Any:
    if data is None:
        return None

    is_mapping = isinstance(data, Mapping)
    if not is_mapping and not _is_sequence(data):
        return data

    if depth > MAX_DEPTH:
        return DEPTH_MARKER

    marker = id(data)
    if marker in path:
        return CIRCULAR_MARKER
    path.add(marker)
    try:
        if not is_mapping:
            if not deep:
                return data
            return [_sanitize_child(item, deep, path, depth) for item in data]

        sanitized: dict[Any, Any] = {}
        for key, value in data.items():
            if is_sensitive_key(key):
                sanitized[key] = REDACTED_MARKER
            else:
                sanitized[key] = _sanitize_child(value, deep, path, depth)
        return sanitized
    finally:
        path.discard(marker)


def sanitize(data: Any, deep: bool = True) -> Any:
    """Return a sanitized copy of data.

    Scalars and None pass through unchanged. Mapping values stored under a
    deny-listed key are replaced by REDACTED_MARKER whatever their type;
    other string values longer than MAX_STRING_LENGTH are truncated. Nested
    mappings and sequences are sanitized recursively when deep is True;
    with deep=False a top-level sequence is returned as-is and nested
    containers are copied by reference.

    Args:
        data: Arbitrary JSON-like value (mappings, lists, tuples, scalars).
        deep: Whether to recurse into nested containers.

    Returns:
        A structurally equivalent copy with sensitive values redacted.
    """
    return _sanitize(data, deep, set(), 0)


def mask_address(address: str | None) -> str:
    """Mask an identity string, keeping the first 6 and last 4 characters.

    Args:
        address: Full identity string (e.g. a Stellar public key).

    Returns:
        "GDEMOX...WXYZ" style mask, or "***" for values shorter than 10 characters.
    """
    if not address or len(address) < 10:
        return ADDRESS_MASK
    return f"{address[:6]}...{address[-4:]}"


def _safe_str(value: Any) -> str:
    try:
        return str(value)
    except Exception:
        return type(value).__name__


def sanitize_error(error: Any) -> str:
    """Reduce an error to a loggable message without traceback content.

    Never raises: an object whose ``__str__`` fails is reported by its
    class name.

    Args:
        error: Exception, string, mapping with a "message" key, or any object.

    Returns:
        The error message, or "Unknown error" when there is nothing to report.
    """
    if error is None or (isinstance(error, str) and not error):
        return "Unknown error"

    if isinstance(error, str):
        return error

    if isinstance(error, BaseException):
        message = _safe_str(error)
        return message or type(error).__name__

    try:
        if isinstance(error, Mapping):
            message = error.get("message")
        else:
            message = getattr(error, "message", None)
    except Exception:
        message = None
    if isinstance(message, str) and message:
        return message

    return _safe_str(error)


def _serialized_size(data: Any) -> int:
    try:
        serialized = json.dumps(data, separators=(",", ":"), ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        # Non-string keys or circular references
        serialized = str(data)
    return len(serialized)


def limit_metadata_size(metadata: dict[str, Any]) -> dict[str, Any]:
    """Replace metadata whose serialized form exceeds MAX_METADATA_SIZE.

    Args:
        metadata: Already sanitized metadata.

    Returns:
        The metadata unchanged, or {"_note": ..., "_size": n} when too large.
    """
    size = _serialized_size(metadata)
    if size > MAX_METADATA_SIZE:
        return {
            "_note": "Metadata truncated due to size",
            "_size": size,
        }
    return metadata


def extract_safe_metadata(body: Any) -> dict[str, Any] | None:
    """Build audit metadata from a request body.

    Args:
        body: Parsed request body.

    Returns:
        Deep-sanitized, size-capped copy of the body, or None if it is not a mapping.
    """
    if not isinstance(body, Mapping):
        return None

    return limit_metadata_size(sanitize(body, deep=True))
