"""Redaction for DEBUG request/response logs.

Every request carries the bearer token in its ``authorization`` header,
and auth-adjacent payloads may echo tokens back.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

REDACTED = "<redacted>"

_SECRET_KEYS: frozenset[str] = frozenset({"authorization", "token", "accesstoken", "refreshtoken", "password"})
_MAX_DEPTH = 20


def _is_secret(key: Any) -> bool:
    return str(key).replace("_", "").lower() in _SECRET_KEYS


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Copy *value* with secret keys masked and long strings shortened."""
    if _depth > _MAX_DEPTH:
        return "<max-depth>"
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    depth = _depth + 1
    if isinstance(value, Mapping):
        return {
            str(key): REDACTED if _is_secret(key) else redact_for_log(item, max_string=max_string, _depth=depth)
            for key, item in value.items()
        }
    if isinstance(value, Sequence):
        return [redact_for_log(item, max_string=max_string, _depth=depth) for item in value]
    return repr(value)
