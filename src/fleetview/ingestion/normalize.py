"""Normalization helpers.

Centralizes defensive parsing of scalar values and ISO-8601 instants.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import Any

_PLACEHOLDERS = frozenset({"", "--", "-", "NaN", "nan", "null"})


def safe_float(value: Any) -> float | None:
    if value is None:
        return None
    if isinstance(value, str) and value.strip() in _PLACEHOLDERS:
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(parsed)


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


def parse_instant(value: Any) -> datetime | None:
    """Parse an ISO-8601 instant (or epoch seconds/milliseconds) to an aware datetime.

    Naive ISO strings are taken as UTC, which is what the backend emits.
    Returns ``None`` for missing or unparseable values.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        ts = float(value)
        # Treat values above 1e11 as milliseconds.
        if ts > 1e11:
            ts /= 1000.0
        return datetime.fromtimestamp(ts, tz=UTC)
    text = safe_str(value)
    if text is None:
        return None
    if text.endswith(("Z", "z")):
        text = f"{text[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)


def format_instant(value: datetime) -> str:
    """Serialize an instant as ISO-8601 UTC with millisecond precision.

    ``2026-10-18T07:30:00.000Z``; naive values are taken as local time.
    """
    aware = value if value.tzinfo is not None else value.astimezone()
    utc = aware.astimezone(UTC)
    return f"{utc.isoformat(timespec='milliseconds').removesuffix('+00:00')}Z"
