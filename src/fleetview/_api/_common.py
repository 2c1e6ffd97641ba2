"""Shared helpers for backend endpoint modules.

This module centralizes the most repeated patterns:
- unwrapping the ``{"data": ...}`` response envelope
- validating payloads into models with consistent error mapping
- serializing window bounds as query parameters

It is internal to fleetview and may change at any time.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from fleetview.exceptions import FleetApiError
from fleetview.window import TimeWindow

M = TypeVar("M", bound=BaseModel)


def unwrap_data(endpoint: str, response: dict[str, Any]) -> Any:
    """Return ``response["data"]`` or raise if the envelope is malformed."""
    if "data" not in response:
        raise FleetApiError(f"{endpoint} response has no 'data' field", endpoint=endpoint)
    return response["data"]


def validate_model(model_cls: type[M], payload: Any, *, endpoint: str) -> M:
    """Validate *payload* into *model_cls*, mapping failures to :class:`FleetApiError`."""
    try:
        return model_cls.model_validate(payload)
    except ValidationError as exc:
        raise FleetApiError(
            f"{endpoint} returned an invalid {model_cls.__name__} payload: {exc.error_count()} error(s)",
            endpoint=endpoint,
        ) from exc


def window_params(window: TimeWindow) -> dict[str, str]:
    """Window bounds as ``start``/``end`` ISO-8601 query parameters."""
    return {"start": window.start_iso, "end": window.end_iso}
