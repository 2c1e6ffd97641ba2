"""Client configuration for fleetview."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Callable, Mapping
from typing import Any

from fleetview._constants import (
    API_PREFIX,
    BACKEND_URL,
    HISTORY_PAGE_SIZE,
    LIVE_REFRESH_INTERVAL,
    TRACK_MAX_POINTS,
    USER_AGENT,
)
from fleetview.exceptions import FleetConfigError


def _env_number(env: Mapping[str, str], key: str, cast: Callable[[str], Any]) -> Any:
    value = env.get(key)
    if value is None:
        return None
    try:
        return cast(value.strip())
    except ValueError as exc:
        raise FleetConfigError(f"{key} must be numeric, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class FleetConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Backend server URL, e.g. ``"http://192.168.1.100:3000"``.
    api_prefix : str
        API version prefix appended to *base_url*.
    token : str or None
        Bearer token issued by the login flow. The session owner is
        responsible for obtaining and renewing it.
    time_zone : str or None
        IANA time zone used to resolve "today"/"yesterday" windows.
        ``None`` uses the process-local zone.
    refresh_interval : float
        Seconds between live snapshot refreshes on the device view.
    history_page_size : int
        Rows per history page. The backend contract fixes this at 50.
    track_max_points : int
        Upper bound for server-side track downsampling.
    request_timeout : float
        Total timeout of a single HTTP request in seconds.
    user_agent : str
        ``User-Agent`` header sent with every request.
    """

    base_url: str = BACKEND_URL
    api_prefix: str = API_PREFIX
    token: str | None = None
    time_zone: str | None = None
    refresh_interval: float = LIVE_REFRESH_INTERVAL
    history_page_size: int = HISTORY_PAGE_SIZE
    track_max_points: int = TRACK_MAX_POINTS
    request_timeout: float = 30.0
    user_agent: str = USER_AGENT

    def __post_init__(self) -> None:
        if self.refresh_interval <= 0:
            raise FleetConfigError(f"refresh_interval must be positive, got {self.refresh_interval}")
        if self.history_page_size <= 0:
            raise FleetConfigError(f"history_page_size must be positive, got {self.history_page_size}")
        if self.track_max_points <= 0:
            raise FleetConfigError(f"track_max_points must be positive, got {self.track_max_points}")

    @property
    def api_base(self) -> str:
        """Full API base URL (``base_url`` + ``api_prefix``)."""
        return f"{self.base_url.rstrip('/')}{self.api_prefix}"

    @classmethod
    def from_env(cls, **overrides: Any) -> FleetConfig:
        """Create configuration from environment variables.

        Reads ``FLEET_BACKEND_URL``, ``FLEET_TOKEN`` and the optional
        ``FLEET_*`` variables below. Explicit keyword arguments override
        environment values.

        Raises
        ------
        FleetConfigError
            If a numeric variable cannot be parsed.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "FLEET_BACKEND_URL": "base_url",
            "FLEET_API_PREFIX": "api_prefix",
            "FLEET_TOKEN": "token",
            "FLEET_TIME_ZONE": "time_zone",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_NUMERIC_MAP: dict[str, tuple[str, Callable[[str], Any]]] = {
            "FLEET_REFRESH_INTERVAL": ("refresh_interval", float),
            "FLEET_TRACK_MAX_POINTS": ("track_max_points", int),
            "FLEET_REQUEST_TIMEOUT": ("request_timeout", float),
        }
        for env_key, (field_name, cast) in _ENV_NUMERIC_MAP.items():
            if field_name in overrides:
                continue
            parsed = _env_number(env, env_key, cast)
            if parsed is not None:
                config_kwargs[field_name] = parsed

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
