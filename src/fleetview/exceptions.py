"""Custom exception hierarchy for fleetview."""

from __future__ import annotations


class FleetError(Exception):
    """Base exception for all fleetview errors."""


class FleetConfigError(FleetError):
    """Invalid or missing configuration."""


class FleetTransportError(FleetError):
    """HTTP-level failure (network, timeout, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class FleetApiError(FleetError):
    """Backend answered with an error status or a malformed payload."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class FleetAuthenticationError(FleetApiError):
    """Bearer token rejected (HTTP 401).

    Terminating the session is up to the caller that owns the token;
    this library only reports it.
    """


class FleetNotFoundError(FleetApiError):
    """Requested resource does not exist (HTTP 404)."""
