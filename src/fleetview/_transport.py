"""HTTP transport with bearer authentication and JSON error mapping."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable, Mapping
from typing import Any, Protocol

import aiohttp

from fleetview._redact import redact_for_log
from fleetview.config import FleetConfig
from fleetview.exceptions import (
    FleetApiError,
    FleetAuthenticationError,
    FleetNotFoundError,
    FleetTransportError,
)

_logger = logging.getLogger(__name__)

TokenProvider = Callable[[], str | None]


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles/mocks while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def request_json(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, Any] | None = None,
        json_body: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        ...


class HttpTransport:
    """JSON-over-HTTP transport against the fleet backend API."""

    def __init__(
        self,
        config: FleetConfig,
        http_session: aiohttp.ClientSession,
        *,
        token_provider: TokenProvider | None = None,
    ) -> None:
        self._config = config
        self._http = http_session
        self._token_provider = token_provider
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def _build_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {
            "accept": "application/json",
            "content-type": "application/json",
            "user-agent": self._config.user_agent,
        }
        token = self._token_provider() if self._token_provider is not None else self._config.token
        if token:
            headers["authorization"] = f"Bearer {token}"
        return headers

    async def request_json(
        self,
        method: str,
        endpoint: str,
        *,
        params: Mapping[str, Any] | None = None,
        json_body: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send a request and return the decoded JSON object.

        Raises
        ------
        FleetAuthenticationError
            On HTTP 401.
        FleetNotFoundError
            On HTTP 404.
        FleetApiError
            On any other non-2xx status.
        FleetTransportError
            On network failure, timeout or a non-JSON body.
        """
        url = f"{self._config.api_base}{endpoint}"
        headers = self._build_headers()
        body = json.dumps(json_body, separators=(",", ":")) if json_body is not None else None

        _logger.debug(
            "%s %s params=%s headers=%s body=%s",
            method,
            url,
            dict(params) if params else {},
            redact_for_log(headers),
            redact_for_log(json_body),
        )

        try:
            async with self._http.request(
                method,
                url,
                params=dict(params) if params else None,
                data=body,
                headers=headers,
                timeout=self._timeout,
            ) as resp:
                status = resp.status
                charset = resp.charset or "utf-8"
                raw_body = await resp.read()
        except aiohttp.ClientError as exc:
            raise FleetTransportError(
                f"Unable to connect to server for {endpoint}: {exc}",
                endpoint=endpoint,
            ) from exc
        except asyncio.TimeoutError as exc:
            raise FleetTransportError(
                f"Request to {endpoint} timed out after {self._config.request_timeout}s",
                endpoint=endpoint,
            ) from exc

        if status == 401:
            raise FleetAuthenticationError(
                "Session expired. Please login again.",
                status_code=status,
                endpoint=endpoint,
            )

        error_cls = FleetNotFoundError if status == 404 else FleetApiError
        try:
            text = raw_body.decode(charset)
            payload = json.loads(text) if text.strip() else {}
        except (LookupError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            if not 200 <= status < 300:
                raise error_cls(
                    f"Request failed with status {status}",
                    status_code=status,
                    endpoint=endpoint,
                ) from exc
            raise FleetTransportError(
                f"Invalid JSON from {endpoint}: {raw_body[:200]!r}",
                status_code=status,
                endpoint=endpoint,
            ) from exc

        if not 200 <= status < 300:
            message = None
            if isinstance(payload, dict):
                message = payload.get("error") or payload.get("message")
            raise error_cls(
                str(message) if message else f"Request failed with status {status}",
                status_code=status,
                endpoint=endpoint,
            )

        if not isinstance(payload, dict):
            raise FleetTransportError(
                f"Expected a JSON object from {endpoint}, got {type(payload).__name__}",
                status_code=status,
                endpoint=endpoint,
            )

        _logger.debug("%s %s -> %d %s", method, endpoint, status, redact_for_log(payload, max_string=128))
        return payload
