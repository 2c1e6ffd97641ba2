from __future__ import annotations

import pytest

from fleetview.config import FleetConfig
from fleetview.exceptions import FleetConfigError

_ENV_KEYS = (
    "FLEET_BACKEND_URL",
    "FLEET_API_PREFIX",
    "FLEET_TOKEN",
    "FLEET_TIME_ZONE",
    "FLEET_REFRESH_INTERVAL",
    "FLEET_TRACK_MAX_POINTS",
    "FLEET_REQUEST_TIMEOUT",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    config = FleetConfig()
    assert config.api_base == "http://localhost:3000/api/v1"
    assert config.refresh_interval == 30.0
    assert config.history_page_size == 50
    assert config.track_max_points == 500
    assert config.token is None


def test_api_base_strips_trailing_slash() -> None:
    assert FleetConfig(base_url="http://10.0.0.5:3000/").api_base == "http://10.0.0.5:3000/api/v1"


def test_from_env_reads_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLEET_BACKEND_URL", "http://fleet.local")
    monkeypatch.setenv("FLEET_TOKEN", "tok")
    monkeypatch.setenv("FLEET_TIME_ZONE", "Asia/Jakarta")
    monkeypatch.setenv("FLEET_REFRESH_INTERVAL", "15")
    monkeypatch.setenv("FLEET_TRACK_MAX_POINTS", " 250 ")

    config = FleetConfig.from_env()

    assert config.base_url == "http://fleet.local"
    assert config.token == "tok"
    assert config.time_zone == "Asia/Jakarta"
    assert config.refresh_interval == 15.0
    assert config.track_max_points == 250


def test_overrides_win_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLEET_TOKEN", "from-env")
    monkeypatch.setenv("FLEET_REFRESH_INTERVAL", "not-a-number")

    config = FleetConfig.from_env(token="explicit", refresh_interval=5.0)

    assert config.token == "explicit"
    assert config.refresh_interval == 5.0


def test_bad_numeric_env_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLEET_REQUEST_TIMEOUT", "soon")
    with pytest.raises(FleetConfigError, match="FLEET_REQUEST_TIMEOUT"):
        FleetConfig.from_env()


@pytest.mark.parametrize(
    "kwargs",
    [{"refresh_interval": 0}, {"history_page_size": -1}, {"track_max_points": 0}],
)
def test_non_positive_values_rejected(kwargs: dict[str, float]) -> None:
    with pytest.raises(FleetConfigError):
        FleetConfig(**kwargs)  # type: ignore[arg-type]
