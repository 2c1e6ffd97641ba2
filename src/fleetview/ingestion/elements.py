"""IO element decoding.

Trackers report sensor values as a sparse map keyed by numeric AVL code
(``"239"``); the backend may additionally expose a friendly alias
(``"ignition"``) for the same signal. Each signal is resolved by trying
its keys in order, alias first; the first key *present* with a non-null
value wins, even if that value is falsy.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict

from fleetview._constants import FUEL_LEVEL_KEYS, IGNITION_KEYS, ODOMETER_KEYS, POWER_VOLTAGE_KEYS
from fleetview.ingestion.normalize import safe_float, safe_int
from fleetview.models.device import parse_io_elements


class DecodedSignals(BaseModel):
    """Typed signals extracted from an IO element map.

    Every field is ``None`` when none of the signal's keys is present,
    which is distinct from a present value of ``0``/``False``.
    """

    model_config = ConfigDict(frozen=True)

    ignition: bool | None = None
    fuel_percent: float | None = None
    odometer: float | None = None
    power_voltage: float | None = None

    @property
    def ignition_on(self) -> bool:
        """Ignition state with absence read as off."""
        return self.ignition is True


def resolve_element(elements: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    """Return the value of the first key in *keys* present in *elements*.

    *elements* must already be normalized by
    :func:`fleetview.models.device.parse_io_elements`.
    """
    for key in keys:
        element = elements.get(key)
        if element is not None and element.value is not None:
            return element.value
    return None


def decode_power_voltage(elements: Mapping[Any, Any] | None) -> float | None:
    """Decode the external power voltage (code 67) from millivolts to volts."""
    millivolts = safe_float(resolve_element(parse_io_elements(elements or {}), POWER_VOLTAGE_KEYS))
    if millivolts is None:
        return None
    return millivolts / 1000.0


def decode_elements(elements: Mapping[Any, Any] | None) -> DecodedSignals:
    """Decode ignition, fuel, odometer and power voltage from *elements*.

    Accepts normalized ``IoElement`` maps as well as raw payload maps
    (``{"239": {"value": 1}}`` or ``{"67": 24300}``). Pure and
    idempotent; an empty or missing map decodes to all-``None``.
    """
    normalized = parse_io_elements(elements or {})

    ignition_raw = resolve_element(normalized, IGNITION_KEYS)
    ignition = None if ignition_raw is None else safe_int(ignition_raw) == 1

    return DecodedSignals(
        ignition=ignition,
        fuel_percent=safe_float(resolve_element(normalized, FUEL_LEVEL_KEYS)),
        odometer=safe_float(resolve_element(normalized, ODOMETER_KEYS)),
        power_voltage=decode_power_voltage(normalized),
    )
