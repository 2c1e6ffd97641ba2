"""Internal constants shared across the library."""

BACKEND_URL = "http://localhost:3000"
API_PREFIX = "/api/v1"
USER_AGENT = "fleetview"

#: Path of the device list view offered when the detail view fails.
DEVICE_LIST_PATH = "/devices"

# ------------------------------------------------------------------
# Query sizing
# ------------------------------------------------------------------

HISTORY_PAGE_SIZE = 50
TRACK_MAX_POINTS = 500
LIVE_REFRESH_INTERVAL = 30.0

# ------------------------------------------------------------------
# Map defaults (Jakarta, street level)
# ------------------------------------------------------------------

DEFAULT_MAP_CENTER: tuple[float, float] = (-6.2088, 106.8456)
DEFAULT_MAP_ZOOM = 13

# ------------------------------------------------------------------
# IO element keys
#
# Each signal is looked up by its friendly alias first, then by the
# numeric AVL code reported by the tracker.
# ------------------------------------------------------------------

IGNITION_KEYS: tuple[str, ...] = ("ignition", "239")
FUEL_LEVEL_KEYS: tuple[str, ...] = ("fuel_level", "84")
ODOMETER_KEYS: tuple[str, ...] = ("odometer", "16")
POWER_VOLTAGE_KEYS: tuple[str, ...] = ("67",)

#: Speeds above this are flagged in the history table (km/h).
OVERSPEED_KMH = 100.0
