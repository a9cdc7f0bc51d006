"""Application constants."""

USER_AGENT = "alert-history-map/0.3 (+dashboard; contact: configured-email)"
STAGES = (
    "fetch",
    "resolve",
)
EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20

DEFAULT_MAX_SPAN_DAYS = 30
DEFAULT_TOP_N = 10
DEFAULT_LIST_LIMIT = 100
DEFAULT_NEAREST_MAX_DISTANCE_M = 20000.0

CATEGORY_ROCKET = "Rocket/Missile Fire"
CATEGORY_AIRCRAFT = "Hostile Aircraft Intrusion"
CATEGORY_UNKNOWN = "Unknown"
CATEGORY_LABELS = {
    1: CATEGORY_ROCKET,
    2: CATEGORY_AIRCRAFT,
}
CATEGORY_ALL = "all"

# Leaflet's spherical earth radius.
EARTH_RADIUS_M = 6378137.0

DEFAULT_MAP_CENTER = (32.0853, 34.7818)

JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "source",
    "event",
    "status",
    "chunk",
    "duration_ms",
    "rows_in",
    "rows_out",
    "error_code",
    "message",
)
