"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000.0

DEFAULT_API_TIMEOUT_SECONDS = 30.0
DEFAULT_GEOFENCE_TIMEOUT_SECONDS = 8.0
DEFAULT_LOCATION_TIMEOUT_SECONDS = 15.0
DEFAULT_PROBE_TIMEOUT_SECONDS = 3.0

DEFAULT_WATCH_MIN_DISTANCE_METERS = 10.0
DEFAULT_WATCH_MIN_INTERVAL_SECONDS = 30.0

DEFAULT_BACKOFF_BASE_SECONDS = 5.0
DEFAULT_BACKOFF_FACTOR = 2.0
DEFAULT_BACKOFF_MAX_SECONDS = 300.0

# Storage keys (one JSON document per key)
QUEUE_STORAGE_KEY = "offline_attendance_queue"
SITES_STORAGE_KEY = "geofence_sites"
TODAY_STORAGE_KEY = "todays_attendance"
