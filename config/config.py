import os


def env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return float(value)


class Config:
    # Remote API
    API_BASE_URL = os.getenv("API_BASE_URL", "http://127.0.0.1:8000")
    API_TOKEN = os.getenv("API_TOKEN") or None
    API_TIMEOUT_SECONDS = env_float("API_TIMEOUT_SECONDS", 30.0)

    # Device identity sent with every request
    DEVICE_ID = os.getenv("DEVICE_ID") or None
    APP_VERSION = os.getenv("APP_VERSION", "1.0.0")

    # Local storage
    STORAGE_PATH = os.getenv("STORAGE_PATH", os.path.join("var", "attendance_sync.sqlite3"))

    # Location and geofence
    LOCATION_TIMEOUT_SECONDS = env_float("LOCATION_TIMEOUT_SECONDS", 15.0)
    GEOFENCE_TIMEOUT_SECONDS = env_float("GEOFENCE_TIMEOUT_SECONDS", 8.0)
    # Permissive by business policy: with no way to verify, capture is allowed
    ASSUME_WITHIN_GEOFENCE_ON_FAILURE = env_bool("ASSUME_WITHIN_GEOFENCE_ON_FAILURE", True)
    WATCH_MIN_DISTANCE_METERS = env_float("WATCH_MIN_DISTANCE_METERS", 10.0)
    WATCH_MIN_INTERVAL_SECONDS = env_float("WATCH_MIN_INTERVAL_SECONDS", 30.0)

    # Sync retry between automatic passes
    SYNC_BACKOFF_BASE_SECONDS = env_float("SYNC_BACKOFF_BASE_SECONDS", 5.0)
    SYNC_BACKOFF_MAX_SECONDS = env_float("SYNC_BACKOFF_MAX_SECONDS", 300.0)

    TIMEZONE = os.getenv("TIMEZONE", "Africa/Nairobi")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("LOG_FILE") or None
