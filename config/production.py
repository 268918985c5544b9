from .config import Config, env_bool

API_BASE_URL = Config.API_BASE_URL
API_TOKEN = Config.API_TOKEN
API_TIMEOUT_SECONDS = Config.API_TIMEOUT_SECONDS
DEVICE_ID = Config.DEVICE_ID
APP_VERSION = Config.APP_VERSION

STORAGE_PATH = Config.STORAGE_PATH

LOCATION_TIMEOUT_SECONDS = Config.LOCATION_TIMEOUT_SECONDS
GEOFENCE_TIMEOUT_SECONDS = Config.GEOFENCE_TIMEOUT_SECONDS
ASSUME_WITHIN_GEOFENCE_ON_FAILURE = Config.ASSUME_WITHIN_GEOFENCE_ON_FAILURE
WATCH_MIN_DISTANCE_METERS = Config.WATCH_MIN_DISTANCE_METERS
WATCH_MIN_INTERVAL_SECONDS = Config.WATCH_MIN_INTERVAL_SECONDS

SYNC_BACKOFF_BASE_SECONDS = Config.SYNC_BACKOFF_BASE_SECONDS
SYNC_BACKOFF_MAX_SECONDS = Config.SYNC_BACKOFF_MAX_SECONDS

TIMEZONE = Config.TIMEZONE
LOG_LEVEL = Config.LOG_LEVEL
LOG_FILE = Config.LOG_FILE

DEBUG = env_bool("DEBUG", False)
