API_BASE_URL = "http://testserver"
API_TOKEN = "test-token"
API_TIMEOUT_SECONDS = 2.0
DEVICE_ID = "test-device"
APP_VERSION = "test"

STORAGE_PATH = ":memory:"

LOCATION_TIMEOUT_SECONDS = 1.0
GEOFENCE_TIMEOUT_SECONDS = 1.0
ASSUME_WITHIN_GEOFENCE_ON_FAILURE = True
WATCH_MIN_DISTANCE_METERS = 10.0
WATCH_MIN_INTERVAL_SECONDS = 30.0

SYNC_BACKOFF_BASE_SECONDS = 5.0
SYNC_BACKOFF_MAX_SECONDS = 300.0

TIMEZONE = "Africa/Nairobi"
LOG_LEVEL = "WARNING"
LOG_FILE = None

DEBUG = False
TESTING = True
