"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
Deployment policy (windows, endpoints) lives in the settings modules; these are
only the fallbacks used when a setting is absent.
"""

DEFAULT_CLOCK_IN_WINDOW = "09:30-09:45"
DEFAULT_CLOCK_OUT_WINDOW = "22:00-22:30"
DEFAULT_FACE_SERVICE_URL = "http://localhost:5000"
DEFAULT_FACE_SERVICE_TIMEOUT = 10.0
DEFAULT_ADMIN_TOKEN_TTL_HOURS = 24
DEFAULT_MAX_CONTENT_LENGTH = 50 * 1024 * 1024

WORK_DATE_FORMAT = "%Y-%m-%d"
