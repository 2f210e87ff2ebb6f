import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "smartface_attendance_test"),
}

ATTENDANCE_LEDGER = "memory"

CLOCK_IN_WINDOW = "09:30-09:45"
CLOCK_OUT_WINDOW = "22:00-22:30"

FACE_SERVICE_URL = "http://face-service.test"
FACE_SERVICE_TIMEOUT = 2.0

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD_HASH = ""
JWT_SECRET = "test-jwt-secret"
ADMIN_TOKEN_TTL_HOURS = 1

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
