import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "smartface_attendance"),
}

# mysql | memory (memory keeps attendance in-process, lost on restart)
ATTENDANCE_LEDGER = os.getenv("ATTENDANCE_LEDGER", "mysql")

# Admission windows, local server time, "HH:MM-HH:MM" inclusive
CLOCK_IN_WINDOW = os.getenv("CLOCK_IN_WINDOW", "09:30-09:45")
CLOCK_OUT_WINDOW = os.getenv("CLOCK_OUT_WINDOW", "22:00-22:30")

FACE_SERVICE_URL = os.getenv("FACE_SERVICE_URL", "http://localhost:5000")
FACE_SERVICE_TIMEOUT = float(os.getenv("FACE_SERVICE_TIMEOUT", "10"))

ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
# werkzeug.security.generate_password_hash output; admin login is disabled when empty
ADMIN_PASSWORD_HASH = os.getenv("ADMIN_PASSWORD_HASH", "")
# Admin login stays disabled until a secret is configured
JWT_SECRET = os.getenv("JWT_SECRET", "")
ADMIN_TOKEN_TTL_HOURS = int(os.getenv("ADMIN_TOKEN_TTL_HOURS", "24"))

MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", str(50 * 1024 * 1024)))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
