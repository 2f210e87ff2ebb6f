from __future__ import annotations

import importlib
from dataclasses import dataclass
from datetime import timedelta
from types import ModuleType

from .attendance.time_window import AdmissionWindow
from .core import constants
from .database.connection import DBConfig


@dataclass(frozen=True)
class AppSettings:
    """Configuration resolved once at process start from a ``config.*`` module."""

    settings_module: str
    secret_key: str
    debug: bool
    db: DBConfig
    auto_init_db: bool
    attendance_ledger: str
    clock_in_window: AdmissionWindow
    clock_out_window: AdmissionWindow
    face_service_url: str
    face_service_timeout: float
    admin_username: str
    admin_password_hash: str
    jwt_secret: str
    admin_token_ttl: timedelta
    max_content_length: int
    log_level: str

    @classmethod
    def from_module(cls, settings: ModuleType) -> "AppSettings":
        ledger = str(getattr(settings, "ATTENDANCE_LEDGER", "mysql")).lower()
        if ledger not in {"mysql", "memory"}:
            raise ValueError(f"Unsupported ATTENDANCE_LEDGER {ledger!r} (expected mysql or memory)")

        timeout = float(getattr(settings, "FACE_SERVICE_TIMEOUT", constants.DEFAULT_FACE_SERVICE_TIMEOUT))
        if timeout <= 0:
            raise ValueError("FACE_SERVICE_TIMEOUT must be positive")

        return cls(
            settings_module=settings.__name__,
            secret_key=str(getattr(settings, "SECRET_KEY")),
            debug=bool(getattr(settings, "DEBUG", False)),
            db=DBConfig.from_dict(dict(getattr(settings, "DB_CONFIG", {}))),
            auto_init_db=bool(getattr(settings, "AUTO_INIT_DB", False)),
            attendance_ledger=ledger,
            clock_in_window=AdmissionWindow.parse(
                getattr(settings, "CLOCK_IN_WINDOW", constants.DEFAULT_CLOCK_IN_WINDOW)
            ),
            clock_out_window=AdmissionWindow.parse(
                getattr(settings, "CLOCK_OUT_WINDOW", constants.DEFAULT_CLOCK_OUT_WINDOW)
            ),
            face_service_url=str(getattr(settings, "FACE_SERVICE_URL", constants.DEFAULT_FACE_SERVICE_URL)),
            face_service_timeout=timeout,
            admin_username=str(getattr(settings, "ADMIN_USERNAME", "admin")),
            admin_password_hash=str(getattr(settings, "ADMIN_PASSWORD_HASH", "")),
            jwt_secret=str(getattr(settings, "JWT_SECRET", "")),
            admin_token_ttl=timedelta(
                hours=int(getattr(settings, "ADMIN_TOKEN_TTL_HOURS", constants.DEFAULT_ADMIN_TOKEN_TTL_HOURS))
            ),
            max_content_length=int(getattr(settings, "MAX_CONTENT_LENGTH", constants.DEFAULT_MAX_CONTENT_LENGTH)),
            log_level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        )


def load_settings(module_name: str) -> AppSettings:
    return AppSettings.from_module(importlib.import_module(module_name))
