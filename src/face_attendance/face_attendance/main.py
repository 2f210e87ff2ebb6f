from __future__ import annotations

import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_cors import CORS

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.exceptions import ResolverError
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DatabaseConnection
from .settings import AppSettings, load_settings
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

APP_NAME = "SmartFace Attendance System API"
APP_VERSION = "1.0.0"

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(settings: AppSettings | None = None, container: Container | None = None) -> Flask:
    load_dotenv(override=False)
    settings = settings or load_settings(get_settings_module())
    configure_logging(settings.log_level)

    app = Flask(__name__)
    app.secret_key = settings.secret_key
    app.config["DEBUG"] = settings.debug
    app.config["MAX_CONTENT_LENGTH"] = settings.max_content_length
    CORS(app)

    logger.info(
        "settings=%s db=%s ledger=%s face_service=%s",
        settings.settings_module,
        settings.db.describe(),
        settings.attendance_ledger,
        settings.face_service_url,
    )
    logger.info("clock-in window %s, clock-out window %s", settings.clock_in_window, settings.clock_out_window)

    if container is None:
        if settings.auto_init_db:
            conn = DatabaseConnection.get_instance(settings.db)
            apply_schema(conn, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%d)", len(list_tables(conn)))
        container = build_container(settings)

    register_users(app, container)
    register_attendance(app, container)

    @app.route("/", methods=["GET"], endpoint="index")
    def index():
        return jsonify({"message": APP_NAME, "status": "running", "version": APP_VERSION})

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        try:
            face_service = container.resolver.health()
        except ResolverError:
            return jsonify({"status": "unhealthy", "database": "connected", "faceService": "unavailable"}), 500
        return jsonify({"status": "healthy", "database": "connected", "faceService": face_service})

    return app
