from __future__ import annotations

import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.face_attendance.face_attendance.database.bootstrap import apply_schema, list_tables
from src.face_attendance.face_attendance.database.connection import DatabaseConnection
from src.face_attendance.face_attendance.settings import load_settings


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    load_dotenv(override=False)
    settings = load_settings(get_settings_module())
    conn = DatabaseConnection.get_instance(settings.db)

    apply_schema(conn, schema_path=REPO_ROOT / "database" / "schema.sql")
    tables = list_tables(conn)
    print(f"OK: Applied schema.sql -> {settings.db.describe()} (tables={len(tables)})")


if __name__ == "__main__":
    main()
