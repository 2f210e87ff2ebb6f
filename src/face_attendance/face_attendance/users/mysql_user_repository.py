from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Employee, EmployeeDraft
from .repository import EmployeeRepository

_COLUMNS = "user_id, name, email, employee_id, department, role, face_registered, image_url, created_at, updated_at"
_DUPLICATE_MESSAGE = "Email or Employee ID already exists"


def _to_employee(row: dict) -> Employee:
    return Employee(
        user_id=int(row["user_id"]),
        name=row["name"],
        email=row["email"],
        employee_id=row["employee_id"],
        department=row["department"],
        role=row["role"],
        face_registered=bool(row.get("face_registered", False)),
        image_url=row.get("image_url"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class MySQLUserRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY created_at DESC, user_id DESC")
            return [_to_employee(r) for r in fetchall(cur)]

    def create(self, draft: EmployeeDraft, *, now: datetime) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(name, email, employee_id, department, role, face_registered, created_at, updated_at)
                    VALUES(%s,%s,%s,%s,%s,0,%s,%s)
                    """,
                    (draft.name, draft.email, draft.employee_id, draft.department, draft.role, now, now),
                )
                return int(cur.lastrowid)
        except Exception as e:
            if is_duplicate_key(e):
                raise ValidationError(_DUPLICATE_MESSAGE) from e
            raise

    def update(self, user_id: int, draft: EmployeeDraft, *, now: datetime) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE users
                    SET name=%s, email=%s, employee_id=%s, department=%s, role=%s, updated_at=%s
                    WHERE user_id=%s
                    """,
                    (draft.name, draft.email, draft.employee_id, draft.department, draft.role, now, int(user_id)),
                )
                return cur.rowcount > 0
        except Exception as e:
            if is_duplicate_key(e):
                raise ValidationError(_DUPLICATE_MESSAGE) from e
            raise

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0

    def mark_face_registered(self, user_id: int, *, now: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET face_registered=1, updated_at=%s WHERE user_id=%s",
                (now, int(user_id)),
            )
            return cur.rowcount > 0
