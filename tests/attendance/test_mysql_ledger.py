from __future__ import annotations

from datetime import date, datetime

import mysql.connector
import pytest

from src.face_attendance.face_attendance.attendance.model import AttendanceQuery
from src.face_attendance.face_attendance.attendance.mysql_attendance_repository import MySQLAttendanceRepository, _to_record
from src.face_attendance.face_attendance.core.exceptions import AlreadyClockedOut, DuplicateRecord


class FakeCursor:
    def __init__(self, script):
        self._script = script
        self.executed: list[tuple[str, tuple]] = []
        self.lastrowid = None
        self.rowcount = 0
        self._row = None
        self._rows = []

    def execute(self, sql, params=()):
        self.executed.append((" ".join(sql.split()), params))
        step = self._script.pop(0)
        if isinstance(step, Exception):
            raise step
        self.lastrowid = step.get("lastrowid")
        self.rowcount = step.get("rowcount", 0)
        self._row = step.get("row")
        self._rows = step.get("rows", [])

    def fetchone(self):
        return self._row

    def fetchall(self):
        return self._rows

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class FakeConnFactory:
    def __init__(self, *script):
        self.cursor = FakeCursor(list(script))
        self.conn = FakeConnection(self.cursor)

    def connect(self, *, with_database=True):
        return self.conn


def _row(**overrides):
    row = {
        "attendance_id": 7,
        "user_id": 1,
        "employee_code": "EMP001",
        "work_date": date(2026, 2, 2),
        "clock_in": datetime(2026, 2, 2, 9, 40),
        "clock_out": None,
        "working_hours": 0,
        "status": "present",
        "created_at": datetime(2026, 2, 2, 9, 40),
    }
    row.update(overrides)
    return row


def test_create_maps_duplicate_key_to_duplicate_record():
    dup = mysql.connector.IntegrityError(msg="Duplicate entry", errno=1062)
    factory = FakeConnFactory(dup)
    repo = MySQLAttendanceRepository(factory)

    with pytest.raises(DuplicateRecord):
        repo.create_on_clock_in(user_id=1, employee_code="EMP001", work_date=date(2026, 2, 2), now=datetime(2026, 2, 2, 9, 40))
    assert factory.conn.rolled_back


def test_create_returns_inserted_record():
    factory = FakeConnFactory({"lastrowid": 11, "rowcount": 1})
    repo = MySQLAttendanceRepository(factory)

    rec = repo.create_on_clock_in(user_id=1, employee_code="EMP001", work_date=date(2026, 2, 2), now=datetime(2026, 2, 2, 9, 40))

    assert rec.attendance_id == 11
    assert rec.clock_in == datetime(2026, 2, 2, 9, 40)
    assert factory.conn.committed


def test_clock_out_is_conditional_update():
    factory = FakeConnFactory({"row": _row()}, {"rowcount": 1})
    repo = MySQLAttendanceRepository(factory)

    rec = repo.commit_clock_out(_to_record(_row()), datetime(2026, 2, 2, 22, 10))

    assert rec.working_hours == 12.5
    update_sql, params = factory.cursor.executed[1]
    assert "clock_out IS NULL" in update_sql
    assert params == (datetime(2026, 2, 2, 22, 10), 12.5, 7)
    assert factory.conn.committed


def test_clock_out_lost_race_raises_and_rolls_back():
    factory = FakeConnFactory({"row": _row()}, {"rowcount": 0})
    repo = MySQLAttendanceRepository(factory)

    with pytest.raises(AlreadyClockedOut):
        repo.commit_clock_out(_to_record(_row()), datetime(2026, 2, 2, 22, 10))
    assert factory.conn.rolled_back
    assert not factory.conn.committed


def test_clock_out_on_closed_day_skips_update():
    factory = FakeConnFactory({"row": _row(clock_out=datetime(2026, 2, 2, 22, 0), working_hours=12.33)})
    repo = MySQLAttendanceRepository(factory)

    with pytest.raises(AlreadyClockedOut):
        repo.commit_clock_out(_to_record(_row()), datetime(2026, 2, 2, 22, 10))
    assert len(factory.cursor.executed) == 1


def test_list_records_builds_filters():
    factory = FakeConnFactory({"rows": [_row()]})
    repo = MySQLAttendanceRepository(factory)

    rows = repo.list_records(AttendanceQuery(user_id=1, date_from=date(2026, 2, 1), date_to=date(2026, 2, 28)))

    sql, params = factory.cursor.executed[0]
    assert "user_id=%s AND work_date BETWEEN %s AND %s" in sql
    assert "ORDER BY work_date DESC, clock_in DESC" in sql
    assert params == (1, date(2026, 2, 1), date(2026, 2, 28))
    assert rows[0].employee_code == "EMP001"
