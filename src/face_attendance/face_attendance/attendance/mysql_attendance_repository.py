from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..core.exceptions import AlreadyClockedOut, DuplicateRecord, NotClockedIn, ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceQuery, AttendanceRecord, compute_working_hours
from .repository import AttendanceLedger

_COLUMNS = "attendance_id, user_id, employee_code, work_date, clock_in, clock_out, working_hours, status, created_at"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        employee_code=r["employee_code"],
        work_date=r["work_date"],
        clock_in=r.get("clock_in"),
        clock_out=r.get("clock_out"),
        working_hours=float(r.get("working_hours") or 0),
        status=AttendanceStatus(r["status"]),
        created_at=r.get("created_at"),
    )


class MySQLAttendanceRepository(AttendanceLedger):
    """Ledger backed by ``attendance_records``.

    Uniqueness comes from ``UNIQUE (user_id, work_date)``; clock-out is a
    conditional UPDATE on ``clock_out IS NULL`` inside one transaction.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_or_none(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND work_date=%s
                """,
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create_on_clock_in(
        self,
        *,
        user_id: int,
        employee_code: str,
        work_date: date,
        now: datetime,
    ) -> AttendanceRecord:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(user_id, employee_code, work_date, clock_in, working_hours, status, created_at)
                    VALUES(%s,%s,%s,%s,0,%s,%s)
                    """,
                    (int(user_id), employee_code, work_date, now, AttendanceStatus.PRESENT.value, now),
                )
                attendance_id = int(cur.lastrowid)
        except Exception as e:
            if is_duplicate_key(e):
                raise DuplicateRecord("Attendance record already exists for today") from e
            raise

        return AttendanceRecord(
            attendance_id=attendance_id,
            user_id=int(user_id),
            employee_code=employee_code,
            work_date=work_date,
            clock_in=now,
            clock_out=None,
            working_hours=0.0,
            status=AttendanceStatus.PRESENT,
            created_at=now,
        )

    def commit_clock_out(self, record: AttendanceRecord, now: datetime) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s FOR UPDATE",
                (record.attendance_id,),
            )
            r = fetchone(cur)
            current = _to_record(r) if r else None
            if current is None or current.clock_in is None:
                raise NotClockedIn("Must clock in first")
            if current.clock_out is not None:
                raise AlreadyClockedOut("Already clocked out today")
            if now < current.clock_in:
                raise ValidationError("Clock out cannot be earlier than clock in")

            working_hours = compute_working_hours(current.clock_in, now)
            cur.execute(
                """
                UPDATE attendance_records
                SET clock_out=%s, working_hours=%s
                WHERE attendance_id=%s AND clock_in IS NOT NULL AND clock_out IS NULL
                """,
                (now, working_hours, current.attendance_id),
            )
            if cur.rowcount == 0:
                raise AlreadyClockedOut("Already clocked out today")

        return AttendanceRecord(
            attendance_id=current.attendance_id,
            user_id=current.user_id,
            employee_code=current.employee_code,
            work_date=current.work_date,
            clock_in=current.clock_in,
            clock_out=now,
            working_hours=working_hours,
            status=current.status,
            created_at=current.created_at,
        )

    def list_records(self, query: AttendanceQuery) -> Sequence[AttendanceRecord]:
        clauses: list[str] = []
        params: list[object] = []

        if query.user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(query.user_id))
        if query.has_range:
            clauses.append("work_date BETWEEN %s AND %s")
            params.extend([query.date_from, query.date_to])
        elif query.work_date is not None:
            clauses.append("work_date=%s")
            params.append(query.work_date)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                {where}
                ORDER BY work_date DESC, clock_in DESC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]
