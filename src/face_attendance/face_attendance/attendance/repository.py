from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceQuery, AttendanceRecord


class AttendanceLedger(Protocol):
    """Per-day attendance store.

    Implementations enforce the (user_id, work_date) uniqueness and the
    "clock_out still unset" guard themselves, as a compare-and-set, so two
    racing requests can never both succeed.
    """

    def find_or_none(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_on_clock_in(
        self,
        *,
        user_id: int,
        employee_code: str,
        work_date: date,
        now: datetime,
    ) -> AttendanceRecord:
        """Insert the day's record. Raises DuplicateRecord if it already exists."""

        raise NotImplementedError

    def commit_clock_out(self, record: AttendanceRecord, now: datetime) -> AttendanceRecord:
        """Set clock_out and working_hours.

        Raises NotClockedIn / AlreadyClockedOut when the stored record does not
        satisfy the precondition at write time.
        """

        raise NotImplementedError

    def list_records(self, query: AttendanceQuery) -> Sequence[AttendanceRecord]:
        """Most recent work_date first, ties by most recent clock_in."""

        raise NotImplementedError
