from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..core.exceptions import AlreadyClockedOut, DuplicateRecord, NotClockedIn, ValidationError
from .model import AttendanceQuery, AttendanceRecord, compute_working_hours
from .repository import AttendanceLedger


class InMemoryAttendanceLedger(AttendanceLedger):
    """Process-local ledger: a dict of frozen records guarded by per-key locks.

    Records are immutable, so a write either swaps the new instance in under
    the key lock or leaves the stored one untouched. A key's lock lives only
    while its day is open; closed days are read-only and need none.
    """

    def __init__(self):
        self._records: dict[tuple[int, date], AttendanceRecord] = {}
        self._key_locks: dict[tuple[int, date], threading.Lock] = {}
        self._registry_lock = threading.Lock()
        self._next_id = 0

    def _lock_for(self, key: tuple[int, date]) -> threading.Lock:
        with self._registry_lock:
            lock = self._key_locks.get(key)
            if lock is None:
                lock = self._key_locks[key] = threading.Lock()
            return lock

    def _release_if_closed(self, key: tuple[int, date]) -> None:
        current = self._records.get(key)
        if current is not None and current.clock_out is not None:
            with self._registry_lock:
                self._key_locks.pop(key, None)

    def _allocate_id(self) -> int:
        with self._registry_lock:
            self._next_id += 1
            return self._next_id

    def find_or_none(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self._records.get((int(user_id), work_date))

    def create_on_clock_in(
        self,
        *,
        user_id: int,
        employee_code: str,
        work_date: date,
        now: datetime,
    ) -> AttendanceRecord:
        key = (int(user_id), work_date)
        if key in self._records:
            raise DuplicateRecord("Attendance record already exists for today")
        try:
            with self._lock_for(key):
                if key in self._records:
                    raise DuplicateRecord("Attendance record already exists for today")
                record = AttendanceRecord(
                    attendance_id=self._allocate_id(),
                    user_id=int(user_id),
                    employee_code=employee_code,
                    work_date=work_date,
                    clock_in=now,
                    clock_out=None,
                    working_hours=0.0,
                    status=AttendanceStatus.PRESENT,
                    created_at=now,
                )
                self._records[key] = record
                return record
        finally:
            self._release_if_closed(key)

    def commit_clock_out(self, record: AttendanceRecord, now: datetime) -> AttendanceRecord:
        key = (record.user_id, record.work_date)
        if key not in self._records:
            raise NotClockedIn("Must clock in first")
        try:
            with self._lock_for(key):
                current = self._records.get(key)
                if current is None or current.clock_in is None:
                    raise NotClockedIn("Must clock in first")
                if current.clock_out is not None:
                    raise AlreadyClockedOut("Already clocked out today")
                if now < current.clock_in:
                    raise ValidationError("Clock out cannot be earlier than clock in")

                updated = replace(
                    current,
                    clock_out=now,
                    working_hours=compute_working_hours(current.clock_in, now),
                )
                self._records[key] = updated
                return updated
        finally:
            self._release_if_closed(key)

    def list_records(self, query: AttendanceQuery) -> Sequence[AttendanceRecord]:
        items = [r for r in list(self._records.values()) if query.matches(r)]
        items.sort(key=lambda r: (r.work_date, r.clock_in or datetime.min), reverse=True)
        return items
