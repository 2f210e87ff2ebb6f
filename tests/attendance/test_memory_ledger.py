from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime

import pytest

from src.face_attendance.face_attendance.attendance.memory_attendance_repository import InMemoryAttendanceLedger
from src.face_attendance.face_attendance.attendance.model import AttendanceQuery
from src.face_attendance.face_attendance.core.exceptions import (
    AlreadyClockedIn,
    AlreadyClockedOut,
    DuplicateRecord,
    NotClockedIn,
    ValidationError,
)


def _run_concurrently(n: int, target):
    barrier = threading.Barrier(n)
    outcomes: list[object] = []
    lock = threading.Lock()

    def worker():
        barrier.wait()
        try:
            result = target()
        except Exception as e:  # collected for assertions
            result = e
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=worker) for _ in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)
    return outcomes


def test_duplicate_create_is_rejected():
    ledger = InMemoryAttendanceLedger()
    now = datetime(2026, 2, 2, 9, 35)
    ledger.create_on_clock_in(user_id=1, employee_code="EMP001", work_date=now.date(), now=now)

    with pytest.raises(DuplicateRecord):
        ledger.create_on_clock_in(user_id=1, employee_code="EMP001", work_date=now.date(), now=now)


def test_concurrent_creates_allow_exactly_one():
    ledger = InMemoryAttendanceLedger()
    now = datetime(2026, 2, 2, 9, 35)

    outcomes = _run_concurrently(
        8,
        lambda: ledger.create_on_clock_in(user_id=1, employee_code="EMP001", work_date=now.date(), now=now),
    )

    errors = [o for o in outcomes if isinstance(o, Exception)]
    assert len(outcomes) == 8
    assert len(errors) == 7
    assert all(isinstance(e, DuplicateRecord) for e in errors)
    assert len(ledger.list_records(AttendanceQuery(user_id=1))) == 1


def test_concurrent_clock_ins_through_service(container, ledger):
    now = datetime(2026, 2, 2, 9, 35)

    outcomes = _run_concurrently(2, lambda: container.attendance_service.clock(1, "in", now=now))

    successes = [o for o in outcomes if not isinstance(o, Exception)]
    errors = [o for o in outcomes if isinstance(o, Exception)]
    assert len(successes) == 1
    assert len(errors) == 1
    assert isinstance(errors[0], (DuplicateRecord, AlreadyClockedIn))
    assert len(ledger.list_records(AttendanceQuery(user_id=1))) == 1


def test_concurrent_clock_outs_commit_once():
    ledger = InMemoryAttendanceLedger()
    rec = ledger.create_on_clock_in(
        user_id=1, employee_code="EMP001", work_date=date(2026, 2, 2), now=datetime(2026, 2, 2, 9, 40)
    )

    outcomes = _run_concurrently(4, lambda: ledger.commit_clock_out(rec, datetime(2026, 2, 2, 22, 10)))

    errors = [o for o in outcomes if isinstance(o, Exception)]
    assert len(errors) == 3
    assert all(isinstance(e, AlreadyClockedOut) for e in errors)
    assert ledger.find_or_none(1, date(2026, 2, 2)).working_hours == 12.5


def test_commit_clock_out_guards():
    ledger = InMemoryAttendanceLedger()
    rec = ledger.create_on_clock_in(
        user_id=1, employee_code="EMP001", work_date=date(2026, 2, 2), now=datetime(2026, 2, 2, 9, 40)
    )

    with pytest.raises(ValidationError):
        ledger.commit_clock_out(rec, datetime(2026, 2, 2, 9, 0))
    # The failed write left the stored record untouched.
    assert ledger.find_or_none(1, date(2026, 2, 2)).clock_out is None

    stranger = replace(rec, user_id=2)
    with pytest.raises(NotClockedIn):
        ledger.commit_clock_out(stranger, datetime(2026, 2, 2, 22, 0))


def test_closed_days_do_not_keep_locks():
    ledger = InMemoryAttendanceLedger()
    day = date(2026, 2, 2)
    rec = ledger.create_on_clock_in(user_id=1, employee_code="EMP001", work_date=day, now=datetime(2026, 2, 2, 9, 40))
    assert list(ledger._key_locks) == [(1, day)]

    ledger.commit_clock_out(rec, datetime(2026, 2, 2, 22, 10))
    assert ledger._key_locks == {}

    # Rejected attempts against closed or missing days leave nothing behind.
    with pytest.raises(AlreadyClockedOut):
        ledger.commit_clock_out(rec, datetime(2026, 2, 2, 22, 20))
    with pytest.raises(DuplicateRecord):
        ledger.create_on_clock_in(user_id=1, employee_code="EMP001", work_date=day, now=datetime(2026, 2, 2, 22, 25))
    with pytest.raises(NotClockedIn):
        ledger.commit_clock_out(replace(rec, user_id=7), datetime(2026, 2, 2, 22, 20))
    assert ledger._key_locks == {}


def test_concurrent_clock_outs_release_the_day_lock():
    ledger = InMemoryAttendanceLedger()
    rec = ledger.create_on_clock_in(
        user_id=1, employee_code="EMP001", work_date=date(2026, 2, 2), now=datetime(2026, 2, 2, 9, 40)
    )

    _run_concurrently(6, lambda: ledger.commit_clock_out(rec, datetime(2026, 2, 2, 22, 10)))

    assert ledger._key_locks == {}


def test_returned_records_are_snapshots():
    ledger = InMemoryAttendanceLedger()
    rec = ledger.create_on_clock_in(
        user_id=1, employee_code="EMP001", work_date=date(2026, 2, 2), now=datetime(2026, 2, 2, 9, 40)
    )
    ledger.commit_clock_out(rec, datetime(2026, 2, 2, 22, 0))

    assert rec.clock_out is None
    assert ledger.find_or_none(1, date(2026, 2, 2)).clock_out == datetime(2026, 2, 2, 22, 0)


def test_list_records_order_and_filters():
    ledger = InMemoryAttendanceLedger()
    ledger.create_on_clock_in(user_id=1, employee_code="A", work_date=date(2026, 2, 1), now=datetime(2026, 2, 1, 9, 31))
    ledger.create_on_clock_in(user_id=2, employee_code="B", work_date=date(2026, 2, 2), now=datetime(2026, 2, 2, 9, 33))
    ledger.create_on_clock_in(user_id=1, employee_code="A", work_date=date(2026, 2, 2), now=datetime(2026, 2, 2, 9, 40))
    ledger.create_on_clock_in(user_id=1, employee_code="A", work_date=date(2026, 2, 3), now=datetime(2026, 2, 3, 9, 30))

    all_rows = ledger.list_records(AttendanceQuery())
    assert [(r.work_date.day, r.user_id) for r in all_rows] == [(3, 1), (2, 1), (2, 2), (1, 1)]

    by_user = ledger.list_records(AttendanceQuery(user_id=2))
    assert [r.user_id for r in by_user] == [2]

    by_date = ledger.list_records(AttendanceQuery(work_date=date(2026, 2, 2)))
    assert {r.user_id for r in by_date} == {1, 2}

    # Range wins over the single date when both ends are present.
    ranged = ledger.list_records(
        AttendanceQuery(user_id=1, work_date=date(2026, 2, 3), date_from=date(2026, 2, 1), date_to=date(2026, 2, 2))
    )
    assert [r.work_date.day for r in ranged] == [2, 1]

    # A half-open range is ignored.
    half = ledger.list_records(AttendanceQuery(work_date=date(2026, 2, 3), date_from=date(2026, 2, 1)))
    assert [r.work_date.day for r in half] == [3]
