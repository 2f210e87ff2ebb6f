from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_int, require_non_empty
from ..core.enums import AttendanceState, ClockAction
from ..core.exceptions import (
    AlreadyClockedIn,
    AlreadyClockedOut,
    NotClockedIn,
    NotFoundError,
    OutOfWindow,
    ValidationError,
)
from ..recognition.client import IdentityResolver
from ..recognition.model import NoMatch
from ..users.model import Employee
from ..users.repository import EmployeeRepository
from .model import AttendanceLogRow, AttendanceQuery, AttendanceRecord, ClockResult, EmployeeRef
from .repository import AttendanceLedger
from .time_window import AdmissionWindow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecognitionResult:
    success: bool
    employee: Optional[EmployeeRef] = None
    confidence: Optional[float] = None
    message: Optional[str] = None


def state_of(record: Optional[AttendanceRecord]) -> AttendanceState:
    return record.state if record is not None else AttendanceState.NONE


class AttendanceService:
    """Clock-in/clock-out rules on top of the ledger and the face resolver.

    For both actions the admission window is checked before the day's state,
    so an out-of-window attempt is always reported as OutOfWindow.
    """

    def __init__(
        self,
        ledger: AttendanceLedger,
        users: EmployeeRepository,
        resolver: IdentityResolver,
        *,
        clock_in_window: AdmissionWindow,
        clock_out_window: AdmissionWindow,
    ):
        self._ledger = ledger
        self._users = users
        self._resolver = resolver
        self._clock_in_window = clock_in_window
        self._clock_out_window = clock_out_window

    def clock(self, user_id, action, *, now: datetime | None = None) -> ClockResult:
        if user_id in (None, "") or action in (None, ""):
            raise ValidationError("User ID and action are required")
        user_id = require_int(user_id, "User ID")
        try:
            action = ClockAction(str(action).strip().lower())
        except ValueError:
            raise ValidationError("Invalid action")

        # Identity may have gone stale since recognition.
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        now = now or now_local()
        if action is ClockAction.IN:
            return self.clock_in(user, now=now)
        return self.clock_out(user, now=now)

    def clock_in(self, user: Employee, *, now: datetime) -> ClockResult:
        today = now.date()

        if not self._clock_in_window.contains(now):
            raise OutOfWindow(f"Clock IN only allowed between {self._clock_in_window.describe()}")

        existing = self._ledger.find_or_none(user.user_id, today)
        if state_of(existing) is not AttendanceState.NONE:
            raise AlreadyClockedIn("Already clocked in today")

        record = self._ledger.create_on_clock_in(
            user_id=user.user_id,
            employee_code=user.employee_id,
            work_date=today,
            now=now,
        )
        logger.info("Clock in user_id=%s date=%s at %s", user.user_id, today, now.strftime("%H:%M:%S"))
        return ClockResult(success=True, message=f"Clock in successful for {user.name}", record=record)

    def clock_out(self, user: Employee, *, now: datetime) -> ClockResult:
        today = now.date()

        if not self._clock_out_window.contains(now):
            raise OutOfWindow(f"Clock OUT only allowed between {self._clock_out_window.describe()}")

        record = self._ledger.find_or_none(user.user_id, today)
        state = state_of(record)
        if state is AttendanceState.NONE:
            raise NotClockedIn("Must clock in first")
        if state is AttendanceState.CLOCKED_OUT:
            raise AlreadyClockedOut("Already clocked out today")

        record = self._ledger.commit_clock_out(record, now)
        logger.info(
            "Clock out user_id=%s date=%s working_hours=%.2f", user.user_id, today, record.working_hours
        )
        return ClockResult(
            success=True,
            message=f"Clock out successful for {user.name}",
            record=record,
            working_hours=record.working_hours,
        )

    def recognize(self, sample) -> RecognitionResult:
        """Resolve a face sample to an employee summary.

        Does not touch the ledger; the caller clocks with the returned id in a
        separate request. ResolverError propagates unchanged.
        """

        sample = require_non_empty(sample, "Image")

        outcome = self._resolver.identify(sample)
        if isinstance(outcome, NoMatch):
            return RecognitionResult(success=False, message=outcome.message)

        user = self._users.get_by_id(outcome.user_id)
        if not user:
            raise NotFoundError("User not found in database")

        return RecognitionResult(success=True, employee=_to_ref(user), confidence=outcome.confidence)

    def list_attendance(self, query: AttendanceQuery | None = None) -> list[AttendanceLogRow]:
        records = self._ledger.list_records(query or AttendanceQuery())

        refs: dict[int, Optional[EmployeeRef]] = {}
        rows: list[AttendanceLogRow] = []
        for r in records:
            if r.user_id not in refs:
                user = self._users.get_by_id(r.user_id)
                refs[r.user_id] = _to_ref(user) if user else None
            rows.append(AttendanceLogRow(record=r, employee=refs[r.user_id]))
        return rows


def _to_ref(user: Employee) -> EmployeeRef:
    return EmployeeRef(
        user_id=user.user_id,
        name=user.name,
        employee_id=user.employee_id,
        department=user.department,
    )
