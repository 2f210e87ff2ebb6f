from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..core.enums import AttendanceState, AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one calendar day."""

    attendance_id: int
    user_id: int
    employee_code: str
    work_date: date
    clock_in: Optional[datetime]
    clock_out: Optional[datetime]
    working_hours: float = 0.0
    status: AttendanceStatus = AttendanceStatus.PRESENT
    created_at: Optional[datetime] = None

    @property
    def state(self) -> AttendanceState:
        if self.clock_in is None:
            return AttendanceState.NONE
        if self.clock_out is None:
            return AttendanceState.CLOCKED_IN
        return AttendanceState.CLOCKED_OUT


@dataclass(frozen=True)
class AttendanceQuery:
    """Filter for ListAttendance.

    A date range applies only when both ends are given, and then wins over
    ``work_date``.
    """

    user_id: Optional[int] = None
    work_date: Optional[date] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None

    @property
    def has_range(self) -> bool:
        return self.date_from is not None and self.date_to is not None

    def matches(self, record: AttendanceRecord) -> bool:
        if self.user_id is not None and record.user_id != self.user_id:
            return False
        if self.has_range:
            return self.date_from <= record.work_date <= self.date_to
        if self.work_date is not None and record.work_date != self.work_date:
            return False
        return True


@dataclass(frozen=True)
class EmployeeRef:
    """Populated employee columns shown next to a log row."""

    user_id: int
    name: str
    employee_id: str
    department: str


@dataclass(frozen=True)
class AttendanceLogRow:
    """Read-model for log listings: the record plus its employee, if still present."""

    record: AttendanceRecord
    employee: Optional[EmployeeRef] = None


@dataclass(frozen=True)
class ClockResult:
    success: bool
    message: str
    record: Optional[AttendanceRecord] = None
    working_hours: Optional[float] = None


def compute_working_hours(clock_in: datetime, clock_out: datetime) -> float:
    """Hours between the two instants, rounded half-up to two decimals."""

    hours = Decimal(str((clock_out - clock_in).total_seconds())) / Decimal(3600)
    return float(hours.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
