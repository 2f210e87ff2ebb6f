from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Day classification stored with each attendance record."""

    PRESENT = "present"
    ABSENT = "absent"
    PARTIAL = "partial"


class ClockAction(str, Enum):
    IN = "in"
    OUT = "out"


class AttendanceState(str, Enum):
    """Per (employee, day) state machine: NONE -> CLOCKED_IN -> CLOCKED_OUT."""

    NONE = "NONE"
    CLOCKED_IN = "CLOCKED_IN"
    CLOCKED_OUT = "CLOCKED_OUT"
