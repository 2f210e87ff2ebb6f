from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time


@dataclass(frozen=True)
class AdmissionWindow:
    """Time-of-day interval during which one attendance action is allowed.

    Boundaries are whole minutes; they are applied to the calendar day of the
    instant being checked (server local time).
    """

    start: time
    end: time

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Window start {self.start:%H:%M} is after end {self.end:%H:%M}")

    @classmethod
    def parse(cls, value: str) -> "AdmissionWindow":
        """Parse ``"HH:MM-HH:MM"`` (e.g. ``"09:30-09:45"``)."""

        parts = str(value).strip().split("-")
        if len(parts) != 2:
            raise ValueError(f"Invalid window {value!r}, expected HH:MM-HH:MM")
        return cls(start=_parse_hh_mm(parts[0]), end=_parse_hh_mm(parts[1]))

    def contains(self, now: datetime) -> bool:
        return is_within_window(now, (self.start.hour, self.start.minute), (self.end.hour, self.end.minute))

    def describe(self) -> str:
        return f"{_fmt_12h(self.start)} and {_fmt_12h(self.end)}"

    def __str__(self) -> str:
        return f"{self.start:%H:%M}-{self.end:%H:%M}"


def is_within_window(now: datetime, window_start: tuple[int, int], window_end: tuple[int, int]) -> bool:
    """True iff ``window_start <= now <= window_end`` on the day of ``now``.

    Only the boundaries are truncated to the minute; ``now`` keeps its seconds
    and microseconds, so 09:45:00.5 is outside a window ending at 09:45.
    """

    start = now.replace(hour=window_start[0], minute=window_start[1], second=0, microsecond=0)
    end = now.replace(hour=window_end[0], minute=window_end[1], second=0, microsecond=0)
    return start <= now <= end


def _parse_hh_mm(value: str) -> time:
    try:
        return datetime.strptime(value.strip(), "%H:%M").time()
    except ValueError:
        raise ValueError(f"Invalid time {value!r}, expected HH:MM")


def _fmt_12h(t: time) -> str:
    # 9:30 AM / 10:00 PM
    return t.strftime("%I:%M %p").lstrip("0")
