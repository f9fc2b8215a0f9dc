"""Pure slot generation for one practitioner schedule on one date.

Everything in here works on integer minutes since midnight; ``HH:MM`` text is
only parsed on the way in and formatted on the way out.
"""
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Protocol

# Same-day bookings must start at least this far after "now".
LEAD_TIME_MINUTES = 30
DEFAULT_SLOT_MINUTES = 30

_HHMM = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")


class ScheduleLike(Protocol):
    start_time: str
    end_time: str
    break_start: str | None
    break_end: str | None
    slot_duration: int | None


class BookedLike(Protocol):
    time: str
    duration: int


def to_minutes(hhmm: str) -> int:
    m = _HHMM.match(hhmm.strip())
    if not m:
        raise ValueError(f"invalid time of day: {hhmm!r} (expected HH:MM)")
    return int(m.group(1)) * 60 + int(m.group(2))


def format_minutes(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def normalize_hhmm(hhmm: str) -> str:
    """'9:00' -> '09:00'. Raises ValueError on malformed input."""
    return format_minutes(to_minutes(hhmm))


def day_of_week(d: date) -> int:
    # 0 = Sunday .. 6 = Saturday
    return d.isoweekday() % 7


def overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    # half-open intervals: back-to-back ranges do not overlap
    return a_start < b_end and b_start < a_end


@dataclass(frozen=True)
class WorkingWindow:
    start: int
    end: int
    step: int
    break_start: int | None = None
    break_end: int | None = None

    @classmethod
    def from_schedule(cls, schedule: ScheduleLike) -> "WorkingWindow":
        bs = be = None
        if schedule.break_start and schedule.break_end:
            bs, be = to_minutes(schedule.break_start), to_minutes(schedule.break_end)
        step = schedule.slot_duration or DEFAULT_SLOT_MINUTES
        if step <= 0:
            raise ValueError(f"slot_duration must be positive, got {step}")
        return cls(to_minutes(schedule.start_time), to_minutes(schedule.end_time), step, bs, be)

    def hits_break(self, start: int, end: int) -> bool:
        if self.break_start is None or self.break_end is None:
            return False
        return overlaps(start, end, self.break_start, self.break_end)


def generate_slots(
    schedule: ScheduleLike,
    service_duration: int,
    bookings: Iterable[BookedLike],
    now: datetime,
    target_date: date,
) -> list[str]:
    """Bookable start times for ``schedule`` on ``target_date``.

    ``bookings`` must already be limited to this practitioner and date, with
    cancelled/deleted rows removed. ``now`` is the reference instant expressed
    in the clinic's wall clock; it only matters when it falls on ``target_date``.
    A trailing candidate that would run past the end of the window is dropped,
    and a service longer than the whole window simply yields no slots.
    """
    window = WorkingWindow.from_schedule(schedule)
    busy = [(to_minutes(b.time), to_minutes(b.time) + b.duration) for b in bookings]

    earliest = None
    if now.date() == target_date:
        earliest = now.hour * 60 + now.minute + LEAD_TIME_MINUTES

    out: list[str] = []
    t = window.start
    while t + service_duration <= window.end:
        end = t + service_duration
        taken = window.hits_break(t, end) or any(overlaps(t, end, bs, be) for bs, be in busy)
        too_soon = earliest is not None and t < earliest
        if not taken and not too_soon:
            out.append(format_minutes(t))
        t += window.step
    return out
