from datetime import datetime, timezone
from clinicslots.platform.ports.clock import ClockPort

class SystemClock(ClockPort):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)

class FixedClock(ClockPort):
    """Always returns the same instant. Used by tests and replay scripts."""

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self.instant = instant

    def now(self) -> datetime:
        return self.instant
