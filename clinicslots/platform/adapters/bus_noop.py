import json
import logging
from collections import deque
from clinicslots.platform.ports.event_bus import EventBusPort

log = logging.getLogger("bus.noop")

class NoopEventBus(EventBusPort):
    """Logs events instead of delivering them; keeps the last few for inspection."""

    def __init__(self, keep: int = 100):
        self.recent: deque[tuple[str, str, dict]] = deque(maxlen=keep)

    async def publish(self, topic: str, key: str, value: dict, headers: dict | None = None) -> None:
        self.recent.append((topic, key, value))
        log.info("[NOOP BUS] topic=%s key=%s event=%s value=%s", topic, key, value.get("event_type"), json.dumps(value, default=str))

    async def close(self) -> None:
        self.recent.clear()
