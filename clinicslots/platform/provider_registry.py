from clinicslots.core.config import settings
from clinicslots.platform.ports.event_bus import EventBusPort
from clinicslots.platform.adapters.bus_noop import NoopEventBus
from clinicslots.platform.ports.clock import ClockPort
from clinicslots.platform.adapters.clock_system import SystemClock

class ProviderRegistry:
    _event_bus: EventBusPort | None = None
    _clock: ClockPort | None = None

    @classmethod
    def event_bus(cls) -> EventBusPort:
        if cls._event_bus is None:
            prov = (settings.EVENT_BUS_PROVIDER or "noop").lower()
            if prov == "redis":
                from clinicslots.platform.adapters.bus_redis import RedisEventBus
                cls._event_bus = RedisEventBus()
            else:
                cls._event_bus = NoopEventBus()
        return cls._event_bus

    @classmethod
    def clock(cls) -> ClockPort:
        if cls._clock is None:
            cls._clock = SystemClock()
        return cls._clock

    @classmethod
    def override(cls, *, event_bus: EventBusPort | None = None, clock: ClockPort | None = None):
        # swap providers at runtime (tests, one-off scripts)
        if event_bus is not None:
            cls._event_bus = event_bus
        if clock is not None:
            cls._clock = clock

    @classmethod
    async def close(cls):
        # only what was actually built; never opens a connection just to close it
        if cls._event_bus is not None:
            await cls._event_bus.close()
            cls._event_bus = None

    @classmethod
    def reset(cls):
        cls._event_bus = None
        cls._clock = None

registry = ProviderRegistry()
