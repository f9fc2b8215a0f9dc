import uuid
import logging
from datetime import date, datetime
from collections import defaultdict
from sqlalchemy.ext.asyncio import AsyncSession
from clinicslots.core.errors import NotFound, MSG_SERVICE_NOT_FOUND, MSG_PRACTITIONER_NOT_FOUND
from clinicslots.platform.ports.clock import ClockPort
from clinicslots.platform.provider_registry import registry
from clinicslots.modules.availability.repository import AvailabilityRepository
from clinicslots.modules.availability.slots import generate_slots
from clinicslots.modules.availability.schemas import ScheduleCreate
from clinicslots.modules.bookings.repository import BookingRepository
from clinicslots.modules.catalogs.repository import CatalogRepository
from clinicslots.modules.clinics.repository import ClinicRepository
from clinicslots.modules.clinics.service import clinic_zone
from clinicslots.modules.directory.repository import PractitionerRepository

log = logging.getLogger(__name__)

class AvailabilityService:
    def __init__(self, s: AsyncSession, clock: ClockPort | None = None):
        self.s = s
        self.repo = AvailabilityRepository(s)
        self.bookings = BookingRepository(s)
        self.catalog = CatalogRepository(s)
        self.clock = clock or registry.clock()

    # ---- schedules ----
    async def create_schedule(self, clinic: uuid.UUID, payload: ScheduleCreate):
        if not await PractitionerRepository(self.s).get_active(clinic, payload.practitioner_id):
            raise NotFound(MSG_PRACTITIONER_NOT_FOUND, practitioner_id=str(payload.practitioner_id))
        obj = await self.repo.create_schedule(clinic, **payload.model_dump())
        await self.s.commit()
        return obj

    async def list_schedules(self, clinic: uuid.UUID, practitioner_id: uuid.UUID):
        return await self.repo.list_schedules(clinic, practitioner_id)

    # ---- slots ----
    async def local_now(self, clinic: uuid.UUID) -> datetime:
        """The clock's current instant on the clinic's wall clock."""
        c = await ClinicRepository(self.s).get(clinic)
        return self.clock.now().astimezone(clinic_zone(c))

    async def collect_slots(self, clinic: uuid.UUID, day: date, service_duration: int, practitioner_id: uuid.UUID | None = None) -> list[dict]:
        """Every open (time, practitioner) pair for the day, sorted by time.

        Overlapping schedules of one practitioner are unioned. Ties on the same
        time keep practitioner-id order.
        """
        pairs = await self.repo.schedules_for_date(clinic, day, practitioner_id)
        if not pairs:
            return []
        booked = await self.bookings.list_holding_for_date(clinic, day, practitioner_id)
        by_practitioner = defaultdict(list)
        for b in booked:
            by_practitioner[b.practitioner_id].append(b)

        now = await self.local_now(clinic)
        out: list[dict] = []
        seen: set[tuple[uuid.UUID, str]] = set()
        for schedule, practitioner in pairs:
            times = generate_slots(schedule, service_duration, by_practitioner[practitioner.id], now, day)
            for t in times:
                if (practitioner.id, t) in seen:
                    continue
                seen.add((practitioner.id, t))
                out.append({"time": t, "practitioner_id": practitioner.id, "practitioner_name": practitioner.name})
        out.sort(key=lambda x: x["time"])  # "HH:MM" sorts as text; sort is stable
        return out

    async def available_slots(self, clinic: uuid.UUID, day: date, service_id: uuid.UUID, practitioner_id: uuid.UUID | None = None) -> dict:
        service = await self.catalog.get_active_service(clinic, service_id)
        if not service:
            raise NotFound(MSG_SERVICE_NOT_FOUND, service_id=str(service_id))

        slots = await self.collect_slots(clinic, day, service.duration, practitioner_id)
        if practitioner_id is None:
            # caller doesn't care who: one representative per distinct time
            first_by_time: dict[str, dict] = {}
            for sl in slots:
                first_by_time.setdefault(sl["time"], sl)
            slots = list(first_by_time.values())

        log.debug("availability clinic=%s date=%s service=%s practitioner=%s -> %d slots",
                  clinic, day, service_id, practitioner_id, len(slots))
        return {"date": day, "service_duration_minutes": service.duration, "slots": slots}
