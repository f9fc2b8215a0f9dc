import uuid
import logging
from datetime import date
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError

from clinicslots.core.errors import (
    NotFound, Conflict,
    MSG_SERVICE_NOT_FOUND, MSG_PRACTITIONER_NOT_FOUND, MSG_SLOT_TAKEN,
)
from clinicslots.platform.ports.clock import ClockPort
from clinicslots.modules.availability.service import AvailabilityService
from clinicslots.modules.bookings.repository import BookingRepository
from clinicslots.modules.bookings.schemas import BookingCreate
from clinicslots.modules.catalogs.models import Service
from clinicslots.modules.catalogs.repository import CatalogRepository
from clinicslots.modules.clinics.models import Clinic
from clinicslots.modules.directory.models import Practitioner
from clinicslots.modules.directory.repository import PractitionerRepository
from clinicslots.modules.events.outbox import OutboxService
from clinicslots.modules.patients.service import PatientService

logger = logging.getLogger(__name__)

ANY_PRACTITIONER_LABEL = "Any available practitioner"


def _is_slot_violation(exc: IntegrityError) -> bool:
    """True when the store rejected the row because the slot key is already held."""
    orig = getattr(exc, "orig", None)
    diag = getattr(orig, "diag", None)
    constraint = getattr(diag, "constraint_name", None) or ""
    if constraint == "uq_booking_slot":
        return True
    msg = str(orig or exc)
    # asyncpg names the index; SQLite lists the indexed columns instead
    return "uq_booking_slot" in msg or ("UNIQUE" in msg and "booking.time" in msg)


class BookingService:
    def __init__(self, session: AsyncSession, clock: ClockPort | None = None):
        self.session = session
        self.bookings = BookingRepository(session)
        self.catalog = CatalogRepository(session)
        self.practitioners = PractitionerRepository(session)
        self.availability = AvailabilityService(session, clock=clock)

    async def pin_practitioner(self, clinic_id: uuid.UUID, day: date, time: str, service: Service) -> Practitioner:
        """Pick the practitioner an "any practitioner" booking will be held by.

        Tie-break: among practitioners currently offering ``time`` on ``day``,
        the lowest practitioner id wins.
        """
        offering = [s for s in await self.availability.collect_slots(clinic_id, day, service.duration) if s["time"] == time]
        if not offering:
            raise Conflict(MSG_SLOT_TAKEN, date=day.isoformat(), time=time)
        chosen = min(offering, key=lambda s: s["practitioner_id"])
        practitioner = await self.practitioners.get_active(clinic_id, chosen["practitioner_id"])
        if practitioner is None:
            # deactivated between the two reads
            raise Conflict(MSG_SLOT_TAKEN, date=day.isoformat(), time=time)
        return practitioner

    async def book(self, clinic_id: uuid.UUID, payload: BookingCreate, *, clinic: Clinic | None = None, source: str = "staff") -> dict:
        service = await self.catalog.get_active_service(clinic_id, payload.service_id)
        if not service:
            raise NotFound(MSG_SERVICE_NOT_FOUND, service_id=str(payload.service_id))

        if payload.practitioner_id:
            practitioner = await self.practitioners.get_active(clinic_id, payload.practitioner_id)
            if not practitioner:
                raise NotFound(MSG_PRACTITIONER_NOT_FOUND, practitioner_id=str(payload.practitioner_id))
        else:
            practitioner = await self.pin_practitioner(clinic_id, payload.date, payload.time, service)
            logger.info(f"Pinned practitioner {practitioner.id} for any-practitioner booking on {payload.date} {payload.time}")

        pid = practitioner.id
        existing = await self.bookings.find_conflict(clinic_id, payload.date, payload.time, pid)
        if existing:
            logger.info(f"Slot {payload.date} {payload.time} already held by booking {existing.id}")
            raise Conflict(MSG_SLOT_TAKEN, date=payload.date.isoformat(), time=payload.time)

        try:
            patient = await PatientService(self.session).resolve_or_create(clinic_id, payload.patient)
            booking = await self.bookings.create(
                clinic_id,
                practitioner_id=pid,
                service_id=service.id,
                patient_id=patient.id,
                date=payload.date,
                time=payload.time,
                duration=service.duration,
                status="scheduled",
                notes=payload.notes,
            )
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            if not _is_slot_violation(exc):
                raise
            # lost the race between the check above and the insert
            logger.info(f"Concurrent booking won slot {payload.date} {payload.time} for practitioner {pid}")
            raise Conflict(MSG_SLOT_TAKEN, date=payload.date.isoformat(), time=payload.time) from exc

        logger.info(f"Created booking {booking.id} ({source}) for {payload.date} {payload.time} with practitioner {pid}")
        result = {
            "booking_id": booking.id,
            "date": booking.date,
            "time": booking.time,
            "service_name": service.name,
            "practitioner_name": practitioner.name or ANY_PRACTITIONER_LABEL,
            "confirmed": False,
            "clinic_name": clinic.name if clinic else None,
            "clinic_phone": clinic.phone if clinic else None,
        }
        event = {
            "title": "New online booking" if source == "public_booking" else "New booking",
            "message": f"{patient.legal_name} booked {service.name} for {booking.time}",
            "date": booking.date.isoformat(),
            "time": booking.time,
            "practitioner_id": str(pid),
            "link": "/appointments",
            "source": source,
        }
        result["confirmed"] = await self._notify_created(clinic_id, booking.id, event)
        return result

    async def _notify_created(self, clinic_id: uuid.UUID, booking_id: uuid.UUID, event: dict) -> bool:
        """Queue the BOOKING_CREATED event. Never undoes the committed booking."""
        try:
            await OutboxService(self.session).enqueue(clinic_id, "BOOKING_CREATED", "booking", booking_id, event)
            await self.session.commit()
            return True
        except Exception as e:
            logger.warning(f"Failed to queue booking notification for {booking_id}: {e}")
            await self.session.rollback()
            return False

    async def list_for_date(self, clinic_id: uuid.UUID, day: date, practitioner_id: uuid.UUID | None = None):
        return await self.bookings.list_holding_for_date(clinic_id, day, practitioner_id)
