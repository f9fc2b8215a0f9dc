import uuid
from datetime import date
from typing import Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from clinicslots.modules.availability.models import PractitionerSchedule
from clinicslots.modules.availability.slots import day_of_week
from clinicslots.modules.directory.models import Practitioner

class AvailabilityRepository:
    def __init__(self, s: AsyncSession): self.s = s

    # schedules
    async def create_schedule(self, clinic: uuid.UUID, **data) -> PractitionerSchedule:
        obj = PractitionerSchedule(clinic_id=clinic, **data); self.s.add(obj); await self.s.flush(); return obj

    async def list_schedules(self, clinic: uuid.UUID, practitioner_id: uuid.UUID) -> Sequence[PractitionerSchedule]:
        res = await self.s.execute(select(PractitionerSchedule).where(
            PractitionerSchedule.clinic_id==clinic,
            PractitionerSchedule.practitioner_id==practitioner_id,
            PractitionerSchedule.deleted_at.is_(None)
        ).order_by(PractitionerSchedule.day_of_week, PractitionerSchedule.start_time))
        return res.scalars().all()

    async def schedules_for_date(self, clinic: uuid.UUID, day: date, practitioner_id: uuid.UUID | None = None) -> Sequence[tuple[PractitionerSchedule, Practitioner]]:
        """Active schedules covering ``day``, each paired with its (active) practitioner.

        Ordered by practitioner id, then start time, so callers can rely on a
        deterministic "first practitioner" per time.
        """
        q = select(PractitionerSchedule, Practitioner).join(
            Practitioner, Practitioner.id == PractitionerSchedule.practitioner_id
        ).where(
            PractitionerSchedule.clinic_id==clinic,
            PractitionerSchedule.day_of_week==day_of_week(day),
            PractitionerSchedule.is_active.is_(True),
            PractitionerSchedule.deleted_at.is_(None),
            or_(PractitionerSchedule.valid_from.is_(None), PractitionerSchedule.valid_from <= day),
            or_(PractitionerSchedule.valid_until.is_(None), PractitionerSchedule.valid_until >= day),
            Practitioner.clinic_id==clinic,
            Practitioner.active.is_(True),
            Practitioner.deleted_at.is_(None),
        )
        if practitioner_id:
            q = q.where(PractitionerSchedule.practitioner_id==practitioner_id)
        q = q.order_by(Practitioner.id.asc(), PractitionerSchedule.start_time.asc())
        res = await self.s.execute(q)
        return [(sc, pr) for sc, pr in res.all()]
