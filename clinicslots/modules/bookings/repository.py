import uuid
from datetime import date
from typing import Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_
from clinicslots.modules.bookings.models import Booking

class BookingRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    def _holding(self, clinic_id: uuid.UUID, day: date) -> list:
        return [
            Booking.clinic_id == clinic_id,
            Booking.date == day,
            Booking.status != "cancelled",
            Booking.deleted_at.is_(None),
        ]

    async def create(self, clinic_id: uuid.UUID, **data) -> Booking:
        obj = Booking(clinic_id=clinic_id, **data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def get(self, clinic_id: uuid.UUID, booking_id: uuid.UUID) -> Booking | None:
        q = select(Booking).where(
            and_(Booking.id == booking_id,
                 Booking.clinic_id == clinic_id,
                 Booking.deleted_at.is_(None))
        )
        res = await self.session.execute(q)
        return res.scalar_one_or_none()

    async def list_holding_for_date(self, clinic_id: uuid.UUID, day: date, practitioner_id: uuid.UUID | None = None) -> Sequence[Booking]:
        cond = self._holding(clinic_id, day)
        if practitioner_id:
            cond.append(Booking.practitioner_id == practitioner_id)
        q = select(Booking).where(and_(*cond)).order_by(Booking.time.asc())
        res = await self.session.execute(q)
        return res.scalars().all()

    async def find_conflict(self, clinic_id: uuid.UUID, day: date, time: str, practitioner_id: uuid.UUID | None) -> Booking | None:
        cond = self._holding(clinic_id, day)
        cond.append(Booking.time == time)
        if practitioner_id:
            cond.append(Booking.practitioner_id == practitioner_id)
        res = await self.session.execute(select(Booking).where(and_(*cond)).limit(1))
        return res.scalars().first()
