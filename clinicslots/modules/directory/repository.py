import uuid
from typing import Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from clinicslots.modules.directory.models import Practitioner

class PractitionerRepository:
    def __init__(self, s: AsyncSession): self.s = s

    async def create(self, clinic: uuid.UUID, **data) -> Practitioner:
        obj = Practitioner(clinic_id=clinic, **data); self.s.add(obj); await self.s.flush(); return obj

    async def get_active(self, clinic: uuid.UUID, practitioner_id: uuid.UUID) -> Practitioner | None:
        res = await self.s.execute(select(Practitioner).where(
            Practitioner.clinic_id==clinic,
            Practitioner.id==practitioner_id,
            Practitioner.active.is_(True),
            Practitioner.deleted_at.is_(None),
        ))
        return res.scalar_one_or_none()

    async def list_active(self, clinic: uuid.UUID) -> Sequence[Practitioner]:
        res = await self.s.execute(select(Practitioner).where(
            Practitioner.clinic_id==clinic,
            Practitioner.active.is_(True),
            Practitioner.deleted_at.is_(None),
        ).order_by(Practitioner.name.asc()))
        return res.scalars().all()
