import uuid
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from clinicslots.modules.clinics.models import Clinic

class ClinicRepository:
    def __init__(self, s: AsyncSession): self.s = s

    async def create(self, **data) -> Clinic:
        obj = Clinic(**data); self.s.add(obj); await self.s.flush(); return obj

    async def get(self, clinic_id: uuid.UUID) -> Clinic | None:
        res = await self.s.execute(select(Clinic).where(Clinic.id==clinic_id, Clinic.active.is_(True)))
        return res.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> Clinic | None:
        res = await self.s.execute(select(Clinic).where(Clinic.slug==slug, Clinic.active.is_(True)))
        return res.scalar_one_or_none()
