import uuid
from typing import Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from clinicslots.modules.catalogs.models import Service

class CatalogRepository:
    def __init__(self, s: AsyncSession): self.s = s
    async def create_service(self, clinic: uuid.UUID, **data) -> Service:
        obj = Service(clinic_id=clinic, **data); self.s.add(obj); await self.s.flush(); return obj
    async def get_active_service(self, clinic: uuid.UUID, service_id: uuid.UUID) -> Service | None:
        r = await self.s.execute(select(Service).where(Service.clinic_id==clinic, Service.id==service_id, Service.active.is_(True), Service.deleted_at.is_(None)))
        return r.scalar_one_or_none()
    async def list_active_services(self, clinic: uuid.UUID) -> Sequence[Service]:
        r = await self.s.execute(select(Service).where(Service.clinic_id==clinic, Service.active.is_(True), Service.deleted_at.is_(None)).order_by(Service.name.asc()))
        return r.scalars().all()
