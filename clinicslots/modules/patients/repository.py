import uuid
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from clinicslots.modules.patients.models import Patient

class PatientRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, clinic_id: uuid.UUID, **data) -> Patient:
        obj = Patient(clinic_id=clinic_id, **data)
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def find_by_phone(self, clinic_id: uuid.UUID, phone: str) -> Patient | None:
        q = select(Patient).where(
            Patient.clinic_id == clinic_id,
            Patient.primary_phone == phone,
            Patient.deleted_at.is_(None),
        ).order_by(Patient.created_at.asc()).limit(1)
        res = await self.session.execute(q)
        return res.scalars().first()
