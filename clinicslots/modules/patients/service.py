import uuid
import logging
from sqlalchemy.ext.asyncio import AsyncSession
from clinicslots.modules.patients.repository import PatientRepository
from clinicslots.modules.patients.schemas import PatientInput
from clinicslots.modules.patients.models import Patient

logger = logging.getLogger(__name__)

class PatientService:
    def __init__(self, session: AsyncSession):
        self.repo = PatientRepository(session)
        self.session = session

    async def resolve_or_create(self, clinic_id: uuid.UUID, payload: PatientInput) -> Patient:
        """Find a patient by phone within the clinic, creating one if none exists.

        Does not commit; the caller owns the transaction.
        """
        patient = await self.repo.find_by_phone(clinic_id, payload.phone)
        if patient:
            return patient
        patient = await self.repo.create(
            clinic_id,
            legal_name=payload.name,
            primary_phone=payload.phone,
            primary_email=payload.email,
        )
        logger.info(f"Created patient {patient.id} for clinic {clinic_id}")
        return patient
