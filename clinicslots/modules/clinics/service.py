from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import logging
from sqlalchemy.ext.asyncio import AsyncSession
from clinicslots.core.config import settings
from clinicslots.core.errors import NotFound, Forbidden, MSG_CLINIC_NOT_FOUND, MSG_PUBLIC_BOOKING_DISABLED
from clinicslots.modules.clinics.models import Clinic
from clinicslots.modules.clinics.repository import ClinicRepository

log = logging.getLogger(__name__)

def clinic_zone(clinic: Clinic | None) -> ZoneInfo:
    name = (clinic.timezone if clinic else None) or settings.DEFAULT_TIMEZONE
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError:
        log.warning("Unknown timezone %r, falling back to %s", name, settings.DEFAULT_TIMEZONE)
        return ZoneInfo(settings.DEFAULT_TIMEZONE)

class ClinicService:
    def __init__(self, s: AsyncSession):
        self.s = s
        self.repo = ClinicRepository(s)

    async def public_by_slug(self, slug: str) -> Clinic:
        clinic = await self.repo.get_by_slug(slug)
        if not clinic:
            raise NotFound(MSG_CLINIC_NOT_FOUND, slug=slug)
        if not clinic.public_booking_enabled:
            raise Forbidden(MSG_PUBLIC_BOOKING_DISABLED, slug=slug)
        return clinic
