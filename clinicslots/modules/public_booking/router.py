import uuid
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from clinicslots.api.params import parse_day
from clinicslots.core.db import get_session
from clinicslots.modules.availability.schemas import AvailabilityOut
from clinicslots.modules.availability.service import AvailabilityService
from clinicslots.modules.bookings.schemas import BookingCreate, BookingConfirmation
from clinicslots.modules.bookings.service import BookingService
from clinicslots.modules.catalogs.repository import CatalogRepository
from clinicslots.modules.catalogs.schemas import ServiceOut
from clinicslots.modules.clinics.service import ClinicService
from clinicslots.modules.directory.repository import PractitionerRepository
from clinicslots.modules.directory.schemas import PractitionerOut
from clinicslots.modules.public_booking.schemas import PublicClinicOut

# Unauthenticated: the clinic slug in the path is the tenant.
router = APIRouter()

@router.get("/booking/{slug}", response_model=PublicClinicOut)
async def clinic_info(slug: str, s: AsyncSession = Depends(get_session)):
    return await ClinicService(s).public_by_slug(slug)

@router.get("/booking/{slug}/services", response_model=list[ServiceOut])
async def list_services(slug: str, s: AsyncSession = Depends(get_session)):
    clinic = await ClinicService(s).public_by_slug(slug)
    return await CatalogRepository(s).list_active_services(clinic.id)

@router.get("/booking/{slug}/practitioners", response_model=list[PractitionerOut])
async def list_practitioners(slug: str, s: AsyncSession = Depends(get_session)):
    clinic = await ClinicService(s).public_by_slug(slug)
    return await PractitionerRepository(s).list_active(clinic.id)

@router.get("/booking/{slug}/available-slots", response_model=AvailabilityOut)
async def available_slots(
    slug: str,
    date: str = Query(..., description="YYYY-MM-DD"),
    service_id: uuid.UUID = Query(..., alias="serviceId"),
    practitioner_id: uuid.UUID | None = Query(None, alias="practitionerId"),
    s: AsyncSession = Depends(get_session),
):
    day = parse_day(date)
    clinic = await ClinicService(s).public_by_slug(slug)
    return await AvailabilityService(s).available_slots(clinic.id, day, service_id, practitioner_id)

@router.post("/booking/{slug}/book", response_model=BookingConfirmation, status_code=status.HTTP_201_CREATED)
async def book(slug: str, payload: BookingCreate, s: AsyncSession = Depends(get_session)):
    clinic = await ClinicService(s).public_by_slug(slug)
    return await BookingService(s).book(clinic.id, payload, clinic=clinic, source="public_booking")
