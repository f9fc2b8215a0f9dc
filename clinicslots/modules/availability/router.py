import uuid
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from clinicslots.api.params import parse_day
from clinicslots.core.db import get_session
from clinicslots.core.security import get_principal, require_scopes, Principal
from clinicslots.modules.availability.service import AvailabilityService
from clinicslots.modules.availability.schemas import ScheduleCreate, ScheduleOut, AvailabilityOut

router = APIRouter()

def svc(s: AsyncSession = Depends(get_session)) -> AvailabilityService:
    return AvailabilityService(s)

# Staff schedules
@router.post("/availability/schedules", response_model=ScheduleOut, status_code=201, dependencies=[Depends(require_scopes("availability:write"))])
async def create_schedule(payload: ScheduleCreate, principal: Principal = Depends(get_principal), service: AvailabilityService = Depends(svc)):
    return await service.create_schedule(principal.clinic_id, payload)

@router.get("/availability/schedules", response_model=list[ScheduleOut], dependencies=[Depends(require_scopes("availability:read"))])
async def list_schedules(practitioner_id: uuid.UUID, principal: Principal = Depends(get_principal), service: AvailabilityService = Depends(svc)):
    return await service.list_schedules(principal.clinic_id, practitioner_id)

# Slot search
@router.get("/availability/slots", response_model=AvailabilityOut, dependencies=[Depends(require_scopes("availability:read"))])
async def search_slots(
    date: str = Query(..., description="YYYY-MM-DD"),
    service_id: uuid.UUID = Query(...),
    practitioner_id: uuid.UUID | None = None,
    principal: Principal = Depends(get_principal),
    service: AvailabilityService = Depends(svc),
):
    return await service.available_slots(principal.clinic_id, parse_day(date), service_id, practitioner_id)
