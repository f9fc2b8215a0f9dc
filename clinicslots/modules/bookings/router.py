import uuid
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from clinicslots.api.params import parse_day
from clinicslots.core.db import get_session
from clinicslots.core.security import get_principal, require_scopes, Principal
from clinicslots.modules.bookings.schemas import BookingCreate, BookingConfirmation, BookingOut
from clinicslots.modules.bookings.service import BookingService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> BookingService:
    return BookingService(session)

@router.post("/bookings", response_model=BookingConfirmation, status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_scopes("bookings:write"))])
async def create_booking(payload: BookingCreate, principal: Principal = Depends(get_principal), service: BookingService = Depends(svc)):
    return await service.book(principal.clinic_id, payload, source="staff")

@router.get("/bookings", response_model=list[BookingOut], dependencies=[Depends(require_scopes("bookings:read"))])
async def list_bookings(
    date: str = Query(..., description="YYYY-MM-DD"),
    practitioner_id: uuid.UUID | None = None,
    principal: Principal = Depends(get_principal),
    service: BookingService = Depends(svc),
):
    return await service.list_for_date(principal.clinic_id, parse_day(date), practitioner_id)
