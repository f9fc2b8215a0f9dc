from fastapi import APIRouter
from clinicslots.modules.availability.router import router as availability_router
from clinicslots.modules.bookings.router import router as bookings_router
from clinicslots.modules.public_booking.router import router as public_booking_router

api_router = APIRouter()
api_router.include_router(public_booking_router, tags=["public-booking"])
api_router.include_router(availability_router, tags=["availability"])
api_router.include_router(bookings_router, tags=["bookings"])

@api_router.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}
