import uuid
from pydantic import BaseModel, ConfigDict

class PublicClinicOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: uuid.UUID
    name: str
    slug: str
    phone: str | None = None
    timezone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    business_hours: dict | None = None
    logo_url: str | None = None
    primary_color: str | None = None
    slogan: str | None = None
    public_booking_enabled: bool
