import uuid
import datetime as dt
from pydantic import BaseModel, ConfigDict, Field, field_validator
from clinicslots.modules.availability.schemas import hhmm, strict_iso_date
from clinicslots.modules.patients.schemas import PatientInput

class BookingCreate(BaseModel):
    service_id: uuid.UUID
    practitioner_id: uuid.UUID | None = None
    date: dt.date
    time: str
    patient: PatientInput
    notes: str | None = Field(default=None, max_length=1000)

    @field_validator("date", mode="before")
    @classmethod
    def _date(cls, v):
        return strict_iso_date(v)

    @field_validator("time", mode="before")
    @classmethod
    def _time(cls, v):
        if v is None:
            raise ValueError("time is required")
        return hhmm(v)

class BookingConfirmation(BaseModel):
    booking_id: uuid.UUID
    date: dt.date
    time: str
    service_name: str
    practitioner_name: str
    confirmed: bool
    clinic_name: str | None = None
    clinic_phone: str | None = None

class BookingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: uuid.UUID
    clinic_id: uuid.UUID
    practitioner_id: uuid.UUID | None = None
    service_id: uuid.UUID
    patient_id: uuid.UUID
    date: dt.date
    time: str
    duration: int
    status: str
    notes: str | None = None
