import re
import uuid
import datetime as dt
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from clinicslots.modules.availability.slots import normalize_hhmm, to_minutes

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

def strict_iso_date(v):
    # only YYYY-MM-DD on the wire; pydantic alone would also take timestamps
    if isinstance(v, str) and not _ISO_DATE.match(v):
        raise ValueError("date must be in YYYY-MM-DD format")
    return v

def hhmm(v):
    if v is None:
        return v
    if not isinstance(v, str):
        raise ValueError("time must be a string in HH:MM format")
    try:
        return normalize_hhmm(v)
    except ValueError:
        raise ValueError("time must be in HH:MM format")

class ScheduleCreate(BaseModel):
    practitioner_id: uuid.UUID
    day_of_week: int = Field(ge=0, le=6)  # 0 = Sunday
    start_time: str
    end_time: str
    break_start: str | None = None
    break_end: str | None = None
    slot_duration: int = Field(default=30, gt=0, le=240)
    valid_from: dt.date | None = None
    valid_until: dt.date | None = None
    is_active: bool = True

    @field_validator("start_time", "end_time", "break_start", "break_end", mode="before")
    @classmethod
    def _times(cls, v):
        return hhmm(v)

    @field_validator("valid_from", "valid_until", mode="before")
    @classmethod
    def _dates(cls, v):
        return strict_iso_date(v)

    @model_validator(mode="after")
    def _shape(self):
        start, end = to_minutes(self.start_time), to_minutes(self.end_time)
        if start >= end:
            raise ValueError("start_time must be before end_time")
        if (self.break_start is None) != (self.break_end is None):
            raise ValueError("break_start and break_end must be given together")
        if self.break_start is not None:
            bs, be = to_minutes(self.break_start), to_minutes(self.break_end)
            if bs >= be:
                raise ValueError("break_start must be before break_end")
            if bs < start or be > end:
                raise ValueError("break must lie within the working hours")
        if self.valid_from and self.valid_until and self.valid_from > self.valid_until:
            raise ValueError("valid_from must not be after valid_until")
        return self

class ScheduleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: uuid.UUID
    clinic_id: uuid.UUID
    practitioner_id: uuid.UUID
    day_of_week: int
    start_time: str
    end_time: str
    break_start: str | None = None
    break_end: str | None = None
    slot_duration: int
    valid_from: dt.date | None = None
    valid_until: dt.date | None = None
    is_active: bool

class SlotOut(BaseModel):
    time: str
    practitioner_id: uuid.UUID
    practitioner_name: str

class AvailabilityOut(BaseModel):
    date: dt.date
    service_duration_minutes: int
    slots: list[SlotOut]
