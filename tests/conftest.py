"""
Pytest configuration for all tests.

Database tests run against a throwaway file-backed SQLite database so the
partial unique index on bookings is enforced exactly as in production.
"""

import os

# Settings are read at import time; point them at SQLite before anything loads.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./.pytest-clinicslots.db")
os.environ["ENV"] = "local"
os.environ["OUTBOX_RELAY_ENABLED"] = "false"

import uuid
from dataclasses import dataclass, field
from datetime import datetime, date, timezone

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

from clinicslots.core.base import Base
from clinicslots.core.config import settings
import clinicslots.models  # noqa: F401
from clinicslots.modules.clinics.models import Clinic
from clinicslots.modules.catalogs.models import Service
from clinicslots.modules.directory.models import Practitioner
from clinicslots.modules.availability.models import PractitionerSchedule
from clinicslots.modules.bookings.models import Booking
from clinicslots.modules.patients.models import Patient
from clinicslots.platform.adapters.clock_system import FixedClock
from clinicslots.platform.provider_registry import registry


# A Monday (day_of_week == 1).
MONDAY = date(2025, 3, 10)
# Sunday noon: MONDAY is "tomorrow", so no lead-time filtering by default.
SUNDAY_NOON = datetime(2025, 3, 9, 12, 0, tzinfo=timezone.utc)

# Fixed ids so "lowest practitioner id" is predictable.
DR_ANA = uuid.UUID(int=1)
DR_BRUNO = uuid.UUID(int=2)


@pytest_asyncio.fixture
async def engine(tmp_path):
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'clinicslots.db'}")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s


@pytest.fixture
def clock():
    """Fixed clock installed in the provider registry for the test's duration."""
    c = FixedClock(SUNDAY_NOON)
    registry.override(clock=c)
    yield c
    registry.reset()


@dataclass
class Seeded:
    clinic: Clinic
    consult: Service
    cleaning: Service
    ana: Practitioner
    bruno: Practitioner
    extra: dict = field(default_factory=dict)


async def add_schedule(session, clinic_id, practitioner_id, **overrides) -> PractitionerSchedule:
    data = dict(
        clinic_id=clinic_id,
        practitioner_id=practitioner_id,
        day_of_week=1,
        start_time="09:00",
        end_time="12:00",
        slot_duration=30,
        is_active=True,
    )
    data.update(overrides)
    obj = PractitionerSchedule(**data)
    session.add(obj)
    await session.flush()
    return obj


async def add_booking(session, seeded: Seeded, practitioner_id, time: str, *, duration: int = 30, status: str = "scheduled", day: date = MONDAY, clinic_id=None, **extra) -> Booking:
    clinic_id = clinic_id or seeded.clinic.id
    patient = Patient(clinic_id=clinic_id, legal_name="Existing Patient", primary_phone="11999990000")
    session.add(patient)
    await session.flush()
    obj = Booking(
        clinic_id=clinic_id,
        practitioner_id=practitioner_id,
        service_id=seeded.consult.id,
        patient_id=patient.id,
        date=day,
        time=time,
        duration=duration,
        status=status,
        **extra,
    )
    session.add(obj)
    await session.flush()
    return obj


async def seed_clinic(session, *, clinic_id: uuid.UUID | None = None, slug: str = "smile", timezone_name: str = "UTC", schedules: bool = True) -> Seeded:
    clinic = Clinic(
        id=clinic_id or uuid.uuid4(),
        name="Smile Clinic",
        slug=slug,
        phone="1133334444",
        timezone=timezone_name,
        address="Rua das Flores, 100",
        city="Sao Paulo",
        state="SP",
        business_hours={"mon": "09:00-12:00"},
        public_booking_enabled=True,
    )
    session.add(clinic)
    await session.flush()

    consult = Service(clinic_id=clinic.id, name="Consultation", duration=30)
    cleaning = Service(clinic_id=clinic.id, name="Cleaning", duration=45)
    # ids are fixed, so only the default clinic gets them
    ana = Practitioner(id=DR_ANA if slug == "smile" else uuid.uuid4(), clinic_id=clinic.id, name="Dr. Ana")
    bruno = Practitioner(id=DR_BRUNO if slug == "smile" else uuid.uuid4(), clinic_id=clinic.id, name="Dr. Bruno")
    session.add_all([consult, cleaning, ana, bruno])
    await session.flush()

    if schedules:
        await add_schedule(session, clinic.id, ana.id)
        await add_schedule(session, clinic.id, bruno.id)
    await session.commit()
    return Seeded(clinic=clinic, consult=consult, cleaning=cleaning, ana=ana, bruno=bruno)


@pytest_asyncio.fixture
async def seeded(session, clock):
    return await seed_clinic(session)


@pytest_asyncio.fixture
async def staff_seeded(session, clock):
    """Clinic whose id matches the tokenless local-dev principal."""
    return await seed_clinic(session, clinic_id=uuid.UUID(settings.DEFAULT_CLINIC_ID))
