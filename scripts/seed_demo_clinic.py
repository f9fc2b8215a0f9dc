import asyncio
import json
import os
import sys
import uuid
from decimal import Decimal

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from clinicslots.core.config import settings
from clinicslots.core.db import SessionLocal, init_models
from clinicslots.modules.availability.repository import AvailabilityRepository
from clinicslots.modules.catalogs.repository import CatalogRepository
from clinicslots.modules.clinics.repository import ClinicRepository
from clinicslots.modules.directory.repository import PractitionerRepository

DEFAULT_DATA = {
    "clinic": {"name": "Demo Dental", "slug": "demo-dental", "phone": "1133334444", "timezone": "America/Sao_Paulo",
               "address": "Av. Paulista, 1000", "city": "Sao Paulo", "state": "SP",
               "business_hours": {"mon-fri": "08:00-18:00", "sat": "08:00-12:00"}},
    "services": [
        {"name": "Consultation", "duration": 30, "price": "150.00"},
        {"name": "Cleaning", "duration": 45, "price": "220.00"},
        {"name": "Root canal", "duration": 90, "price": "900.00"},
    ],
    "practitioners": [
        {"name": "Dr. Ana Souza", "specialty": "General dentistry"},
        {"name": "Dr. Bruno Lima", "specialty": "Endodontics"},
    ],
}

async def create_schedule_for_practitioner(repo: AvailabilityRepository, clinic_id, practitioner_id):
    """
    Creates the default weekly schedule for a given practitioner.
    """
    print(f"    - Creating default schedule for practitioner {practitioner_id}...")
    for day in range(1, 6):  # Monday to Friday (0 = Sunday)
        await repo.create_schedule(
            clinic_id,
            practitioner_id=practitioner_id,
            day_of_week=day,
            start_time="08:00",
            end_time="18:00",
            break_start="12:00",
            break_end="13:00",
            slot_duration=30,
        )
    # Saturday morning shift
    await repo.create_schedule(
        clinic_id,
        practitioner_id=practitioner_id,
        day_of_week=6,
        start_time="08:00",
        end_time="12:00",
        slot_duration=30,
    )
    print("      ...schedule created.")

async def main():
    """
    Seed one clinic with services, practitioners and weekly schedules.
    Pass a JSON file path to override the built-in demo data.
    """
    data = DEFAULT_DATA
    if len(sys.argv) > 1:
        with open(sys.argv[1], 'r', encoding='utf-8') as f:
            data = json.load(f)

    await init_models()
    async with SessionLocal() as db:
        clinics = ClinicRepository(db)
        c = dict(data["clinic"])
        existing = await clinics.get_by_slug(c["slug"])
        if existing:
            print(f"Clinic '{c['slug']}' already exists ({existing.id}). Nothing to do.")
            return

        use_default_id = c.pop("use_default_id", False)
        clinic = await clinics.create(
            id=uuid.UUID(settings.DEFAULT_CLINIC_ID) if use_default_id else uuid.uuid4(),
            public_booking_enabled=True,
            **c,
        )
        print(f"Created clinic {clinic.name} with ID: {clinic.id}")

        catalog = CatalogRepository(db)
        for s in data["services"]:
            price = Decimal(s["price"]) if s.get("price") else None
            await catalog.create_service(clinic.id, **{**s, "price": price})
            print(f"  - Service: {s['name']} ({s['duration']} min)")

        practitioners = PractitionerRepository(db)
        schedules = AvailabilityRepository(db)
        for p in data["practitioners"]:
            practitioner = await practitioners.create(clinic.id, name=p["name"], specialty=p.get("specialty"))
            print(f"  - Practitioner: {practitioner.name} ({practitioner.id})")
            await create_schedule_for_practitioner(schedules, clinic.id, practitioner.id)

        print("\nCommitting all changes to the database...")
        await db.commit()
        print("Seeding complete!")

if __name__ == "__main__":
    asyncio.run(main())
