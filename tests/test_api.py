"""
HTTP surface: public booking by clinic slug and the staff endpoints.

Runs the FastAPI app in-process over httpx's ASGI transport with the
session dependency pointed at the per-test database.
"""

import uuid

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from clinicslots.core.db import get_session
from clinicslots.main import app

from conftest import DR_ANA, DR_BRUNO, seed_clinic

PREFIX = "/api/v1"


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_session():
        async with session_factory() as s:
            yield s

    app.dependency_overrides[get_session] = override_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


def booking_body(seeded, **overrides):
    body = {
        "service_id": str(seeded.consult.id),
        "date": "2025-03-10",
        "time": "10:00",
        "patient": {"name": "Maria Silva", "phone": "11987654321"},
    }
    body.update(overrides)
    return body


class TestHealth:

    async def test_health(self, client):
        res = await client.get(f"{PREFIX}/health")
        assert res.status_code == 200
        assert res.json() == {"status": "ok"}

    async def test_request_id_is_echoed(self, client):
        res = await client.get(f"{PREFIX}/health", headers={"x-request-id": "abc-123"})
        assert res.headers["x-request-id"] == "abc-123"


# =============================================================================
# Public booking
# =============================================================================

class TestPublicClinic:

    async def test_clinic_by_slug(self, client, seeded):
        res = await client.get(f"{PREFIX}/booking/smile")
        assert res.status_code == 200
        data = res.json()
        assert data["name"] == "Smile Clinic"
        assert data["public_booking_enabled"] is True
        assert data["address"] == "Rua das Flores, 100"
        assert (data["city"], data["state"]) == ("Sao Paulo", "SP")
        assert data["business_hours"] == {"mon": "09:00-12:00"}
        assert data["logo_url"] is None

    async def test_unknown_slug_is_404(self, client, seeded):
        res = await client.get(f"{PREFIX}/booking/nope")
        assert res.status_code == 404
        assert res.json()["detail"] == "Clinic not found"

    async def test_disabled_public_booking_is_403(self, client, session, seeded):
        seeded.clinic.public_booking_enabled = False
        await session.commit()

        res = await client.get(f"{PREFIX}/booking/smile/services")
        assert res.status_code == 403

    async def test_services_and_practitioners(self, client, seeded):
        services = (await client.get(f"{PREFIX}/booking/smile/services")).json()
        assert {s["name"] for s in services} == {"Consultation", "Cleaning"}

        practitioners = (await client.get(f"{PREFIX}/booking/smile/practitioners")).json()
        assert [p["name"] for p in practitioners] == ["Dr. Ana", "Dr. Bruno"]


class TestPublicAvailability:

    async def test_available_slots_shape(self, client, seeded):
        res = await client.get(
            f"{PREFIX}/booking/smile/available-slots",
            params={"date": "2025-03-10", "serviceId": str(seeded.consult.id)},
        )
        assert res.status_code == 200
        data = res.json()
        assert data["date"] == "2025-03-10"
        assert data["service_duration_minutes"] == 30
        assert [s["time"] for s in data["slots"]] == ["09:00", "09:30", "10:00", "10:30", "11:00", "11:30"]
        assert data["slots"][0] == {"time": "09:00", "practitioner_id": str(DR_ANA), "practitioner_name": "Dr. Ana"}

    async def test_practitioner_filter(self, client, seeded):
        res = await client.get(
            f"{PREFIX}/booking/smile/available-slots",
            params={"date": "2025-03-10", "serviceId": str(seeded.consult.id), "practitionerId": str(DR_BRUNO)},
        )
        assert {s["practitioner_id"] for s in res.json()["slots"]} == {str(DR_BRUNO)}

    @pytest.mark.parametrize("bad", ["2025-3-10", "10/03/2025", "2025-02-30", "tomorrow"])
    async def test_bad_date_is_422(self, client, seeded, bad):
        res = await client.get(
            f"{PREFIX}/booking/smile/available-slots",
            params={"date": bad, "serviceId": str(seeded.consult.id)},
        )
        assert res.status_code == 422

    async def test_unknown_service_is_404(self, client, seeded):
        res = await client.get(
            f"{PREFIX}/booking/smile/available-slots",
            params={"date": "2025-03-10", "serviceId": str(uuid.uuid4())},
        )
        assert res.status_code == 404
        assert res.json()["detail"] == "Service not found"


class TestPublicBook:

    async def test_book_then_same_slot_is_409(self, client, seeded):
        res = await client.post(f"{PREFIX}/booking/smile/book", json=booking_body(seeded, practitioner_id=str(DR_ANA)))
        assert res.status_code == 201
        data = res.json()
        assert data["time"] == "10:00"
        assert data["practitioner_name"] == "Dr. Ana"
        assert data["clinic_name"] == "Smile Clinic"
        assert data["confirmed"] is True

        again = await client.post(
            f"{PREFIX}/booking/smile/book",
            json=booking_body(seeded, practitioner_id=str(DR_ANA), patient={"name": "Joao", "phone": "11911112222"}),
        )
        assert again.status_code == 409
        assert again.json()["detail"] == "This time slot has already been booked. Please choose another time."

    async def test_booked_time_leaves_availability(self, client, seeded):
        await client.post(f"{PREFIX}/booking/smile/book", json=booking_body(seeded, practitioner_id=str(DR_ANA)))
        res = await client.get(
            f"{PREFIX}/booking/smile/available-slots",
            params={"date": "2025-03-10", "serviceId": str(seeded.consult.id), "practitionerId": str(DR_ANA)},
        )
        assert "10:00" not in [s["time"] for s in res.json()["slots"]]

    @pytest.mark.parametrize("time", ["25:00", "10h00", "10:0"])
    async def test_bad_time_is_422(self, client, seeded, time):
        res = await client.post(f"{PREFIX}/booking/smile/book", json=booking_body(seeded, time=time))
        assert res.status_code == 422

    async def test_bad_phone_is_422(self, client, seeded):
        res = await client.post(
            f"{PREFIX}/booking/smile/book",
            json=booking_body(seeded, patient={"name": "Maria", "phone": "(11) 98765-4321"}),
        )
        assert res.status_code == 422

    async def test_unknown_service_is_404(self, client, seeded):
        res = await client.post(f"{PREFIX}/booking/smile/book", json=booking_body(seeded, service_id=str(uuid.uuid4())))
        assert res.status_code == 404


# =============================================================================
# Staff endpoints (tokenless in local mode)
# =============================================================================

class TestStaffEndpoints:

    async def test_create_and_list_schedule(self, client, staff_seeded):
        body = {
            "practitioner_id": str(DR_ANA),
            "day_of_week": 2,
            "start_time": "8:00",
            "end_time": "17:00",
            "break_start": "12:00",
            "break_end": "13:00",
            "slot_duration": 20,
        }
        res = await client.post(f"{PREFIX}/availability/schedules", json=body)
        assert res.status_code == 201
        assert res.json()["start_time"] == "08:00"

        listed = await client.get(f"{PREFIX}/availability/schedules", params={"practitioner_id": str(DR_ANA)})
        assert [s["day_of_week"] for s in listed.json()] == [1, 2]

    @pytest.mark.parametrize("override", [
        {"break_start": "07:00", "break_end": "08:30"},
        {"break_start": "12:00"},
        {"start_time": "17:00", "end_time": "08:00"},
        {"day_of_week": 7},
    ])
    async def test_invalid_schedule_is_422(self, client, staff_seeded, override):
        body = {"practitioner_id": str(DR_ANA), "day_of_week": 2, "start_time": "08:00", "end_time": "17:00"}
        body.update(override)
        res = await client.post(f"{PREFIX}/availability/schedules", json=body)
        assert res.status_code == 422

    async def test_schedule_for_unknown_practitioner_is_404(self, client, staff_seeded):
        body = {"practitioner_id": str(uuid.uuid4()), "day_of_week": 2, "start_time": "08:00", "end_time": "17:00"}
        res = await client.post(f"{PREFIX}/availability/schedules", json=body)
        assert res.status_code == 404

    async def test_staff_slot_search_and_booking(self, client, staff_seeded):
        params = {"date": "2025-03-10", "service_id": str(staff_seeded.consult.id)}
        slots = (await client.get(f"{PREFIX}/availability/slots", params=params)).json()["slots"]
        assert slots[0]["time"] == "09:00"

        res = await client.post(f"{PREFIX}/bookings", json=booking_body(staff_seeded, time="09:00"))
        assert res.status_code == 201
        assert res.json()["practitioner_name"] == "Dr. Ana"

        listed = await client.get(f"{PREFIX}/bookings", params={"date": "2025-03-10"})
        rows = listed.json()
        assert len(rows) == 1
        assert rows[0]["practitioner_id"] == str(DR_ANA)
        assert rows[0]["status"] == "scheduled"

    async def test_staff_cannot_see_other_clinic(self, client, session, staff_seeded):
        other = await seed_clinic(session, slug="other")
        res = await client.get(
            f"{PREFIX}/availability/slots",
            params={"date": "2025-03-10", "service_id": str(other.consult.id)},
        )
        assert res.status_code == 404


class TestStaffTokens:
    """Bearer tokens are honoured even in local mode when one is sent."""

    def token(self, **claims):
        from jose import jwt
        from clinicslots.core.config import settings
        return {"Authorization": "Bearer " + jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALG)}

    async def test_token_clinic_scopes_the_request(self, client, session, staff_seeded):
        other = await seed_clinic(session, slug="other")
        headers = self.token(sub=str(uuid.uuid4()), clinic_id=str(other.clinic.id), scope="availability:read")
        res = await client.get(
            f"{PREFIX}/availability/slots",
            params={"date": "2025-03-10", "service_id": str(other.consult.id)},
            headers=headers,
        )
        assert res.status_code == 200
        assert res.json()["slots"]
        assert {s["practitioner_id"] for s in res.json()["slots"]} <= {str(other.ana.id), str(other.bruno.id)}

    async def test_missing_scope_is_403(self, client, staff_seeded):
        headers = self.token(sub=str(uuid.uuid4()), clinic_id=str(staff_seeded.clinic.id), scopes=["availability:read"])
        res = await client.post(f"{PREFIX}/bookings", json=booking_body(staff_seeded), headers=headers)
        assert res.status_code == 403

    async def test_area_wildcard_scope(self, client, staff_seeded):
        headers = self.token(sub=str(uuid.uuid4()), clinic_id=str(staff_seeded.clinic.id), scopes=["bookings:*"])
        res = await client.post(f"{PREFIX}/bookings", json=booking_body(staff_seeded), headers=headers)
        assert res.status_code == 201

    async def test_token_without_clinic_is_401(self, client, staff_seeded):
        headers = self.token(sub=str(uuid.uuid4()), scopes=["*"])
        res = await client.get(f"{PREFIX}/bookings", params={"date": "2025-03-10"}, headers=headers)
        assert res.status_code == 401

    async def test_bad_signature_is_401(self, client, staff_seeded):
        res = await client.get(
            f"{PREFIX}/bookings", params={"date": "2025-03-10"}, headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert res.status_code == 401


class TestSplitShifts:
    """A practitioner may have several shifts on one day with the same validity."""

    async def test_second_shift_with_shared_valid_from(self, client, staff_seeded):
        base = {"practitioner_id": str(DR_ANA), "day_of_week": 2, "valid_from": "2025-01-01"}
        morning = await client.post(f"{PREFIX}/availability/schedules", json={**base, "start_time": "08:00", "end_time": "12:00"})
        afternoon = await client.post(f"{PREFIX}/availability/schedules", json={**base, "start_time": "14:00", "end_time": "18:00"})
        assert morning.status_code == 201
        assert afternoon.status_code == 201

        res = await client.get(
            f"{PREFIX}/availability/slots",
            params={"date": "2025-03-11", "service_id": str(staff_seeded.consult.id), "practitioner_id": str(DR_ANA)},
        )
        slots = [s["time"] for s in res.json()["slots"]]
        assert slots[0] == "08:00"
        assert "11:30" in slots
        assert "12:00" not in slots
        assert "14:00" in slots
        assert slots[-1] == "17:30"


class TestShutdown:
    """The event bus is closed on shutdown even when the relay never started."""

    async def test_bus_closed_without_relay(self, monkeypatch):
        from clinicslots import main
        from clinicslots.platform.provider_registry import registry

        class TrackingBus:
            closed = False

            async def publish(self, topic, key, value, headers=None):
                pass

            async def close(self):
                self.closed = True

        async def no_schema():
            pass

        monkeypatch.setattr(main, "init_models", no_schema)
        monkeypatch.setattr(main.settings, "OUTBOX_RELAY_ENABLED", False)
        bus = TrackingBus()
        registry.override(event_bus=bus)
        try:
            async with main.lifespan(main.app):
                pass
        finally:
            registry.reset()
        assert bus.closed
