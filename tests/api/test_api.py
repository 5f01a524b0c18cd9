"""HTTP tests against the FastAPI app with a per-test SQLite database."""
from datetime import date, time, timedelta
from unittest.mock import patch
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from barberbook.config.database import get_db
from barberbook.config.settings import get_settings
from barberbook.main import create_app
from barberbook.models import Service, Staff, WorkHourRule


def upcoming(weekday: int, min_days_ahead: int = 3) -> date:
    """Next date with the given weekday, far enough ahead of the real clock."""
    day = date.today() + timedelta(days=min_days_ahead)
    while day.weekday() != weekday:
        day += timedelta(days=1)
    return day


@pytest.fixture
def api_staff(db):
    """Works every weekday 09:00-12:00 so real-clock dates always have slots."""
    member = Staff(name="Pedro", slug="pedro", is_active=True)
    db.add(member)
    db.flush()
    db.add_all([
        WorkHourRule(staff_id=member.id, weekday=weekday, start_time=time(9, 0), end_time=time(12, 0))
        for weekday in range(5)
    ])
    service = Service(name="Corte", price=45, duration_minutes=30, is_active=True)
    db.add(service)
    db.commit()
    return {"staff_id": str(member.id), "service_id": str(service.id)}


@pytest.fixture
def client(session_factory):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with patch("barberbook.services.booking.channels.NotificationService.dispatch_booking_confirmation"):
        yield TestClient(app)


def booking_body(ids, day, start="10:00", **customer):
    return {
        "staff_id": ids["staff_id"],
        "service_id": ids["service_id"],
        "date": day.isoformat(),
        "start_time": start,
        "customer": {"name": "Ana", "phone": "+55 11 91234-5678", **customer},
    }


class TestPublicApi:

    def test_staff_profile_by_slug(self, client, api_staff):
        response = client.get("/api/v1/public/staff/pedro")

        assert response.status_code == 200
        assert response.json()["staff"]["id"] == api_staff["staff_id"]
        assert [s["name"] for s in response.json()["services"]] == ["Corte"]

    def test_unknown_staff_profile(self, client, api_staff):
        assert client.get("/api/v1/public/staff/nobody").status_code == 404

    def test_slots(self, client, api_staff):
        day = upcoming(0)
        response = client.get(
            f"/api/v1/public/staff/{api_staff['staff_id']}/slots",
            params={"date": day.isoformat(), "service_id": api_staff["service_id"]},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["slots"][0]["start_time"] == "09:00:00"
        assert body["slots"][-1]["start_time"] == "11:30:00"

    def test_slots_need_duration(self, client, api_staff):
        response = client.get(
            f"/api/v1/public/staff/{api_staff['staff_id']}/slots",
            params={"date": upcoming(0).isoformat()},
        )
        assert response.status_code == 400

    def test_available_dates(self, client, api_staff):
        response = client.get(f"/api/v1/public/staff/{api_staff['staff_id']}/dates", params={"days": 7})

        assert response.status_code == 200
        weekdays = {date.fromisoformat(d).weekday() for d in response.json()["dates"]}
        assert weekdays <= {0, 1, 2, 3, 4}

    def test_book_then_conflict(self, client, api_staff):
        day = upcoming(1)

        first = client.post("/api/v1/public/appointments", json=booking_body(api_staff, day))
        assert first.status_code == 201
        assert first.json()["success"] is True

        second = client.post("/api/v1/public/appointments", json=booking_body(api_staff, day, start="10:15"))
        assert second.status_code == 409
        assert second.json()["error"] == "slot_unavailable"

    def test_outside_hours_is_conflict(self, client, api_staff):
        response = client.post("/api/v1/public/appointments", json=booking_body(api_staff, upcoming(2), start="11:45"))
        assert response.status_code == 409

    def test_weekend_is_not_bookable(self, client, api_staff):
        response = client.post("/api/v1/public/appointments", json=booking_body(api_staff, upcoming(5)))
        assert response.status_code == 422
        assert response.json()["error"] == "staff_not_bookable"

    def test_unknown_service(self, client, api_staff):
        body = booking_body(api_staff, upcoming(0))
        body["service_id"] = str(uuid4())
        assert client.post("/api/v1/public/appointments", json=body).status_code == 404

    def test_past_date(self, client, api_staff):
        response = client.post("/api/v1/public/appointments", json=booking_body(api_staff, date.today() - timedelta(days=7)))
        assert response.status_code == 400
        assert response.json()["error"] == "past_or_out_of_range_date"

    def test_invalid_phone(self, client, api_staff):
        body = booking_body(api_staff, upcoming(0), phone="123")
        assert client.post("/api/v1/public/appointments", json=body).status_code == 422

    def test_start_time_with_utc_offset_is_rejected(self, client, api_staff):
        response = client.post("/api/v1/public/appointments", json=booking_body(api_staff, upcoming(0), start="10:00:00-03:00"))
        assert response.status_code == 422

    def test_start_time_with_seconds_is_rejected(self, client, api_staff):
        response = client.post("/api/v1/public/appointments", json=booking_body(api_staff, upcoming(0), start="10:00:45"))
        assert response.status_code == 422


class TestDashboardApi:

    def test_schedule_crud(self, client, api_staff):
        base = f"/api/v1/dashboard/staff/{api_staff['staff_id']}"

        created = client.post(f"{base}/breaks", json={"weekday": 0, "start_time": "10:00", "end_time": "10:30"})
        assert created.status_code == 201

        overlap = client.post(f"{base}/work-hours", json={"weekday": 0, "start_time": "11:00", "end_time": "13:00"})
        assert overlap.status_code == 409

        windows = client.get(f"{base}/day-windows", params={"date": upcoming(0).isoformat()})
        assert windows.json()["windows"] == [{"start": "09:00", "end": "10:00"}, {"start": "10:30", "end": "12:00"}]

        assert client.delete(f"{base}/breaks/{created.json()['id']}").status_code == 204
        assert client.delete(f"{base}/breaks/{created.json()['id']}").status_code == 404

    def test_exception_for_unknown_staff(self, client, api_staff):
        response = client.post(
            f"/api/v1/dashboard/staff/{uuid4()}/exceptions",
            json={"date": upcoming(0).isoformat(), "is_closed": True},
        )
        assert response.status_code == 404

    def test_staff_booking_and_lifecycle(self, client, api_staff):
        day = upcoming(3)
        booked = client.post("/api/v1/dashboard/appointments", json=booking_body(api_staff, day))
        assert booked.status_code == 201
        appointment_id = booked.json()["appointment_id"]

        agenda = client.get(
            f"/api/v1/dashboard/staff/{api_staff['staff_id']}/appointments",
            params={"date": day.isoformat()},
        ).json()
        assert agenda["appointments"][0]["status"] == "confirmed"

        assert client.patch(f"/api/v1/dashboard/appointments/{appointment_id}/confirm").status_code == 400

        cancelled = client.patch(f"/api/v1/dashboard/appointments/{appointment_id}/cancel", json={"reason": "Doente"})
        assert cancelled.status_code == 200
        assert cancelled.json()["status"] == "cancelled"

        assert client.patch(f"/api/v1/dashboard/appointments/{uuid4()}/complete").status_code == 404

    def test_attendance_actions(self, client, api_staff):
        day = upcoming(3)
        arrived = client.post("/api/v1/public/appointments", json=booking_body(api_staff, day, start="09:00")).json()
        missed = client.post("/api/v1/public/appointments", json=booking_body(api_staff, day, start="11:00")).json()
        base = "/api/v1/dashboard/appointments"

        assert client.patch(f"{base}/{arrived['appointment_id']}/complete").status_code == 400

        checked_in = client.patch(f"{base}/{arrived['appointment_id']}/check-in")
        assert checked_in.status_code == 200
        assert checked_in.json()["status"] == "confirmed"
        assert checked_in.json()["checked_in_at"] is not None
        assert client.patch(f"{base}/{arrived['appointment_id']}/no-show").status_code == 400
        assert client.patch(f"{base}/{arrived['appointment_id']}/complete").json()["status"] == "completed"

        no_show = client.patch(f"{base}/{missed['appointment_id']}/no-show")
        assert no_show.status_code == 200
        assert no_show.json()["status"] == "no_show"
        assert client.patch(f"{base}/{missed['appointment_id']}/check-in").status_code == 400
        assert client.patch(f"{base}/{uuid4()}/no-show").status_code == 404

        retry = client.post("/api/v1/public/appointments", json=booking_body(api_staff, day, start="11:00"))
        assert retry.status_code == 409

    def test_dashboard_key_is_enforced(self, client, api_staff, monkeypatch):
        monkeypatch.setattr(get_settings(), "DASHBOARD_API_KEY", "s3cret")
        url = f"/api/v1/dashboard/staff/{api_staff['staff_id']}/work-hours"

        assert client.get(url).status_code == 401
        assert client.get(url, headers={"X-API-Key": "wrong"}).status_code == 401
        assert client.get(url, headers={"X-API-Key": "s3cret"}).status_code == 200

        # Public routes stay open
        assert client.get("/api/v1/public/staff/pedro").status_code == 200


class TestBotApi:

    def test_start_time_with_offset_is_rejected(self, client, api_staff):
        body = booking_body(api_staff, upcoming(0), start="10:00:00+00:00")
        assert client.post("/api/v1/bot/appointments", json=body).status_code == 422

    def test_taken_slot_returns_alternatives(self, client, api_staff):
        day = upcoming(4)
        body = booking_body(api_staff, day, start="09:00")
        body["conversation_id"] = "wa-123"

        assert client.post("/api/v1/bot/appointments", json=body).status_code == 201

        retry = client.post("/api/v1/bot/appointments", json=body)
        assert retry.status_code == 409
        alternatives = retry.json()["alternatives"]
        assert [a["start_time"] for a in alternatives] == ["09:30:00", "09:45:00", "10:00:00"]

    def test_next_slots(self, client, api_staff):
        day = upcoming(0)
        response = client.get(
            f"/api/v1/bot/staff/{api_staff['staff_id']}/next-slots",
            params={"service_id": api_staff["service_id"], "from_date": day.isoformat(), "limit": 2},
        )

        assert response.status_code == 200
        assert [s["start_time"] for s in response.json()["slots"]] == ["09:00:00", "09:15:00"]


class TestHealth:

    def test_health(self, client):
        assert client.get("/health/").json()["status"] == "healthy"

    def test_correlation_id_is_echoed(self, client):
        response = client.get("/api/v1/", headers={"X-Correlation-ID": "req-42"})
        assert response.headers["X-Correlation-ID"] == "req-42"
