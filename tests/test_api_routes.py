from __future__ import annotations

from datetime import date

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from shared.core import auth
from shared.core.auth import validate_current_token, verify_token
from shared.core.database import get_rental_db
from shared.core.schemas import UserToken
from rental_service.app.crud import properties_crud
from rental_service.app.enum.rental_enum import PlatformRole
from rental_service.app.main import app

FAR_FUTURE = date(2099, 7, 1)


@pytest.fixture()
def client(rental_engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=rental_engine)

    def override_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_rental_db] = override_db
    app.dependency_overrides[validate_current_token] = lambda: UserToken(user_id="u-1", session_id="s-1", name="Owner")
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/api/health").json() == {"status": "healthy"}


def test_calendar_requires_a_bearer_token(rental_engine):
    app.dependency_overrides.clear()

    response = TestClient(app).get("/api/calendar/")

    assert response.status_code in (401, 403)


def test_calendar_returns_manual_bookings(client, db, platforms, add_property, add_booking):
    prop = add_property("Casa Sol")
    add_booking(prop, platforms[PlatformRole.manual], FAR_FUTURE, date(2099, 7, 4))

    body = client.get("/api/calendar/").json()

    assert [o["source"] for o in body["occupancies"]] == ["manual"]
    assert [p["name"] for p in body["properties"]] == ["Casa Sol"]
    assert body["persist_failed"] is False


def test_occupied_and_availability(client, db, platforms, add_property, add_booking):
    busy = add_property("Casa Sol")
    free = add_property("Azahar")
    add_booking(busy, platforms[PlatformRole.manual], FAR_FUTURE, date(2099, 7, 4))
    add_booking(free, platforms[PlatformRole.available], FAR_FUTURE, date(2099, 7, 10))

    occupied = client.get("/api/calendar/occupied", params={"property_id": str(busy.id), "day": "2099-07-03"}).json()
    checkout = client.get("/api/calendar/occupied", params={"property_id": str(busy.id), "day": "2099-07-04"}).json()
    available = client.get("/api/calendar/availability", params={"day": "2099-07-02"}).json()

    assert occupied["occupied"] is True
    assert checkout["occupied"] is False
    assert [p["name"] for p in available["properties"]] == ["Azahar"]


def test_unreadable_properties_answer_503(client, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection refused"))

    monkeypatch.setattr(properties_crud, "get_properties", broken)

    response = client.get("/api/calendar/")

    assert response.status_code == 503
    assert response.json()["status"] == "Failure"


def test_booking_lifecycle(client, db, platforms, add_property):
    prop = add_property("Casa Sol")

    created = client.post("/api/bookings/", json={
        "property_id": str(prop.id),
        "platform_id": str(platforms[PlatformRole.airbnb].id),
        "check_in": "2024-06-01",
        "check_out": "2024-06-05",
        "gross_price": "200",
    })
    assert created.status_code == 200
    booking = created.json()
    assert float(booking["commission"]) == 30.0
    assert float(booking["net_price"]) == 170.0

    listed = client.get("/api/bookings/all", params={"property_id": str(prop.id)}).json()
    assert listed["total"] == 1

    deleted = client.delete(f"/api/bookings/{booking['id']}")
    assert deleted.status_code == 200
    missing = client.get(f"/api/bookings/{booking['id']}")
    assert missing.status_code == 404
    assert missing.json()["message"] == "Booking not found"


def test_booking_with_inverted_dates_is_rejected(client, platforms, add_property):
    prop = add_property("Casa Sol")

    response = client.post("/api/bookings/", json={
        "property_id": str(prop.id),
        "platform_id": str(platforms[PlatformRole.manual].id),
        "check_in": "2024-06-05",
        "check_out": "2024-06-01",
    })

    assert response.status_code == 422


def test_configuration_lists(client, platforms, add_property):
    add_property("Casa Sol")

    properties = client.get("/api/properties/").json()
    platform_names = [p["name"] for p in client.get("/api/platforms/").json()]

    assert [p["name"] for p in properties] == ["Casa Sol"]
    assert set(platform_names) == {"Airbnb", "Booking.com", "Direct", "Libre"}


def test_verify_token_round_trip(monkeypatch):
    monkeypatch.setattr(auth.settings, "JWT_SECRET", "test-secret")
    token = jwt.encode({"user_id": "u-1", "session_id": "s-1", "name": "Owner"}, "test-secret", algorithm="HS256")

    user = verify_token(token)

    assert user.user_id == "u-1"
    assert user.account_type == "owner"


def test_verify_token_rejects_bad_signature(monkeypatch):
    from fastapi import HTTPException

    monkeypatch.setattr(auth.settings, "JWT_SECRET", "test-secret")
    token = jwt.encode({"user_id": "u-1", "session_id": "s-1"}, "other-secret", algorithm="HS256")

    with pytest.raises(HTTPException) as exc:
        verify_token(token)

    assert exc.value.status_code == 401


def test_booking_update_with_null_date_is_rejected(client, platforms, add_property):
    prop = add_property("Casa Sol")
    created = client.post("/api/bookings/", json={
        "property_id": str(prop.id),
        "platform_id": str(platforms[PlatformRole.manual].id),
        "check_in": "2024-06-01",
        "check_out": "2024-06-05",
    }).json()

    response = client.put("/api/bookings/", json={"id": created["id"], "check_out": None})

    assert response.status_code == 422


def test_configure_property_and_platform_over_api(client):
    platform = client.post("/api/platforms/", json={
        "name": "Airbnb", "commission_percentage": "15", "role": "airbnb"}).json()
    prop = client.post("/api/properties/", json={
        "name": "Casa Sol", "ical_airbnb_url": "https://feeds.test/a.ics"}).json()

    assert platform["role"] == "airbnb"
    assert prop["ical_airbnb_url"] == "https://feeds.test/a.ics"

    renamed = client.put("/api/properties/", json={"id": prop["id"], "name": "Casa Luna"})
    assert renamed.json()["name"] == "Casa Luna"

    duplicate = client.post("/api/platforms/", json={"name": "Airbnb"})
    assert duplicate.status_code == 400

    assert client.delete(f"/api/properties/{prop['id']}").status_code == 200
    assert client.get("/api/properties/").json() == []
