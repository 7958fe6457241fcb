from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from shared.core.database import Base
from rental_service.app.enum.rental_enum import PlatformRole
from rental_service.app.models import Booking, Platform, Property


@pytest.fixture()
def rental_engine():
    """
    Isolated in-memory SQLite engine per test.
    StaticPool keeps one connection so every session sees the same database.
    """
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture()
def db(rental_engine):
    with Session(rental_engine) as s:
        yield s


@pytest.fixture()
def platforms(db):
    rows = {
        PlatformRole.airbnb: Platform(name="Airbnb", commission_percentage=Decimal("15"), role="airbnb"),
        PlatformRole.booking: Platform(name="Booking.com", commission_percentage=Decimal("15"), role="booking"),
        PlatformRole.manual: Platform(name="Direct", commission_percentage=Decimal("0"), role="manual"),
        PlatformRole.available: Platform(name="Libre", commission_percentage=Decimal("0"), role="available"),
    }
    db.add_all(rows.values())
    db.commit()
    return rows


@pytest.fixture()
def add_property(db):
    def _add(name: str, airbnb_url: str | None = None, booking_url: str | None = None) -> Property:
        prop = Property(name=name, ical_airbnb_url=airbnb_url, ical_booking_url=booking_url)
        db.add(prop)
        db.commit()
        db.refresh(prop)
        return prop

    return _add


@pytest.fixture()
def add_booking(db):
    def _add(prop: Property, platform: Platform, check_in: date, check_out: date, ical_uid: str | None = None) -> Booking:
        booking = Booking(
            property_id=prop.id,
            platform_id=platform.id,
            check_in=check_in,
            check_out=check_out,
            nights=(check_out - check_in).days,
            ical_uid=ical_uid,
        )
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    return _add


@pytest.fixture()
def feeds(monkeypatch):
    import requests
    from feed_helpers import FakeFeedServer

    server = FakeFeedServer()
    monkeypatch.setattr(requests, "get", server.get)
    return server
