from __future__ import annotations

import uuid
from datetime import date
from types import SimpleNamespace

from rental_service.app.enum.rental_enum import OccupancySource
from rental_service.app.schemas.calendar_schemas import RawOccurrence
from rental_service.app.services.occurrence_service import fallback_uid, normalize_occurrences


def _property(name="Casa Sol"):
    return SimpleNamespace(id=uuid.uuid4(), name=name)


def test_normalize_tags_property_and_source():
    prop = _property()
    raw = [RawOccurrence(uid="u1", start=date(2024, 6, 1), end=date(2024, 6, 5), created=date(2024, 5, 1))]

    [occ] = normalize_occurrences(raw, prop, OccupancySource.airbnb)

    assert occ.uid == "u1"
    assert occ.property_id == prop.id
    assert occ.property_name == "Casa Sol"
    assert occ.source == OccupancySource.airbnb
    assert occ.created == date(2024, 5, 1)


def test_missing_uid_gets_the_same_identity_on_every_run():
    prop = _property()
    raw = [RawOccurrence(start=date(2024, 6, 1), end=date(2024, 6, 5))]

    first = normalize_occurrences(raw, prop, OccupancySource.booking)[0].uid
    second = normalize_occurrences(raw, prop, OccupancySource.booking)[0].uid

    assert first == second
    assert first.startswith("generated-booking-")


def test_fallback_uid_differs_per_property_and_interval():
    start, end = date(2024, 6, 1), date(2024, 6, 5)

    assert fallback_uid("A", OccupancySource.airbnb, start, end) != fallback_uid("B", OccupancySource.airbnb, start, end)
    assert fallback_uid("A", OccupancySource.airbnb, start, end) != fallback_uid("A", OccupancySource.airbnb, start, date(2024, 6, 6))


def test_repeated_uid_in_one_feed_is_kept_once():
    raw = [
        RawOccurrence(uid="dup", start=date(2024, 6, 1), end=date(2024, 6, 5)),
        RawOccurrence(uid="dup", start=date(2024, 6, 1), end=date(2024, 6, 5)),
    ]

    assert len(normalize_occurrences(raw, _property(), OccupancySource.airbnb)) == 1


def test_non_positive_intervals_are_dropped():
    raw = [RawOccurrence(uid="bad", start=date(2024, 6, 5), end=date(2024, 6, 1))]

    assert normalize_occurrences(raw, _property(), OccupancySource.airbnb) == []
