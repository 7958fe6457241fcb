from __future__ import annotations

import uuid
from datetime import date

from rental_service.app.enum.rental_enum import OccupancySource
from rental_service.app.schemas.calendar_schemas import ExternalOccupancy, Occupancy
from rental_service.app.services.timeline_service import Timeline, external_occupancy, merge_timeline

PROP_ID = uuid.uuid4()


def _occ(id, start, end, source=OccupancySource.manual, property_name="Casa Sol", property_id=PROP_ID, free=False):
    return Occupancy(
        id=id,
        title=id,
        property_id=property_id,
        property_name=property_name,
        source=source,
        start=start,
        end=end,
        is_free_marker=free,
    )


def test_end_date_is_exclusive():
    timeline = Timeline([_occ("stay", date(2024, 6, 1), date(2024, 6, 5))])

    for day in range(1, 5):
        assert timeline.is_occupied(PROP_ID, date(2024, 6, day))
    assert not timeline.is_occupied(PROP_ID, date(2024, 6, 5))
    assert not timeline.is_occupied(PROP_ID, date(2024, 5, 31))


def test_merge_manual_and_external_sorted_with_provenance():
    manual = [_occ("m1", date(2024, 6, 10), date(2024, 6, 12))]
    external = [external_occupancy(ExternalOccupancy(
        uid="x1",
        property_id=PROP_ID,
        property_name="Casa Sol",
        source=OccupancySource.airbnb,
        start=date(2024, 6, 1),
        end=date(2024, 6, 4),
    ))]

    timeline = merge_timeline(manual, external)

    assert [o.id for o in timeline] == ["x1", "m1"]
    assert [o.source.value for o in timeline] == ["airbnb", "manual"]
    assert timeline.occupancies[0].title == "Airbnb booking"


def test_query_by_property_name_or_id():
    timeline = Timeline([_occ("stay", date(2024, 6, 1), date(2024, 6, 3))])

    assert timeline.is_occupied("Casa Sol", date(2024, 6, 2))
    assert not timeline.is_occupied("Other", date(2024, 6, 2))
    assert not timeline.is_occupied(uuid.uuid4(), date(2024, 6, 2))


def test_free_marker_is_not_an_occupancy():
    timeline = Timeline([_occ("free", date(2024, 6, 1), date(2024, 6, 8), free=True)])

    assert timeline.is_marked_free(PROP_ID, date(2024, 6, 3))
    assert not timeline.is_occupied(PROP_ID, date(2024, 6, 3))
    assert not timeline.is_marked_free(PROP_ID, date(2024, 6, 8))


def test_unoccupied_day_is_not_marked_free():
    timeline = Timeline([_occ("stay", date(2024, 6, 1), date(2024, 6, 3))])

    assert not timeline.is_occupied(PROP_ID, date(2024, 6, 10))
    assert not timeline.is_marked_free(PROP_ID, date(2024, 6, 10))


def test_free_properties_on_lists_explicit_markers_only():
    other_id = uuid.uuid4()
    timeline = Timeline([
        _occ("free-a", date(2024, 6, 1), date(2024, 6, 10), free=True),
        _occ("free-b", date(2024, 6, 5), date(2024, 6, 6), property_name="Azahar", property_id=other_id, free=True),
        _occ("stay-c", date(2024, 6, 1), date(2024, 6, 10), property_name="Brisa", property_id=uuid.uuid4()),
    ])

    names = [p.name for p in timeline.free_properties_on(date(2024, 6, 5))]

    assert names == ["Azahar", "Casa Sol"]


def test_conflicts_report_overlaps_between_sources():
    timeline = Timeline([
        _occ("airbnb-1", date(2024, 6, 1), date(2024, 6, 5), source=OccupancySource.airbnb),
        _occ("booking-1", date(2024, 6, 4), date(2024, 6, 7), source=OccupancySource.booking),
        _occ("booking-2", date(2024, 6, 7), date(2024, 6, 9), source=OccupancySource.booking),
    ])

    conflicts = timeline.conflicts()

    assert len(conflicts) == 1
    assert {conflicts[0].first.id, conflicts[0].second.id} == {"airbnb-1", "booking-1"}


def test_back_to_back_stays_do_not_conflict():
    timeline = Timeline([
        _occ("a", date(2024, 6, 1), date(2024, 6, 5), source=OccupancySource.airbnb),
        _occ("b", date(2024, 6, 5), date(2024, 6, 7), source=OccupancySource.booking),
    ])

    assert timeline.conflicts() == []


def test_empty_intervals_are_dropped():
    timeline = Timeline([_occ("empty", date(2024, 6, 1), date(2024, 6, 1))])

    assert len(timeline) == 0
