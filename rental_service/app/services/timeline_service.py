from collections import defaultdict
from datetime import date
from typing import Iterable, List, Union
from uuid import UUID

from shared.core.schemas import Lookup
from ..enum.rental_enum import OccupancySource, PlatformRole
from ..helpers.platform_helper import resolve_platform_role
from ..schemas.calendar_schemas import ExternalOccupancy, Occupancy, OccupancyConflict

PropertyKey = Union[UUID, str]

SOURCE_TITLES = {
    OccupancySource.airbnb: "Airbnb",
    OccupancySource.booking: "Booking",
}


def manual_occupancy(booking) -> Occupancy:
    property_name = booking.property.name if booking.property else "Unknown"
    is_free = resolve_platform_role(booking.platform) == PlatformRole.available
    title = f"FREE: {property_name}" if is_free else f"Manual booking ({property_name})"

    return Occupancy(
        id=str(booking.id),
        title=title,
        property_id=booking.property_id,
        property_name=property_name,
        source=OccupancySource.manual,
        start=booking.check_in,
        end=booking.check_out,
        platform_id=booking.platform_id,
        platform_name=booking.platform.name,
        net_price=booking.net_price,
        is_free_marker=is_free,
    )


def external_occupancy(occupancy: ExternalOccupancy) -> Occupancy:
    return Occupancy(
        id=occupancy.uid,
        title=f"{SOURCE_TITLES[occupancy.source]} booking",
        property_id=occupancy.property_id,
        property_name=occupancy.property_name,
        source=occupancy.source,
        start=occupancy.start,
        end=occupancy.end,
    )


def _matches(occupancy: Occupancy, prop: PropertyKey) -> bool:
    if isinstance(prop, UUID):
        return occupancy.property_id == prop
    return occupancy.property_name == prop


def _overlaps(a: Occupancy, b: Occupancy) -> bool:
    return a.start < b.end and b.start < a.end


class Timeline:
    """
    Chronological occupancies of every property, manual and feed-sourced.

    Intervals are half-open: a day is covered when start <= day < end.
    Manual "free" markers are kept in the sequence for rendering but do
    not make a property occupied.
    """

    def __init__(self, occupancies: Iterable[Occupancy]):
        self.occupancies: List[Occupancy] = sorted(
            (o for o in occupancies if o.start < o.end),
            key=lambda o: (o.start, o.property_name, o.source.value, o.id),
        )

    def __iter__(self):
        return iter(self.occupancies)

    def __len__(self):
        return len(self.occupancies)

    def for_property(self, prop: PropertyKey) -> List[Occupancy]:
        return [o for o in self.occupancies if _matches(o, prop)]

    def on_day(self, day: date) -> List[Occupancy]:
        return [o for o in self.occupancies if o.covers(day)]

    def is_occupied(self, prop: PropertyKey, day: date) -> bool:
        return any(
            o.covers(day) and not o.is_free_marker
            for o in self.for_property(prop)
        )

    def is_marked_free(self, prop: PropertyKey, day: date) -> bool:
        return any(
            o.covers(day) and o.is_free_marker
            for o in self.for_property(prop)
        )

    def free_properties_on(self, day: date) -> List[Lookup]:
        """Properties explicitly marked free on `day`, in name order."""
        found = {}
        for o in self.on_day(day):
            if o.is_free_marker:
                found.setdefault(o.property_name, o.property_id or o.property_name)
        return [Lookup(id=found[name], name=name) for name in sorted(found)]

    def conflicts(self) -> List[OccupancyConflict]:
        """Overlapping stays on one property that come from different sources."""
        by_property = defaultdict(list)
        for o in self.occupancies:
            if not o.is_free_marker:
                by_property[o.property_name].append(o)

        conflicts = []
        for property_name, stays in by_property.items():
            for i, first in enumerate(stays):
                for second in stays[i + 1:]:
                    # sorted by start: nothing later can overlap `first`
                    if second.start >= first.end:
                        break
                    if first.source != second.source and _overlaps(first, second):
                        conflicts.append(OccupancyConflict(
                            property_name=property_name, first=first, second=second))
        return conflicts


def merge_timeline(
    manual: Iterable[Occupancy],
    external: Iterable[Occupancy],
) -> Timeline:
    return Timeline(list(manual) + list(external))
