import hashlib
from datetime import date
from typing import Iterable, List

from ..enum.rental_enum import OccupancySource
from ..schemas.calendar_schemas import ExternalOccupancy, RawOccurrence


def fallback_uid(property_name: str, source: OccupancySource, start: date, end: date) -> str:
    """Stable identity for feed events that carry no UID."""
    key = f"{property_name}|{source.value}|{start.isoformat()}|{end.isoformat()}"
    digest = hashlib.sha1(key.encode("utf-8")).hexdigest()
    return f"generated-{source.value}-{digest[:24]}"


def normalize_occurrences(
    raw_occurrences: Iterable[RawOccurrence],
    property,
    source: OccupancySource,
) -> List[ExternalOccupancy]:
    occupancies = []
    seen = set()
    for raw in raw_occurrences:
        if raw.start >= raw.end:
            continue
        uid = raw.uid or fallback_uid(property.name, source, raw.start, raw.end)
        # feeds occasionally repeat a VEVENT
        if uid in seen:
            continue
        seen.add(uid)

        occupancies.append(ExternalOccupancy(
            uid=uid,
            property_id=property.id,
            property_name=property.name,
            source=source,
            start=raw.start,
            end=raw.end,
            created=raw.created,
        ))
    return occupancies
