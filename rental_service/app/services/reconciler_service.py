import logging
from typing import Dict, Iterable, List, Optional, Set, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from ..core.exceptions import ConfigResolutionError
from ..crud import bookings_crud
from ..enum.rental_enum import PlatformRole
from ..helpers.pricing_helper import count_nights, lead_time_days
from ..schemas.calendar_schemas import ExternalOccupancy
from .sync_log import SyncLog

logger = logging.getLogger(__name__)


def _resolve_ids(
    occupancy: ExternalOccupancy,
    platform_ids: Dict[PlatformRole, UUID],
    property_ids: Dict[str, UUID],
) -> Tuple[UUID, UUID]:
    property_id = property_ids.get(occupancy.property_name)
    if property_id is None:
        raise ConfigResolutionError(f"Unknown property '{occupancy.property_name}'")

    platform_id = platform_ids.get(PlatformRole(occupancy.source.value))
    if platform_id is None:
        raise ConfigResolutionError(f"No platform configured for role '{occupancy.source.value}'")
    return property_id, platform_id


def build_ledger_candidates(
    occupancies: Iterable[ExternalOccupancy],
    existing_uids: Set[str],
    platform_ids: Dict[PlatformRole, UUID],
    property_ids: Dict[str, UUID],
    log: Optional[SyncLog] = None,
) -> List[dict]:
    """
    Booking rows for feed occupancies not yet in the ledger.

    Prices are zero: feeds carry no price data, pricing is filled in by hand later.
    """
    if log is None:
        log = SyncLog(logger)
    seen = set(existing_uids)
    candidates = []
    already_ingested = 0

    for occupancy in occupancies:
        if occupancy.uid in seen:
            already_ingested += 1
            continue
        try:
            property_id, platform_id = _resolve_ids(occupancy, platform_ids, property_ids)
        except ConfigResolutionError as e:
            log.warning(f"Skipping {occupancy.uid}: {e}")
            continue

        seen.add(occupancy.uid)
        candidates.append({
            "ical_uid": occupancy.uid,
            "property_id": property_id,
            "platform_id": platform_id,
            "check_in": occupancy.start,
            "check_out": occupancy.end,
            "nights": count_nights(occupancy.start, occupancy.end),
            "gross_price": 0,
            "commission": 0,
            "commission_pinned": False,
            "net_price": 0,
            "average_daily_rate": 0,
            "request_date": occupancy.created,
            "lead_time_days": lead_time_days(occupancy.start, occupancy.created),
        })

    if already_ingested:
        log.info(f"{already_ingested} feed events already in the ledger")
    return candidates


def reconcile_external_occupancies(
    db: Session,
    occupancies: List[ExternalOccupancy],
    existing_uids: Set[str],
    platform_ids: Dict[PlatformRole, UUID],
    property_ids: Dict[str, UUID],
    log: Optional[SyncLog] = None,
) -> int:
    """Persist net-new feed occupancies. Raises PersistError when the batch insert fails."""
    if log is None:
        log = SyncLog(logger)
    candidates = build_ledger_candidates(
        occupancies, existing_uids, platform_ids, property_ids, log)
    if not candidates:
        log.info("No new feed bookings to sync")
        return 0

    log.info(f"Syncing {len(candidates)} new bookings to the ledger...")
    inserted = bookings_crud.insert_external_bookings(db, candidates)
    log.info(f"Successfully synced {inserted} new bookings")
    return inserted
