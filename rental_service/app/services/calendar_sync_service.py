import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shared.core.config import settings
from shared.core.database import RentalSessionLocal
from ..core.exceptions import ConfigResolutionError, FetchError, ParseError, PersistError, PropertyConfigError
from ..crud import bookings_crud, platforms_crud, properties_crud
from ..enum.rental_enum import OccupancySource
from ..helpers.platform_helper import platform_ids_by_role
from ..schemas.calendar_schemas import CalendarSyncResult, ExternalOccupancy
from ..schemas.properties_schemas import PropertyOut
from .ics_feed_service import fetch_occurrences
from .occurrence_service import normalize_occurrences
from .reconciler_service import reconcile_external_occupancies
from .sync_log import SyncLog
from .timeline_service import external_occupancy, manual_occupancy, merge_timeline

logger = logging.getLogger(__name__)

# one sync per process: the existing-UID snapshot is only valid while no other run inserts
_sync_lock = threading.Lock()

FEED_COLUMNS = (
    (OccupancySource.airbnb, "ical_airbnb_url"),
    (OccupancySource.booking, "ical_booking_url"),
)


@dataclass
class FeedJob:
    prop: object
    source: OccupancySource
    url: str

    @property
    def label(self) -> str:
        return f"{self.source.value}/{self.prop.name}"


def feed_jobs(properties) -> List[FeedJob]:
    jobs = []
    for prop in properties:
        for source, column in FEED_COLUMNS:
            url = (getattr(prop, column) or "").strip()
            if url:
                jobs.append(FeedJob(prop=prop, source=source, url=url))
    return jobs


def collect_feed(job: FeedJob, today: date) -> Tuple[List[ExternalOccupancy], SyncLog]:
    """Fetch, parse and normalize one feed. Feed failures become log lines."""
    log = SyncLog(logger)
    log.info(f"Fetching {job.label} iCal...")
    try:
        raw = fetch_occurrences(job.url, today=today, log=log)
        occupancies = normalize_occurrences(raw, job.prop, job.source)
    except (FetchError, ParseError, ConfigResolutionError) as e:
        log.error(f"Error fetching {job.label} iCal: {e}")
        return [], log
    except Exception as e:
        # one feed never takes the other properties down with it
        logger.exception("Unexpected failure reading %s", job.url)
        log.error(f"Error fetching {job.label} iCal: {e}")
        return [], log

    log.info(f"Found {len(occupancies)} upcoming events for {job.label}")
    return occupancies, log


def fetch_external_occupancies(
    properties,
    today: date,
    log: SyncLog,
    max_workers: Optional[int] = None,
) -> List[ExternalOccupancy]:
    for prop in properties:
        log.info(
            f"Checking property: {prop.name} "
            f"(Airbnb: {'YES' if prop.ical_airbnb_url else 'NO'}, "
            f"Booking: {'YES' if prop.ical_booking_url else 'NO'})"
        )

    jobs = feed_jobs(properties)
    if not jobs:
        return []

    workers = max(1, min(max_workers or settings.ICAL_FETCH_WORKERS, len(jobs)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ical-fetch") as pool:
        results = list(pool.map(lambda job: collect_feed(job, today), jobs))

    occupancies = []
    # merged in job order so the log reads the same on every run
    for job_occupancies, job_log in results:
        log.extend(job_log)
        occupancies.extend(job_occupancies)
    return occupancies


def get_reconciled_calendar(db: Session, today: Optional[date] = None) -> CalendarSyncResult:
    """
    Fetch every configured feed, merge it with manual bookings and store
    net-new feed bookings in the ledger.

    Raises PropertyConfigError when properties cannot be read; every other
    failure is reported in the returned logs.
    """
    today = today or date.today()
    with _sync_lock:
        return _run_sync(db, today)


def _run_sync(db: Session, today: date) -> CalendarSyncResult:
    log = SyncLog(logger)
    log.info("--- Calendar sync started ---")

    try:
        properties = properties_crud.get_properties(db)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Cannot read property configuration")
        raise PropertyConfigError(f"Cannot read property configuration: {e}") from e
    log.info(f"Loaded {len(properties)} properties")

    try:
        platforms = platforms_crud.get_platforms(db)
    except SQLAlchemyError as e:
        db.rollback()
        log.error(f"Cannot read platform configuration: {e}")
        platforms = []

    external = fetch_external_occupancies(properties, today, log)

    try:
        manual_bookings = bookings_crud.get_manual_bookings(
            db, today, [p.id for p in properties])
    except SQLAlchemyError as e:
        db.rollback()
        log.error(f"Cannot read manual bookings: {e}")
        manual_bookings = []
    manual = [manual_occupancy(b) for b in manual_bookings]
    log.info(f"Manual event count: {len(manual)}")

    timeline = merge_timeline(manual, [external_occupancy(o) for o in external])
    conflicts = timeline.conflicts()
    for conflict in conflicts:
        log.warning(
            f"Double booking on {conflict.property_name}: "
            f"{conflict.first.source.value} {conflict.first.start} -> {conflict.first.end} overlaps "
            f"{conflict.second.source.value} {conflict.second.start} -> {conflict.second.end}"
        )
    log.info(f"Total events to return: {len(timeline)}")

    new_bookings = 0
    persist_failed = False
    if external:
        try:
            existing_uids = bookings_crud.get_existing_ical_uids(db)
            new_bookings = reconcile_external_occupancies(
                db,
                external,
                existing_uids,
                platform_ids_by_role(platforms),
                {p.name: p.id for p in properties},
                log,
            )
        except PersistError as e:
            log.error(f"Error in auto-sync: {e}")
            persist_failed = True
        except SQLAlchemyError as e:
            db.rollback()
            log.error(f"Cannot read existing feed UIDs: {e}")
            persist_failed = True

    return CalendarSyncResult(
        occupancies=timeline.occupancies,
        logs=log.lines,
        properties=[PropertyOut.model_validate(p) for p in properties],
        conflicts=conflicts,
        new_bookings=new_bookings,
        persist_failed=persist_failed,
    )


def run_scheduled_sync():
    db = RentalSessionLocal()
    try:
        result = get_reconciled_calendar(db)
        logger.info(
            "Scheduled calendar sync: %d occupancies, %d new bookings%s",
            len(result.occupancies),
            result.new_bookings,
            " (ledger write failed)" if result.persist_failed else "",
        )
    except PropertyConfigError as e:
        logger.error("Scheduled calendar sync aborted: %s", e)
    finally:
        db.close()
