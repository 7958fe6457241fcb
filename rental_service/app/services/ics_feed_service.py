import logging
from datetime import date, datetime, timedelta
from typing import List, Optional

import requests
from icalendar import Calendar

from shared.core.config import settings
from ..core.exceptions import FetchError, ParseError
from ..schemas.calendar_schemas import RawOccurrence
from .sync_log import SyncLog

logger = logging.getLogger(__name__)


def download_feed(url: str, timeout: Optional[int] = None) -> str:
    try:
        response = requests.get(
            url,
            timeout=timeout or settings.ICAL_FETCH_TIMEOUT,
            headers={"User-Agent": settings.ICAL_USER_AGENT},
        )
    except requests.RequestException as e:
        raise FetchError(url, f"Transport error: {e}") from e

    if not 200 <= response.status_code < 300:
        raise FetchError(
            url, f"HTTP error status {response.status_code}", response.status_code)
    return response.text


def _as_date(value) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return None


def _property_date(component, name: str) -> Optional[date]:
    prop = component.get(name)
    if prop is None:
        return None
    return _as_date(getattr(prop, "dt", None))


def _optional_date(component, name: str) -> Optional[date]:
    # an unreadable CREATED or DTSTAMP only loses the lead time
    try:
        return _property_date(component, name)
    except (ValueError, TypeError):
        return None


def _event_end(component, start: date) -> Optional[date]:
    end = _property_date(component, "DTEND")
    if end is not None:
        return end

    duration = component.get("DURATION")
    if duration is not None and isinstance(getattr(duration, "dt", None), timedelta):
        return start + duration.dt

    # RFC 5545: an all-day event without DTEND lasts one day
    dtstart = component.get("DTSTART").dt
    if not isinstance(dtstart, datetime):
        return start + timedelta(days=1)
    return start


def parse_feed(
    text: str,
    today: Optional[date] = None,
    lookback_days: Optional[int] = None,
    log: Optional[SyncLog] = None,
) -> List[RawOccurrence]:
    """
    Decode an iCalendar document into raw occurrences.

    Only VEVENT components are read. Events that ended more than
    `lookback_days` before `today` are discarded, as are events whose
    end is not after their start.
    """
    if log is None:
        log = SyncLog(logger)
    today = today or date.today()
    if lookback_days is None:
        lookback_days = settings.ICAL_LOOKBACK_DAYS
    cutoff = today - timedelta(days=lookback_days)

    if not text or not text.strip():
        raise ParseError("Feed body is empty")
    try:
        calendar = Calendar.from_ical(text)
    except (ValueError, TypeError, IndexError, KeyError) as e:
        raise ParseError(f"Feed is not a valid iCalendar document: {e}") from e

    if calendar.name != "VCALENDAR":
        raise ParseError(f"Expected VCALENDAR, found {calendar.name}")

    occurrences = []
    total = 0
    for component in calendar.walk("VEVENT"):
        uid = str(component.get("UID", "")).strip() or None
        try:
            start = _property_date(component, "DTSTART")
            end = _event_end(component, start) if start is not None else None
        except (ValueError, TypeError) as e:
            log.warning(f"Skipping event {uid or '<no uid>'} with unreadable dates: {e}")
            continue
        if start is None:
            log.warning("Skipping event without a usable DTSTART")
            continue
        if end is None:
            log.warning(f"Skipping event starting {start} without a usable DTEND")
            continue

        total += 1
        if start >= end:
            log.warning(f"Dropping empty interval {start} -> {end}")
            continue
        if end < cutoff:
            continue

        created = _optional_date(component, "CREATED") or _optional_date(component, "DTSTAMP")
        occurrences.append(RawOccurrence(uid=uid, start=start, end=end, created=created))

    log.info(f"Parsed {total} events, {len(occurrences)} passed the {lookback_days}-day filter")
    return occurrences


def fetch_occurrences(
    url: str,
    today: Optional[date] = None,
    log: Optional[SyncLog] = None,
) -> List[RawOccurrence]:
    return parse_feed(download_feed(url), today=today, log=log)
