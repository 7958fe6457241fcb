class CalendarSyncError(Exception):
    """Base class for calendar reconciliation failures."""


class FetchError(CalendarSyncError):
    """The feed could not be downloaded (transport error or non-2xx status)."""

    def __init__(self, url: str, reason: str, status_code: int | None = None):
        self.url = url
        self.status_code = status_code
        super().__init__(f"{reason} ({url})")


class ParseError(CalendarSyncError):
    """The feed body is not a readable iCalendar document."""


class ConfigResolutionError(CalendarSyncError):
    """A property or platform could not be resolved from configuration."""


class PersistError(CalendarSyncError):
    """The booking ledger rejected the batch insert."""


class PropertyConfigError(CalendarSyncError):
    """Property configuration is unreadable; no partial result is possible."""
