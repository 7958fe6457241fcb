import logging
from datetime import datetime
from typing import List


class SyncLog:
    """
    Ordered, timestamped lines describing one calendar sync run.

    The lines are returned to the caller alongside the reconciled calendar;
    every line is also forwarded to the module logger.
    """

    def __init__(self, logger: logging.Logger | None = None):
        self._lines: List[str] = []
        self._logger = logger or logging.getLogger(__name__)

    def _add(self, level: int, message: str):
        timestamp = datetime.now().strftime("%H:%M:%S")
        self._lines.append(f"[{timestamp}] {message}")
        self._logger.log(level, message)

    def info(self, message: str):
        self._add(logging.INFO, message)

    def warning(self, message: str):
        self._add(logging.WARNING, message)

    def error(self, message: str):
        self._add(logging.ERROR, message)

    def extend(self, other: "SyncLog"):
        # lines only; the other log already forwarded them to its logger
        self._lines.extend(other.lines)

    @property
    def lines(self) -> List[str]:
        return list(self._lines)

    def __len__(self):
        return len(self._lines)
