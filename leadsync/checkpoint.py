"""Checkpoint store: the timestamp of the last successful run.

The checkpoint bounds the next mailbox search.  Gmail's ``after:``
operator is day-granular, so the search window is always widened to the
whole checkpoint day; the duplicate filter absorbs the overlap.
"""

from __future__ import annotations

import abc
from datetime import UTC, date, datetime, timedelta, tzinfo
from pathlib import Path

import structlog

logger = structlog.get_logger()

DEFAULT_BOOTSTRAP = timedelta(hours=48)


class CheckpointStore(abc.ABC):
    """Read/write access to the last-run timestamp."""

    @abc.abstractmethod
    def read(self) -> datetime | None:
        """Return the stored checkpoint, or ``None`` if there is none."""

    @abc.abstractmethod
    def write(self, timestamp: datetime) -> None:
        """Persist *timestamp* as the new checkpoint."""


class FileCheckpointStore(CheckpointStore):
    """One ISO-8601 timestamp in a text file.

    I/O and parse failures never propagate: an unreadable checkpoint is
    treated as absent, a failed write is logged and the next run simply
    searches a wider window.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> datetime | None:
        if not self._path.exists():
            return None
        try:
            raw = self._path.read_text(encoding="utf-8").strip()
            timestamp = datetime.fromisoformat(raw)
        except (OSError, ValueError) as exc:
            logger.error("checkpoint_read_failed", path=str(self._path), error=str(exc))
            return None
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=UTC)
        return timestamp

    def write(self, timestamp: datetime) -> None:
        value = timestamp.astimezone(UTC).isoformat()
        try:
            self._path.write_text(value, encoding="utf-8")
        except OSError as exc:
            logger.error("checkpoint_write_failed", path=str(self._path), error=str(exc))
            return
        logger.info("checkpoint_updated", path=str(self._path), checkpoint=value)


class MemoryCheckpointStore(CheckpointStore):
    """In-process checkpoint, for dry runs and tests."""

    def __init__(self, timestamp: datetime | None = None) -> None:
        self.timestamp = timestamp

    def read(self) -> datetime | None:
        return self.timestamp

    def write(self, timestamp: datetime) -> None:
        self.timestamp = timestamp


def query_lower_bound(
    checkpoint: datetime | None,
    now: datetime,
    *,
    bootstrap: timedelta = DEFAULT_BOOTSTRAP,
    tz: tzinfo = UTC,
) -> date:
    """Date used in the ``after:`` operator of the next search.

    With no checkpoint the window starts *bootstrap* before *now*.
    """
    boundary = checkpoint if checkpoint is not None else now - bootstrap
    return boundary.astimezone(tz).date()


def format_after(day: date) -> str:
    return f"{day.year}/{day.month:02d}/{day.day:02d}"
