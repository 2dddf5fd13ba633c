"""Simulation trace logging.

The logger records structured entries for what a simulation did: which
requests hit, which faulted, which pages were evicted, and what the
session driver was asked to do.  It is an in-memory buffer the caller
owns, so the policy engine stays free of I/O.

- **LogLevel** — severity levels ordered for filtering (DEBUG < ERROR).
- **LogEntry** — a single structured record (level, message, source, step).
- **Logger** — an append-only log with filtering and clearing.

Design choices:
    - **IntEnum for levels** so they compare naturally with ``<``.
    - **Frozen dataclass for entries** — log records should be immutable.
    - **Filter returns a list, not a generator** — callers usually
      iterate a trace more than once.
"""

from dataclasses import dataclass
from enum import IntEnum


class LogLevel(IntEnum):
    """Severity levels for log entries.

    Per-request events are DEBUG, run summaries are INFO, and rejected
    driver input is WARNING.
    """

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """A single structured log record.

    Attributes:
        level: The severity of this event.
        message: A human-readable description of what happened.
        source: What generated the event (a policy name or "session").
        step: Index into the reference string, or -1 when not tied to one.

    """

    level: LogLevel
    message: str
    source: str
    step: int = -1

    def __str__(self) -> str:
        """Format as ``[LEVEL] source: message`` with the step when known."""
        if self.step >= 0:
            return f"[{self.level.name}] {self.source}@{self.step}: {self.message}"
        return f"[{self.level.name}] {self.source}: {self.message}"


class Logger:
    """Append-only log buffer with filtering."""

    def __init__(self) -> None:
        """Create an empty logger."""
        self._entries: list[LogEntry] = []

    @property
    def entries(self) -> list[LogEntry]:
        """Return all log entries in chronological order."""
        return list(self._entries)

    def log(
        self,
        level: LogLevel,
        message: str,
        *,
        source: str,
        step: int = -1,
    ) -> None:
        """Append a new entry to the log.

        Args:
            level: Severity of the event.
            message: Human-readable event description.
            source: Component that generated the event.
            step: Reference-string index the event belongs to.

        """
        self._entries.append(LogEntry(level=level, message=message, source=source, step=step))

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
    ) -> list[LogEntry]:
        """Return entries matching the given criteria.

        Args:
            min_level: If set, only return entries at or above this level.
            source: If set, only return entries from this source.

        Returns:
            A filtered list of log entries.

        """
        result = self._entries
        if min_level is not None:
            result = [e for e in result if e.level >= min_level]
        if source is not None:
            result = [e for e in result if e.source == source]
        return result if result is not self._entries else list(result)

    def clear(self) -> None:
        """Remove all log entries."""
        self._entries.clear()
