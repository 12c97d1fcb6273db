"""Date-keyed period ledger.

Holds at most one ``PeriodEntry`` per calendar date.  Writes overwrite,
never append.  Every derivation (latest start, active period, gap filling)
walks the entries in date order, not insertion order.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Iterator

from cyclegarden.engine.base import PeriodEntry, PeriodType
from cyclegarden.engine.config_loader import GardenConfig, get_garden_config
from cyclegarden.engine.dates import (
    date_key,
    dates_strictly_between,
    day_of,
    month_span,
    parse_date_key,
)
from cyclegarden.engine.errors import ValidationError

logger = logging.getLogger("cyclegarden.engine.ledger")

_ACTIVE_TYPES = frozenset({PeriodType.start, PeriodType.continue_})


class PeriodLedger:
    """Sparse calendar of period, flow, symptom and note entries.

    Usage::

        ledger = PeriodLedger()
        ledger.upsert(date(2026, 3, 5), PeriodEntry.build("heavy", "start"))
        ledger.upsert(date(2026, 3, 9), PeriodEntry.build("light", "end"))
        ledger.auto_fill_gaps()   # fills 6th, 7th and 8th as "continue"
        ledger.last_start()       # date(2026, 3, 5)
    """

    def __init__(
        self,
        entries: dict[date, PeriodEntry] | None = None,
        config: GardenConfig | None = None,
    ) -> None:
        self._config = config or get_garden_config()
        self._entries: dict[date, PeriodEntry] = dict(entries or {})

    # ------------------------------------------------------------------
    # Mapping protocol (date-sorted)
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, day: object) -> bool:
        return day in self._entries

    def __iter__(self) -> Iterator[date]:
        return iter(sorted(self._entries))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PeriodLedger):
            return NotImplemented
        return self._entries == other._entries

    def get(self, day: date) -> PeriodEntry | None:
        return self._entries.get(day_of(day))

    def items(self) -> list[tuple[date, PeriodEntry]]:
        """Return (date, entry) pairs in ascending date order."""
        return sorted(self._entries.items())

    def entries_between(self, start: date, end: date) -> list[tuple[date, PeriodEntry]]:
        """Return entries with ``start <= date <= end``, ascending."""
        return [(d, e) for d, e in self.items() if start <= d <= end]

    def month_entries(self, year: int, month: int) -> list[tuple[date, PeriodEntry]]:
        """Return the entries falling in a calendar month, ascending."""
        first, last = month_span(year, month)
        return self.entries_between(first, last)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def upsert(self, day: date, entry: PeriodEntry | dict[str, Any]) -> PeriodEntry:
        """Store ``entry`` for ``day``, replacing anything already there.

        Args:
            day:   Calendar date (a datetime is reduced to its date).
            entry: A PeriodEntry, or a mapping with ``flow_level``,
                   ``period_type``, ``symptoms`` and ``notes``.

        Returns:
            The stored entry.

        Raises:
            ValidationError: If an enumerated field holds an unknown value.
                             The ledger is left untouched.
        """
        if isinstance(entry, PeriodEntry):
            stored = PeriodEntry.build(
                flow_level=entry.flow_level,
                period_type=entry.period_type,
                symptoms=entry.symptoms,
                notes=entry.notes,
            )
        elif isinstance(entry, dict):
            stored = PeriodEntry.from_dict(entry)
        else:
            raise ValidationError(f"Unsupported period entry: {entry!r}")

        key = day_of(day)
        replaced = key in self._entries
        self._entries[key] = stored
        logger.debug(
            "%s ledger entry %s (%s/%s)",
            "Replaced" if replaced else "Created",
            key,
            stored.flow_level.value,
            stored.period_type.value,
        )
        return stored

    def delete(self, day: date) -> bool:
        """Remove the entry for ``day``.

        Returns:
            True if an entry was removed, False if there was none (not an error).
        """
        removed = self._entries.pop(day_of(day), None)
        if removed is None:
            logger.debug("No ledger entry to delete for %s", day)
            return False
        return True

    def auto_fill_gaps(self) -> list[date]:
        """Fill the days between the latest start and the latest end.

        Only runs when the latest start precedes the latest end.  Days that
        already have an entry are left alone, so running it twice changes
        nothing the second time.

        Returns:
            The dates that received a synthetic ``continue`` entry.
        """
        start = self.last_start()
        end = self.last_end()
        if start is None or end is None or start >= end:
            return []

        filled: list[date] = []
        for day in dates_strictly_between(start, end):
            if day in self._entries:
                continue
            self._entries[day] = PeriodEntry(
                flow_level=self._config.ledger.auto_fill_flow_level,
                period_type=PeriodType.continue_,
                symptoms=set(),
                notes=self._config.ledger.auto_fill_notes,
            )
            filled.append(day)

        if filled:
            logger.info(
                "Auto-filled %d period day(s) between %s and %s", len(filled), start, end
            )
        return filled

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _last_of_type(self, period_type: PeriodType) -> date | None:
        for day in sorted(self._entries, reverse=True):
            if self._entries[day].period_type is period_type:
                return day
        return None

    def last_start(self) -> date | None:
        """Most recent date whose entry starts a period, or None."""
        return self._last_of_type(PeriodType.start)

    def last_end(self) -> date | None:
        """Most recent date whose entry ends a period, or None."""
        return self._last_of_type(PeriodType.end)

    def has_active_period(self, today: date) -> bool:
        """Return True if a period appears to be in progress on ``today``.

        Either today's entry is a start/continue day, or within the lookback
        window ending today (``active_period_lookback_days`` days, today
        included) the latest start has no end after it.
        """
        today = day_of(today)
        todays = self._entries.get(today)
        if todays is not None and todays.period_type in _ACTIVE_TYPES:
            return True

        window_start = today - timedelta(days=self._config.ledger.active_period_lookback_days - 1)
        latest_start: date | None = None
        ended = False
        for day, entry in self.entries_between(window_start, today):
            if entry.period_type is PeriodType.start:
                latest_start = day
                ended = False
            elif entry.period_type is PeriodType.end and latest_start is not None:
                ended = True
        return latest_start is not None and not ended

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, dict]:
        return {date_key(d): e.to_dict() for d, e in self.items()}

    @classmethod
    def from_dict(
        cls, raw: dict[str, dict] | None, config: GardenConfig | None = None
    ) -> PeriodLedger:
        entries = {
            parse_date_key(key): PeriodEntry.from_dict(value)
            for key, value in (raw or {}).items()
        }
        return cls(entries, config=config)

    def copy(self) -> PeriodLedger:
        return PeriodLedger.from_dict(self.to_dict(), config=self._config)
