"""Garden engine: the single entry point the presentation layer talks to.

Owns an explicit ``GardenState`` (baseline, plant, ledger) and a store.
Every mutating operation works on a copy of the state, validates before
changing anything, persists each record it touched, and only then swaps the
copy in.  A failure part-way through leaves both memory and disk as they
were before the call.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Iterator

from cyclegarden.engine.base import (
    CareAction,
    CycleBaseline,
    Mood,
    MoodLogEntry,
    PeriodEntry,
    PeriodType,
    Phase,
    PlantState,
)
from cyclegarden.engine.config_loader import GardenConfig, get_garden_config
from cyclegarden.engine.content import WELCOME_MESSAGE, phase_info, upcoming_period_notice
from cyclegarden.engine.dates import day_of, parse_date_key
from cyclegarden.engine.errors import SetupRequiredError, ValidationError
from cyclegarden.engine.events import CareMoodProcessor, CareResult, MoodResult
from cyclegarden.engine.growth import GrowthEngine
from cyclegarden.engine.ledger import PeriodLedger
from cyclegarden.engine.phase import CyclePhaseCalculator, CycleStatus

logger = logging.getLogger("cyclegarden.engine.garden")


class StateStore(ABC):
    """Loads and saves the three independently persisted garden records."""

    @abstractmethod
    def load_baseline(self) -> CycleBaseline | None:
        """Return the saved baseline, or None if setup has never run."""

    @abstractmethod
    def save_baseline(self, baseline: CycleBaseline) -> None: ...

    @abstractmethod
    def load_plant(self) -> PlantState:
        """Return the saved plant, or a fresh default plant."""

    @abstractmethod
    def save_plant(self, plant: PlantState) -> None: ...

    @abstractmethod
    def load_ledger(self) -> PeriodLedger:
        """Return the saved ledger, or an empty one."""

    @abstractmethod
    def save_ledger(self, ledger: PeriodLedger) -> None: ...


@dataclass
class GardenState:
    baseline: CycleBaseline | None
    plant: PlantState
    ledger: PeriodLedger

    def copy(self) -> GardenState:
        return GardenState(
            baseline=self.baseline,
            plant=PlantState.from_dict(self.plant.to_dict()),
            ledger=self.ledger.copy(),
        )


@dataclass
class GardenSnapshot:
    """Everything the presentation layer needs for one refresh.

    When ``setup_required`` is True only the plant and ledger fields are
    meaningful; the cycle fields describe a default cycle.
    """

    setup_required: bool
    phase: Phase
    cycle_day: int
    cycle_length: int
    days_until_next: int
    progress: float
    growth_level: float
    care_streak: int
    total_care_actions: int
    has_active_period: bool
    plant_name: str
    plant_description: str
    phase_display_name: str
    garden_note: str
    notice: str | None = None
    mood_history: list[MoodLogEntry] = field(default_factory=list)
    ledger: dict[str, dict] = field(default_factory=dict)


class GardenEngine:
    """Cycle phase, plant growth and period calendar for a single user.

    Usage::

        engine = GardenEngine(JsonGardenStore(data_dir))
        engine.setup("2026-03-01", 28)
        engine.record_care("hydration")
        snapshot = engine.snapshot()
        print(snapshot.phase, snapshot.growth_level)
    """

    def __init__(
        self,
        store: StateStore,
        config: GardenConfig | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._config = config or get_garden_config()
        self._clock = clock
        self._calculator = CyclePhaseCalculator(self._config)
        self._growth = GrowthEngine(self._config)
        self._events = CareMoodProcessor(self._config)
        self._state = GardenState(
            baseline=store.load_baseline(),
            plant=store.load_plant(),
            ledger=store.load_ledger(),
        )

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def state(self) -> GardenState:
        return self._state

    @property
    def setup_required(self) -> bool:
        return self._state.baseline is None

    def _now(self, now: datetime | None) -> datetime:
        return now or self._clock()

    def today(self) -> date:
        return day_of(self._clock())

    @contextmanager
    def _transaction(self) -> Iterator[GardenState]:
        """Yield a working copy; persist changed records, then commit it.

        If a later record fails to save, the records already written are
        re-saved from the previous state before the error propagates.
        """
        previous = self._state
        working = previous.copy()
        yield working

        written: list[Callable[[], None]] = []
        try:
            if working.baseline != previous.baseline and working.baseline is not None:
                self._store.save_baseline(working.baseline)
                if previous.baseline is not None:
                    written.append(lambda: self._store.save_baseline(previous.baseline))
            if working.plant.to_dict() != previous.plant.to_dict():
                self._store.save_plant(working.plant)
                written.append(lambda: self._store.save_plant(previous.plant))
            if working.ledger != previous.ledger:
                self._store.save_ledger(working.ledger)
                written.append(lambda: self._store.save_ledger(previous.ledger))
        except Exception:
            logger.error("Save failed; restoring %d record(s) already written", len(written))
            for restore in reversed(written):
                restore()
            raise
        self._state = working

    def _require_setup(self) -> None:
        if self.setup_required:
            raise SetupRequiredError("Set up your cycle before tending the garden")

    # ------------------------------------------------------------------
    # Cycle
    # ------------------------------------------------------------------

    def setup(
        self,
        last_period_start: date | str | None,
        cycle_length_days: int | str | None,
        now: datetime | None = None,
    ) -> str:
        """Record (or overwrite) the cycle baseline.

        Raises:
            ValidationError: If either field is missing or the length is not
                             a positive whole number.
        """
        if not last_period_start or not cycle_length_days:
            raise ValidationError("Please fill in all fields")
        if isinstance(last_period_start, str):
            last_period_start = parse_date_key(last_period_start)
        try:
            length = int(cycle_length_days)
        except (TypeError, ValueError) as exc:
            raise ValidationError(
                f"Cycle length must be a whole number of days, got {cycle_length_days!r}"
            ) from exc
        if length <= 0:
            raise ValidationError(f"Cycle length must be positive, got {length}")

        baseline = CycleBaseline(
            last_period_start=day_of(last_period_start),
            cycle_length_days=length,
            setup_date=day_of(self._now(now)),
        )
        with self._transaction() as state:
            state.baseline = baseline
        logger.info(
            "Cycle baseline set: start=%s length=%d", baseline.last_period_start, length
        )
        return WELCOME_MESSAGE

    def status(self, now: datetime | None = None) -> CycleStatus:
        return self._calculator.status(
            day_of(self._now(now)), self._state.ledger, self._state.baseline
        )

    def snapshot(self, now: datetime | None = None) -> GardenSnapshot:
        """Build the read model for one presentation refresh."""
        today = day_of(self._now(now))
        status = self.status(now)
        info = phase_info(status.phase)
        plant = self._state.plant
        notice = None
        if not self.setup_required:
            notice = upcoming_period_notice(
                status.days_until_next, self._config.notifications.days_before_period
            )
        return GardenSnapshot(
            setup_required=self.setup_required,
            phase=status.phase,
            cycle_day=status.cycle_day,
            cycle_length=status.cycle_length,
            days_until_next=status.days_until_next,
            progress=status.progress,
            growth_level=plant.growth_level,
            care_streak=plant.care_streak,
            total_care_actions=plant.total_care_actions,
            has_active_period=self._state.ledger.has_active_period(today),
            plant_name=info.plant_name,
            plant_description=info.description,
            phase_display_name=info.display_name,
            garden_note=info.garden_note,
            notice=notice,
            mood_history=list(plant.mood_history),
            ledger=self._state.ledger.to_dict(),
        )

    # ------------------------------------------------------------------
    # Plant
    # ------------------------------------------------------------------

    def tick(self, now: datetime | None = None) -> float:
        """Run one growth tick.  Does nothing before setup.

        Returns:
            Growth added by this tick.
        """
        if self.setup_required:
            logger.debug("Growth tick skipped: cycle not set up")
            return 0.0
        now = self._now(now)
        phase = self.status(now).phase
        with self._transaction() as state:
            added = self._growth.advance(state.plant, now, phase)
        return added

    def record_care(self, action: CareAction | str, now: datetime | None = None) -> CareResult:
        self._require_setup()
        today = day_of(self._now(now))
        with self._transaction() as state:
            result = self._events.record_care(state.plant, action, today)
        return result

    def record_mood(self, mood: Mood | str, now: datetime | None = None) -> MoodResult:
        self._require_setup()
        now = self._now(now)
        phase = self.status(now).phase
        with self._transaction() as state:
            result = self._events.record_mood(state.plant, state.ledger, mood, day_of(now), phase)
        return result

    # ------------------------------------------------------------------
    # Period calendar
    # ------------------------------------------------------------------

    def save_entry(self, day: date, entry: PeriodEntry | dict[str, Any]) -> PeriodEntry:
        """Save a calendar entry, then reconcile gap days."""
        with self._transaction() as state:
            stored = state.ledger.upsert(day, entry)
            state.ledger.auto_fill_gaps()
        return stored

    def delete_entry(self, day: date) -> bool:
        with self._transaction() as state:
            removed = state.ledger.delete(day)
        return removed

    def _quick_log(self, day: date, period_type: PeriodType, flow_level: Any) -> PeriodEntry:
        existing = self._state.ledger.get(day) or PeriodEntry()
        return self.save_entry(
            day,
            PeriodEntry(
                flow_level=flow_level,
                period_type=period_type,
                symptoms=set(existing.symptoms),
                notes=existing.notes,
            ),
        )

    def log_period_start(self, day: date | None = None) -> PeriodEntry:
        """Quick-log a period starting on ``day`` (today by default)."""
        day = day_of(day) if day else self.today()
        logger.info("Period start logged for %s", day)
        return self._quick_log(day, PeriodType.start, self._config.ledger.quick_start_flow_level)

    def log_period_end(self, day: date | None = None) -> PeriodEntry:
        """Quick-log a period ending on ``day`` and fill the days in between."""
        day = day_of(day) if day else self.today()
        logger.info("Period end logged for %s", day)
        return self._quick_log(day, PeriodType.end, self._config.ledger.quick_end_flow_level)
