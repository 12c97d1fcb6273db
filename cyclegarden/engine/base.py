"""Enumerations and canonical state records for the Cycle Garden engine.

These are the three persisted records (``CycleBaseline``, ``PlantState`` and
the entries of the period ledger) plus the closed enums every engine module
dispatches on.  Each record converts to and from a plain JSON-compatible
dict so the key-value store never needs to know about engine types.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any

from cyclegarden.engine.dates import parse_date_key
from cyclegarden.engine.errors import ValidationError

logger = logging.getLogger("cyclegarden.engine")


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Phase(str, Enum):
    menstrual = "menstrual"
    follicular = "follicular"
    ovulation = "ovulation"
    luteal = "luteal"

    @classmethod
    def parse(cls, value: str | Phase | None) -> Phase:
        """Return the matching phase, falling back to menstrual for unknown keys."""
        try:
            return cls(value)
        except ValueError:
            logger.debug("Unknown phase %r, defaulting to menstrual", value)
            return cls.menstrual


class FlowLevel(str, Enum):
    none = "none"
    light = "light"
    medium = "medium"
    heavy = "heavy"


class PeriodType(str, Enum):
    start = "start"
    continue_ = "continue"
    end = "end"
    none = "none"


class CareAction(str, Enum):
    hydration = "hydration"
    exercise = "exercise"
    meditation = "meditation"
    rest = "rest"


class Mood(str, Enum):
    great = "great"
    good = "good"
    okay = "okay"
    tired = "tired"
    crampy = "crampy"


def coerce_enum(enum_cls: type[Enum], value: Any, field_name: str) -> Any:
    """Convert ``value`` to ``enum_cls`` or raise a ValidationError.

    Unlike ``Phase.parse`` this never falls back to a default.
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError as exc:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(
            f"Invalid {field_name} {value!r}; expected one of: {allowed}"
        ) from exc


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CycleBaseline:
    """User-supplied fallback cycle origin, written once at setup.

    Attributes:
        last_period_start: First day of the most recent period at setup time.
        cycle_length_days: Fixed cycle length, always > 0.
        setup_date:        Day the setup form was submitted.
    """

    last_period_start: date
    cycle_length_days: int
    setup_date: date

    def to_dict(self) -> dict:
        return {
            "last_period_start": self.last_period_start.isoformat(),
            "cycle_length_days": self.cycle_length_days,
            "setup_date": self.setup_date.isoformat(),
        }

    @classmethod
    def from_dict(cls, raw: dict) -> CycleBaseline:
        return cls(
            last_period_start=parse_date_key(raw["last_period_start"]),
            cycle_length_days=int(raw["cycle_length_days"]),
            setup_date=parse_date_key(raw["setup_date"]),
        )


@dataclass
class PeriodEntry:
    """One calendar day in the period ledger.

    Attributes:
        flow_level:  Flow intensity logged for the day.
        period_type: Whether the day starts, continues or ends a period.
        symptoms:    Free-form symptom tags.
        notes:       Free text; may hold a single ``Mood: …`` line.
    """

    flow_level: FlowLevel = FlowLevel.none
    period_type: PeriodType = PeriodType.none
    symptoms: set[str] = field(default_factory=set)
    notes: str = ""

    @classmethod
    def build(
        cls,
        flow_level: Any = FlowLevel.none,
        period_type: Any = PeriodType.none,
        symptoms: Any = None,
        notes: str | None = None,
    ) -> PeriodEntry:
        """Build an entry from loosely-typed input, validating enumerated fields.

        Raises:
            ValidationError: If ``flow_level`` or ``period_type`` is not a known value.
        """
        return cls(
            flow_level=coerce_enum(FlowLevel, flow_level, "flow level"),
            period_type=coerce_enum(PeriodType, period_type, "period type"),
            symptoms={str(s) for s in (symptoms or ())},
            notes=notes or "",
        )

    def to_dict(self) -> dict:
        return {
            "flow_level": self.flow_level.value,
            "period_type": self.period_type.value,
            "symptoms": sorted(self.symptoms),
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, raw: dict) -> PeriodEntry:
        return cls.build(
            flow_level=raw.get("flow_level", FlowLevel.none.value),
            period_type=raw.get("period_type", PeriodType.none.value),
            symptoms=raw.get("symptoms"),
            notes=raw.get("notes"),
        )


@dataclass(frozen=True)
class MoodLogEntry:
    """A mood logged on a given day, tagged with the phase at logging time."""

    date: date
    mood: Mood
    phase: Phase

    def to_dict(self) -> dict:
        return {"date": self.date.isoformat(), "mood": self.mood.value, "phase": self.phase.value}

    @classmethod
    def from_dict(cls, raw: dict) -> MoodLogEntry:
        return cls(
            date=parse_date_key(raw["date"]),
            mood=coerce_enum(Mood, raw["mood"], "mood"),
            phase=Phase.parse(raw.get("phase")),
        )


@dataclass
class PlantState:
    """Gamified plant progress.  Persists across sessions and is never reset.

    Attributes:
        growth_level:       Continuous growth scalar, never decreases.
        care_streak:        Consecutive calendar days with a care action.
        last_care_date:     Day of the most recent counted care action.
        total_care_actions: Lifetime count of counted care actions.
        last_growth_update: Wall-clock time of the last growth tick.
        mood_history:       Mood logs, at most one per day, in logging order.
    """

    growth_level: float = 1.0
    care_streak: int = 0
    last_care_date: date | None = None
    total_care_actions: int = 0
    last_growth_update: datetime | None = None
    mood_history: list[MoodLogEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "growth_level": self.growth_level,
            "care_streak": self.care_streak,
            "last_care_date": self.last_care_date.isoformat() if self.last_care_date else None,
            "total_care_actions": self.total_care_actions,
            "last_growth_update": (
                self.last_growth_update.isoformat() if self.last_growth_update else None
            ),
            "mood_history": [m.to_dict() for m in self.mood_history],
        }

    @classmethod
    def from_dict(cls, raw: dict) -> PlantState:
        last_care = raw.get("last_care_date")
        last_growth = raw.get("last_growth_update")
        return cls(
            growth_level=float(raw.get("growth_level", 1.0)),
            care_streak=int(raw.get("care_streak", 0)),
            last_care_date=parse_date_key(last_care) if last_care else None,
            total_care_actions=int(raw.get("total_care_actions", 0)),
            last_growth_update=datetime.fromisoformat(last_growth) if last_growth else None,
            mood_history=[MoodLogEntry.from_dict(m) for m in raw.get("mood_history", [])],
        )
