"""Pydantic request/response models for the garden, calendar and chat routes."""

from __future__ import annotations

import datetime as dt

from pydantic import Field

from cyclegarden.engine.base import (
    CareAction,
    FlowLevel,
    Mood,
    MoodLogEntry,
    PeriodEntry,
    PeriodType,
    Phase,
)
from cyclegarden.engine.garden import GardenSnapshot
from cyclegarden.models.base import GardenBase


# ---------- Cycle setup ----------

class CycleSetupCreate(GardenBase):
    last_period_start: dt.date
    cycle_length_days: int = Field(gt=0, le=365)


class CycleSetupRead(GardenBase):
    message: str
    last_period_start: dt.date
    cycle_length_days: int


# ---------- Care / mood ----------

class CareActionCreate(GardenBase):
    action: CareAction


class CareResultRead(GardenBase):
    accepted: bool
    action: CareAction
    message: str
    growth_level: float
    care_streak: int


class MoodCreate(GardenBase):
    mood: Mood


class MoodLogRead(GardenBase):
    date: dt.date
    mood: Mood
    phase: Phase

    @classmethod
    def from_entry(cls, entry: MoodLogEntry) -> MoodLogRead:
        return cls(date=entry.date, mood=entry.mood, phase=entry.phase)


class MoodResultRead(MoodLogRead):
    message: str


class TickRead(GardenBase):
    growth_added: float
    growth_level: float


# ---------- Calendar ----------

class PeriodEntryWrite(GardenBase):
    flow_level: FlowLevel = FlowLevel.none
    period_type: PeriodType = PeriodType.none
    symptoms: list[str] = Field(default_factory=list)
    notes: str = ""

    def to_entry(self) -> PeriodEntry:
        return PeriodEntry.build(
            flow_level=self.flow_level,
            period_type=self.period_type,
            symptoms=self.symptoms,
            notes=self.notes,
        )


class PeriodEntryRead(GardenBase):
    date: dt.date
    flow_level: FlowLevel
    period_type: PeriodType
    symptoms: list[str]
    notes: str

    @classmethod
    def from_entry(cls, day: dt.date, entry: PeriodEntry) -> PeriodEntryRead:
        return cls(
            date=day,
            flow_level=entry.flow_level,
            period_type=entry.period_type,
            symptoms=sorted(entry.symptoms),
            notes=entry.notes,
        )


class QuickLogCreate(GardenBase):
    date: dt.date | None = None  # today when omitted


class CalendarMonthRead(GardenBase):
    year: int
    month: int
    entries: list[PeriodEntryRead]


# ---------- Garden snapshot ----------

class GardenSnapshotRead(GardenBase):
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
    mood_history: list[MoodLogRead]
    ledger: dict[str, dict]

    @classmethod
    def from_snapshot(cls, snapshot: GardenSnapshot) -> GardenSnapshotRead:
        return cls(
            setup_required=snapshot.setup_required,
            phase=snapshot.phase,
            cycle_day=snapshot.cycle_day,
            cycle_length=snapshot.cycle_length,
            days_until_next=snapshot.days_until_next,
            progress=snapshot.progress,
            growth_level=snapshot.growth_level,
            care_streak=snapshot.care_streak,
            total_care_actions=snapshot.total_care_actions,
            has_active_period=snapshot.has_active_period,
            plant_name=snapshot.plant_name,
            plant_description=snapshot.plant_description,
            phase_display_name=snapshot.phase_display_name,
            garden_note=snapshot.garden_note,
            notice=snapshot.notice,
            mood_history=[MoodLogRead.from_entry(m) for m in snapshot.mood_history],
            ledger=snapshot.ledger,
        )


# ---------- Chat ----------

class ChatMessageCreate(GardenBase):
    message: str = Field(min_length=1, max_length=2000)


class ChatReplyRead(GardenBase):
    reply: str
    fallback: bool
    phase: Phase
    cycle_day: int
