"""Cycle Garden engine.

Derives the menstrual-cycle phase from a period ledger and setup baseline,
and grows a virtual plant from that phase and the user's self-care streak.

Modules:
    base          — Enums and persisted records (baseline, entries, plant)
    dates         — Calendar-date arithmetic
    config_loader — Load/validate/hot-reload garden_config.yaml
    ledger        — Date-keyed period ledger with gap filling
    phase         — Cycle day and phase calculator
    growth        — Elapsed-time growth simulation
    events        — Daily care actions and mood logs
    content       — Phase, care and mood texts
    garden        — GardenEngine façade with save-after-mutate semantics
    ticker        — Hourly asyncio growth ticker
"""

from cyclegarden.engine.base import (
    CareAction,
    CycleBaseline,
    FlowLevel,
    Mood,
    PeriodEntry,
    PeriodType,
    Phase,
    PlantState,
)
from cyclegarden.engine.config_loader import GardenConfig, get_garden_config
from cyclegarden.engine.errors import (
    ExternalServiceError,
    GardenError,
    SetupRequiredError,
    ValidationError,
)
from cyclegarden.engine.garden import GardenEngine, GardenSnapshot, StateStore
from cyclegarden.engine.ledger import PeriodLedger

__all__ = [
    "CareAction",
    "CycleBaseline",
    "FlowLevel",
    "Mood",
    "PeriodEntry",
    "PeriodType",
    "Phase",
    "PlantState",
    "GardenConfig",
    "get_garden_config",
    "ExternalServiceError",
    "GardenError",
    "SetupRequiredError",
    "ValidationError",
    "GardenEngine",
    "GardenSnapshot",
    "StateStore",
    "PeriodLedger",
]
