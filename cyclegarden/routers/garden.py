"""Garden endpoints: cycle setup, snapshot, care actions, moods and growth ticks."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from cyclegarden.dependencies import Engine, as_http_error
from cyclegarden.engine.errors import SetupRequiredError, ValidationError
from cyclegarden.models.garden import (
    CareActionCreate,
    CareResultRead,
    CycleSetupCreate,
    CycleSetupRead,
    GardenSnapshotRead,
    MoodCreate,
    MoodResultRead,
    TickRead,
)

router = APIRouter(prefix="/garden", tags=["garden"])


@router.get("", response_model=GardenSnapshotRead)
async def get_garden(engine: Engine) -> Any:
    return GardenSnapshotRead.from_snapshot(engine.snapshot())


@router.post("/setup", response_model=CycleSetupRead, status_code=201)
async def setup_cycle(engine: Engine, body: CycleSetupCreate) -> Any:
    try:
        message = engine.setup(body.last_period_start, body.cycle_length_days)
    except ValidationError as exc:
        raise as_http_error(exc) from exc
    return CycleSetupRead(
        message=message,
        last_period_start=body.last_period_start,
        cycle_length_days=body.cycle_length_days,
    )


@router.post("/care", response_model=CareResultRead)
async def record_care(engine: Engine, body: CareActionCreate) -> Any:
    try:
        result = engine.record_care(body.action)
    except (ValidationError, SetupRequiredError) as exc:
        raise as_http_error(exc) from exc
    plant = engine.state.plant
    return CareResultRead(
        accepted=result.accepted,
        action=result.action,
        message=result.message,
        growth_level=plant.growth_level,
        care_streak=plant.care_streak,
    )


@router.post("/mood", response_model=MoodResultRead)
async def record_mood(engine: Engine, body: MoodCreate) -> Any:
    try:
        result = engine.record_mood(body.mood)
    except (ValidationError, SetupRequiredError) as exc:
        raise as_http_error(exc) from exc
    return MoodResultRead(
        date=result.entry.date,
        mood=result.entry.mood,
        phase=result.entry.phase,
        message=result.message,
    )


@router.post("/tick", response_model=TickRead)
async def run_growth_tick(engine: Engine) -> Any:
    added = engine.tick()
    return TickRead(growth_added=added, growth_level=engine.state.plant.growth_level)
