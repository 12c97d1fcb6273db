"""Period calendar endpoints: month view, per-day entries and quick logging."""

from __future__ import annotations

from datetime import date
from typing import Any

from fastapi import APIRouter, HTTPException, Path

from cyclegarden.dependencies import Engine, as_http_error
from cyclegarden.engine.errors import ValidationError
from cyclegarden.models.garden import (
    CalendarMonthRead,
    PeriodEntryRead,
    PeriodEntryWrite,
    QuickLogCreate,
)

router = APIRouter(prefix="/calendar", tags=["calendar"])


@router.get("/entries/{day}", response_model=PeriodEntryRead)
async def get_entry(day: date, engine: Engine) -> Any:
    entry = engine.state.ledger.get(day)
    if entry is None:
        raise HTTPException(status_code=404, detail="No entry for this date")
    return PeriodEntryRead.from_entry(day, entry)


@router.put("/entries/{day}", response_model=PeriodEntryRead)
async def save_entry(day: date, engine: Engine, body: PeriodEntryWrite) -> Any:
    try:
        stored = engine.save_entry(day, body.to_entry())
    except ValidationError as exc:
        raise as_http_error(exc) from exc
    return PeriodEntryRead.from_entry(day, stored)


@router.delete("/entries/{day}", status_code=204)
async def delete_entry(day: date, engine: Engine) -> None:
    # Deleting a date with no entry is not an error.
    engine.delete_entry(day)


@router.post("/period-start", response_model=PeriodEntryRead)
async def log_period_start(engine: Engine, body: QuickLogCreate | None = None) -> Any:
    day = (body.date if body else None) or engine.today()
    stored = engine.log_period_start(day)
    return PeriodEntryRead.from_entry(day, stored)


@router.post("/period-end", response_model=PeriodEntryRead)
async def log_period_end(engine: Engine, body: QuickLogCreate | None = None) -> Any:
    day = (body.date if body else None) or engine.today()
    stored = engine.log_period_end(day)
    return PeriodEntryRead.from_entry(day, stored)


# Registered last so "/entries/..." is never captured as a year/month pair.
@router.get("/{year}/{month}", response_model=CalendarMonthRead)
async def get_month(
    engine: Engine,
    year: int = Path(ge=1900, le=9999),
    month: int = Path(ge=1, le=12),
) -> Any:
    try:
        entries = engine.state.ledger.month_entries(year, month)
    except ValidationError as exc:
        raise as_http_error(exc) from exc
    return CalendarMonthRead(
        year=year,
        month=month,
        entries=[PeriodEntryRead.from_entry(d, e) for d, e in entries],
    )
