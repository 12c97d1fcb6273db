"""Shared fixtures for the Cycle Garden engine tests."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from pathlib import Path

import pytest

from cyclegarden.engine.base import CycleBaseline, PeriodEntry, PlantState
from cyclegarden.engine.config_loader import GardenConfig, load_garden_config
from cyclegarden.engine.garden import GardenEngine
from cyclegarden.engine.ledger import PeriodLedger
from cyclegarden.services.store import JsonGardenStore

# Canonical test dates
TEST_DATE = date(2026, 2, 23)
TEST_NOW = datetime(2026, 2, 23, 9, 0, 0)
DAY_0 = date(2026, 1, 5)


def days(n: int) -> timedelta:
    return timedelta(days=n)


def start_entry() -> PeriodEntry:
    return PeriodEntry.build(flow_level="heavy", period_type="start")


def end_entry() -> PeriodEntry:
    return PeriodEntry.build(flow_level="light", period_type="end")


# ---------------------------------------------------------------------------
# Config / records
# ---------------------------------------------------------------------------


@pytest.fixture
def garden_config() -> GardenConfig:
    """Load the real bundled garden config for tests."""
    return load_garden_config()


@pytest.fixture
def ledger(garden_config: GardenConfig) -> PeriodLedger:
    return PeriodLedger(config=garden_config)


@pytest.fixture
def baseline() -> CycleBaseline:
    """A 28-day cycle that started on DAY_0."""
    return CycleBaseline(last_period_start=DAY_0, cycle_length_days=28, setup_date=DAY_0)


@pytest.fixture
def plant() -> PlantState:
    return PlantState()


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


@pytest.fixture
def store(tmp_path: Path, garden_config: GardenConfig) -> JsonGardenStore:
    return JsonGardenStore(tmp_path / "data", config=garden_config)


@pytest.fixture
def engine(store: JsonGardenStore, garden_config: GardenConfig) -> GardenEngine:
    """A fresh engine (setup not yet run) with a fixed clock."""
    return GardenEngine(store, config=garden_config, clock=lambda: TEST_NOW)


@pytest.fixture
def ready_engine(engine: GardenEngine) -> GardenEngine:
    """An engine whose 28-day cycle started on 2026-02-10 (day 14 at TEST_NOW)."""
    engine.setup(date(2026, 2, 10), 28)
    return engine
