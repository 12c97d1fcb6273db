"""JSON key-value store for the three garden records.

Each record lives in its own file under the data directory::

    <data_dir>/cycle_baseline.json
    <data_dir>/plant_state.json
    <data_dir>/period_ledger.json

A missing file loads as the documented default.  Writes go to a temp file
in the same directory and are moved into place with ``os.replace``, so a
crash mid-write never leaves a half-written record.  I/O errors propagate.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from cyclegarden.engine.base import CycleBaseline, PlantState
from cyclegarden.engine.config_loader import GardenConfig, get_garden_config
from cyclegarden.engine.garden import StateStore
from cyclegarden.engine.ledger import PeriodLedger

logger = logging.getLogger("cyclegarden.store")

BASELINE_KEY = "cycle_baseline"
PLANT_KEY = "plant_state"
LEDGER_KEY = "period_ledger"


class JsonGardenStore(StateStore):
    """File-backed store, one JSON document per record."""

    def __init__(self, data_dir: Path, config: GardenConfig | None = None) -> None:
        self._dir = Path(data_dir)
        self._config = config or get_garden_config()

    @property
    def data_dir(self) -> Path:
        return self._dir

    def _path(self, key: str) -> Path:
        return self._dir / f"{key}.json"

    def _read(self, key: str) -> Any | None:
        path = self._path(key)
        if not path.exists():
            return None
        with path.open("r", encoding="utf-8") as fh:
            return json.load(fh)

    def _write(self, key: str, payload: Any) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=self._dir)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(payload, fh, indent=2, ensure_ascii=False)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self._path(key))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Saved %s to %s", key, self._path(key))

    # ------------------------------------------------------------------
    # StateStore interface
    # ------------------------------------------------------------------

    def load_baseline(self) -> CycleBaseline | None:
        raw = self._read(BASELINE_KEY)
        if raw is None:
            logger.info("No cycle baseline in %s; setup required", self._dir)
            return None
        return CycleBaseline.from_dict(raw)

    def save_baseline(self, baseline: CycleBaseline) -> None:
        self._write(BASELINE_KEY, baseline.to_dict())

    def load_plant(self) -> PlantState:
        raw = self._read(PLANT_KEY)
        if raw is None:
            return PlantState(growth_level=self._config.plant.initial_growth_level)
        return PlantState.from_dict(raw)

    def save_plant(self, plant: PlantState) -> None:
        self._write(PLANT_KEY, plant.to_dict())

    def load_ledger(self) -> PeriodLedger:
        return PeriodLedger.from_dict(self._read(LEDGER_KEY), config=self._config)

    def save_ledger(self, ledger: PeriodLedger) -> None:
        self._write(LEDGER_KEY, ledger.to_dict())
