"""Idle plant growth simulation.

Growth advances by elapsed wall-clock time rather than by a fixed step::

    rate  = base_rate + care_streak × streak_bonus      (bonus only if streak > 0)
    rate *= phase_modifier[phase]
    growth_level += rate × hours_since_last_update

Nothing happens until at least ``min_tick_hours`` (1 hour) have passed; the
full fractional elapsed time is then credited at once.  There is no decay
and no ceiling.  The engine never schedules itself; callers pass ``now``.
"""

from __future__ import annotations

import logging
from datetime import datetime

from cyclegarden.engine.base import Phase, PlantState
from cyclegarden.engine.config_loader import GardenConfig, get_garden_config

logger = logging.getLogger("cyclegarden.engine.growth")

_SECONDS_PER_HOUR = 3600.0


class GrowthEngine:
    """Advance a plant's growth level from elapsed time, phase and care streak."""

    def __init__(self, config: GardenConfig | None = None) -> None:
        self._config = config or get_garden_config()

    def growth_rate(self, care_streak: int, phase: Phase) -> float:
        """Growth per hour for a streak length and phase."""
        gc = self._config.growth
        rate = gc.base_rate_per_hour
        if care_streak > 0:
            rate += care_streak * gc.streak_bonus_per_day
        return rate * gc.phase_modifier(phase)

    def advance(self, plant: PlantState, now: datetime, phase: Phase) -> float:
        """Credit growth for the time since the last update.

        The first call on a plant that has never ticked only records ``now``
        as the starting point.

        Args:
            plant: Plant state, mutated in place.
            now:   Current wall-clock time.
            phase: Current cycle phase.

        Returns:
            The amount of growth added (0.0 when skipped).
        """
        if plant.last_growth_update is None:
            plant.last_growth_update = now
            logger.debug("Growth clock started at %s", now)
            return 0.0

        hours = (now - plant.last_growth_update).total_seconds() / _SECONDS_PER_HOUR
        if hours < self._config.growth.min_tick_hours:
            logger.debug("Only %.2f hour(s) since last growth update; skipping", hours)
            return 0.0

        added = self.growth_rate(plant.care_streak, phase) * hours
        plant.growth_level += added
        plant.last_growth_update = now
        logger.info(
            "Plant grew %.4f over %.1f hour(s) in %s phase (level %.3f)",
            added,
            hours,
            phase.value,
            plant.growth_level,
        )
        return added
