"""Cycle day and phase derivation.

The cycle origin is the latest ``start`` day in the period ledger.  When the
ledger has none, the setup baseline is used and the day wraps modulo the
cycle length.  Cycle length itself is always the user's fixed setting.

Phases split the cycle by fixed proportions, each rounded up on its own::

    menstrual  = ceil(0.15 · L)
    follicular = ceil(0.35 · L)
    ovulation  = ceil(0.10 · L)
    luteal     = L − the three above

Rounding up three times means luteal can be shorter than 40% of a short
cycle.  This bias is kept as-is.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date

from cyclegarden.engine.base import CycleBaseline, Phase
from cyclegarden.engine.config_loader import GardenConfig, get_garden_config
from cyclegarden.engine.dates import day_of, days_between
from cyclegarden.engine.ledger import PeriodLedger

logger = logging.getLogger("cyclegarden.engine.phase")


@dataclass(frozen=True)
class CycleStatus:
    """Derived position within the current cycle.

    Attributes:
        cycle_day:       1-based day, always within [1, cycle_length].
        cycle_length:    Cycle length the day was computed against.
        phase:           Phase containing ``cycle_day``.
        days_until_next: Days until the next expected period starts.
    """

    cycle_day: int
    cycle_length: int
    phase: Phase
    days_until_next: int

    @property
    def progress(self) -> float:
        """Fraction of the cycle completed, 0.0–1.0."""
        return self.cycle_day / self.cycle_length


def phase_lengths(cycle_length: int, config: GardenConfig | None = None) -> dict[Phase, int]:
    """Return the number of days given to each phase for a cycle length."""
    proportions = (config or get_garden_config()).cycle.phase_proportions
    menstrual = math.ceil(cycle_length * proportions[Phase.menstrual])
    follicular = math.ceil(cycle_length * proportions[Phase.follicular])
    ovulation = math.ceil(cycle_length * proportions[Phase.ovulation])
    return {
        Phase.menstrual: menstrual,
        Phase.follicular: follicular,
        Phase.ovulation: ovulation,
        Phase.luteal: cycle_length - menstrual - follicular - ovulation,
    }


def phase_for_day(cycle_day: int, cycle_length: int, config: GardenConfig | None = None) -> Phase:
    """Return the phase containing ``cycle_day``.

    Boundaries are cumulative and include their upper day.
    """
    lengths = phase_lengths(cycle_length, config)
    boundary = 0
    for phase in (Phase.menstrual, Phase.follicular, Phase.ovulation):
        boundary += lengths[phase]
        if cycle_day <= boundary:
            return phase
    return Phase.luteal


def days_until_next_period(cycle_day: int, cycle_length: int) -> int:
    return cycle_length - cycle_day + 1


class CyclePhaseCalculator:
    """Compute cycle day, phase and countdown from the ledger and baseline.

    Usage::

        calc = CyclePhaseCalculator()
        status = calc.status(date.today(), ledger, baseline)
        print(status.cycle_day, status.phase)
    """

    def __init__(self, config: GardenConfig | None = None) -> None:
        self._config = config or get_garden_config()

    def cycle_length(self, baseline: CycleBaseline | None) -> int:
        """Return the user's cycle length, or the configured default without a baseline."""
        if baseline is None or baseline.cycle_length_days <= 0:
            return self._config.cycle.default_length_days
        return baseline.cycle_length_days

    def cycle_day(
        self,
        today: date,
        ledger: PeriodLedger,
        baseline: CycleBaseline | None,
    ) -> int:
        """Return the 1-based cycle day for ``today``.

        A recorded start in the ledger wins over the baseline.  Dates before
        the origin (clock skew, future-dated entries) give day 1, as does a
        missing baseline when the ledger has no start.
        """
        today = day_of(today)
        length = self.cycle_length(baseline)

        origin = ledger.last_start()
        if origin is not None:
            days_since = days_between(origin, today)
            if days_since < 0:
                logger.debug("Ledger start %s is after %s; clamping to day 1", origin, today)
                return 1
        elif baseline is not None and baseline.cycle_length_days > 0:
            days_since = days_between(baseline.last_period_start, today)
            if days_since < 0:
                logger.debug(
                    "Baseline start %s is after %s; clamping to day 1",
                    baseline.last_period_start,
                    today,
                )
                return 1
            days_since %= baseline.cycle_length_days
        else:
            return 1

        return min(max(days_since + 1, 1), length)

    def phase(self, cycle_day: int, cycle_length: int) -> Phase:
        return phase_for_day(cycle_day, cycle_length, self._config)

    def status(
        self,
        today: date,
        ledger: PeriodLedger,
        baseline: CycleBaseline | None,
    ) -> CycleStatus:
        """Return cycle day, length, phase and countdown in one go."""
        length = self.cycle_length(baseline)
        day = self.cycle_day(today, ledger, baseline)
        return CycleStatus(
            cycle_day=day,
            cycle_length=length,
            phase=self.phase(day, length),
            days_until_next=days_until_next_period(day, length),
        )
