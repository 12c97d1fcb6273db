"""Self-care and mood event processing.

Care actions count at most once per calendar day, whichever of the four
kinds is used.  A care action on the day right after the previous one
extends the streak; any longer gap restarts it at 1.  "Right after" is
calendar-date adjacency, so DST shifts and time-of-day never break a streak.

Moods are last-write-wins per day and are mirrored into that day's ledger
notes as a single ``Mood: …`` line.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from cyclegarden.engine.base import (
    CareAction,
    Mood,
    MoodLogEntry,
    PeriodEntry,
    Phase,
    PlantState,
    coerce_enum,
)
from cyclegarden.engine.config_loader import GardenConfig, get_garden_config
from cyclegarden.engine.content import (
    ALREADY_CARED_MESSAGE,
    CARE_MESSAGES,
    MOOD_MESSAGES,
    MOOD_NOTE_PREFIX,
    mood_note,
)
from cyclegarden.engine.dates import day_of, is_next_day
from cyclegarden.engine.ledger import PeriodLedger

logger = logging.getLogger("cyclegarden.engine.events")


@dataclass(frozen=True)
class CareResult:
    """Outcome of a care action.

    Attributes:
        accepted: False if a care action was already counted today.
        action:   The action requested.
        message:  Text to show the user (info when rejected).
    """

    accepted: bool
    action: CareAction
    message: str


@dataclass(frozen=True)
class MoodResult:
    entry: MoodLogEntry
    message: str


def _replace_mood_line(notes: str, line: str) -> str:
    kept = [
        existing
        for existing in notes.splitlines()
        if not existing.strip().startswith(MOOD_NOTE_PREFIX)
    ]
    kept.append(line)
    return "\n".join(kept)


class CareMoodProcessor:
    """Validate and record daily care actions and mood logs."""

    def __init__(self, config: GardenConfig | None = None) -> None:
        self._config = config or get_garden_config()

    def record_care(
        self, plant: PlantState, action: CareAction | str, today: date
    ) -> CareResult:
        """Count a care action for ``today``.

        Args:
            plant:  Plant state, mutated in place when accepted.
            action: One of the four care action kinds.
            today:  The user's current calendar date.

        Returns:
            CareResult; ``accepted`` is False when today was already counted.

        Raises:
            ValidationError: If ``action`` is not a known care action.
        """
        action = coerce_enum(CareAction, action, "care action")
        today = day_of(today)

        if plant.last_care_date == today:
            logger.debug("Care already recorded on %s; ignoring %s", today, action.value)
            return CareResult(accepted=False, action=action, message=ALREADY_CARED_MESSAGE)

        if is_next_day(plant.last_care_date, today):
            plant.care_streak += 1
        else:
            plant.care_streak = 1

        plant.last_care_date = today
        plant.total_care_actions += 1
        plant.growth_level += self._config.growth.care_boost

        logger.info(
            "Recorded %s care on %s (streak=%d, total=%d)",
            action.value,
            today,
            plant.care_streak,
            plant.total_care_actions,
        )
        return CareResult(accepted=True, action=action, message=CARE_MESSAGES[action])

    def record_mood(
        self,
        plant: PlantState,
        ledger: PeriodLedger,
        mood: Mood | str,
        today: date,
        phase: Phase,
    ) -> MoodResult:
        """Log ``mood`` for ``today`` and annotate the ledger entry.

        Replaces any mood already logged today, both in the mood history and
        in the ledger notes.

        Raises:
            ValidationError: If ``mood`` is not a known mood.
        """
        mood = coerce_enum(Mood, mood, "mood")
        today = day_of(today)

        entry = MoodLogEntry(date=today, mood=mood, phase=Phase.parse(phase))
        plant.mood_history = [m for m in plant.mood_history if m.date != today]
        plant.mood_history.append(entry)

        existing = ledger.get(today) or PeriodEntry()
        ledger.upsert(
            today,
            PeriodEntry(
                flow_level=existing.flow_level,
                period_type=existing.period_type,
                symptoms=set(existing.symptoms),
                notes=_replace_mood_line(existing.notes, mood_note(mood)),
            ),
        )

        logger.info("Logged mood %s on %s during %s phase", mood.value, today, entry.phase.value)
        return MoodResult(entry=entry, message=MOOD_MESSAGES[mood])
