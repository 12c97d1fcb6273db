"""User-facing text for each phase, care action and mood.

Lookups by phase fall back to the menstrual text.  Care-action and mood
tables are keyed by closed enums, so an unknown key never gets this far.
"""

from __future__ import annotations

from dataclasses import dataclass

from cyclegarden.engine.base import CareAction, Mood, Phase


@dataclass(frozen=True)
class PhaseInfo:
    plant_name: str
    description: str
    display_name: str
    garden_note: str


PHASE_INFO: dict[Phase, PhaseInfo] = {
    Phase.menstrual: PhaseInfo(
        plant_name="Resting Willow",
        description=(
            "Your plant is resting and conserving energy, just like you during "
            "your menstrual phase."
        ),
        display_name="Menstrual Phase",
        garden_note=(
            "Your plant is resting during your menstrual phase. This is a time for "
            "gentle self-care and rest."
        ),
    ),
    Phase.follicular: PhaseInfo(
        plant_name="Growing Sprout",
        description="New growth is emerging as your plant prepares for a new cycle of growth.",
        display_name="Follicular Phase",
        garden_note=(
            "New growth is emerging! Your plant is preparing for a new cycle of "
            "growth and energy."
        ),
    ),
    Phase.ovulation: PhaseInfo(
        plant_name="Blooming Rose",
        description="Your plant is in full bloom, radiating energy and vitality.",
        display_name="Ovulation Phase",
        garden_note="Your plant is in full bloom! This is a time of peak energy and vitality.",
    ),
    Phase.luteal: PhaseInfo(
        plant_name="Fruitful Tree",
        description="Your plant is bearing fruit and preparing for the next cycle.",
        display_name="Luteal Phase",
        garden_note=(
            "Your plant is bearing fruit and preparing for the next cycle. A time of "
            "harvest and preparation."
        ),
    ),
}

CARE_MESSAGES: dict[CareAction, str] = {
    CareAction.hydration: "Your plant glows with hydration! 💧",
    CareAction.exercise: "Your plant grows stronger with your energy! 🏃",
    CareAction.meditation: "Your plant finds peace in your calm! 🧘",
    CareAction.rest: "Your plant rests peacefully with you! 😴",
}

ALREADY_CARED_MESSAGE = "You've already nurtured your plant today! Come back tomorrow."

MOOD_LABELS: dict[Mood, str] = {
    Mood.great: "Great 😊",
    Mood.good: "Good 🙂",
    Mood.okay: "Okay 😐",
    Mood.tired: "Tired 😴",
    Mood.crampy: "Crampy 😣",
}

MOOD_MESSAGES: dict[Mood, str] = {
    Mood.great: "Your plant radiates with your positive energy! ✨",
    Mood.good: "Your plant grows happily with your good mood! 🌱",
    Mood.okay: "Your plant understands and supports you! 🤗",
    Mood.tired: "Your plant rests gently with you! 😴",
    Mood.crampy: "Your plant sends you gentle healing energy! 💚",
}

UPCOMING_PERIOD_NOTICES: dict[int, str] = {
    3: "Your next period is approaching in 3 days. Your plant is preparing for rest.",
    1: "Your period starts tomorrow. Your plant is ready to rest with you.",
}

WELCOME_MESSAGE = "Welcome to your garden! Your plant is ready to grow with you."

MOOD_NOTE_PREFIX = "Mood:"


def phase_info(phase: Phase | str | None) -> PhaseInfo:
    return PHASE_INFO.get(Phase.parse(phase), PHASE_INFO[Phase.menstrual])


def mood_note(mood: Mood) -> str:
    """The ledger annotation line for a mood, e.g. ``Mood: Great 😊``."""
    return f"{MOOD_NOTE_PREFIX} {MOOD_LABELS[mood]}"


def upcoming_period_notice(days_until_next: int, thresholds: list[int]) -> str | None:
    """Return the notice for an exact countdown match, or None."""
    if days_until_next not in thresholds:
        return None
    return UPCOMING_PERIOD_NOTICES.get(
        days_until_next,
        f"Your next period is approaching in {days_until_next} days.",
    )
