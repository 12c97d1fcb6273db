"""Load, validate, and hot-reload the Cycle Garden engine configuration.

The config lives in ``garden_config.yaml`` alongside this module.  At startup
it is loaded once and cached.  Call ``reload_garden_config()`` to re-read from
disk after editing the file without a restart.

Usage::

    from cyclegarden.engine.config_loader import get_garden_config

    config = get_garden_config()
    modifier = config.growth.phase_modifier(Phase.ovulation)   # 1.5
    lookback = config.ledger.active_period_lookback_days       # 10
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from cyclegarden.engine.base import FlowLevel, Phase

logger = logging.getLogger("cyclegarden.engine.config")

# Path to the YAML file sitting next to this module
_CONFIG_PATH = Path(__file__).parent / "garden_config.yaml"


# ---------------------------------------------------------------------------
# Typed config sections
# ---------------------------------------------------------------------------


@dataclass
class CycleConfig:
    """Cycle length fallback and phase partition proportions."""

    default_length_days: int
    phase_proportions: dict[Phase, float]


@dataclass
class GrowthConfig:
    """Idle growth and care boost constants."""

    base_rate_per_hour: float
    streak_bonus_per_day: float
    min_tick_hours: float
    care_boost: float
    phase_modifiers: dict[Phase, float]

    def phase_modifier(self, phase: Phase) -> float:
        """Return the growth multiplier for a phase (menstrual's for unknown phases)."""
        return self.phase_modifiers.get(
            Phase.parse(phase), self.phase_modifiers[Phase.menstrual]
        )


@dataclass
class LedgerConfig:
    """Period ledger policy constants."""

    active_period_lookback_days: int
    auto_fill_flow_level: FlowLevel
    auto_fill_notes: str
    quick_start_flow_level: FlowLevel
    quick_end_flow_level: FlowLevel


@dataclass
class NotificationConfig:
    """Upcoming-period notice thresholds (exact matches, not ranges)."""

    days_before_period: list[int]


@dataclass
class PlantConfig:
    """Defaults for a freshly created plant."""

    initial_growth_level: float


@dataclass
class GardenConfig:
    """Complete, validated engine configuration.

    This is the single in-memory representation of garden_config.yaml.
    The phase calculator, growth engine, ledger and event processor all
    read from this object.

    Attributes:
        version:       Config schema version string.
        cycle:         Default cycle length and phase proportions.
        growth:        Growth simulation constants.
        ledger:        Ledger heuristics and synthetic-entry defaults.
        notifications: Upcoming-period notice thresholds.
        plant:         New plant defaults.
    """

    version: str
    cycle: CycleConfig
    growth: GrowthConfig
    ledger: LedgerConfig
    notifications: NotificationConfig
    plant: PlantConfig
    _raw: dict = field(default_factory=dict, repr=False)


# ---------------------------------------------------------------------------
# Loader / validation
# ---------------------------------------------------------------------------


class ConfigValidationError(ValueError):
    """Raised when garden_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed dict.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Garden config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            return yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc


def _validate_and_build(raw: dict) -> GardenConfig:
    """Validate the raw YAML dict and construct a GardenConfig.

    Performs structural validation and applies defaults for optional fields.
    All problems are collected and reported together.

    Args:
        raw: Parsed YAML dict.

    Returns:
        Validated GardenConfig instance.

    Raises:
        ConfigValidationError: If any value is missing or invalid.
    """
    errors: list[str] = []

    def _number(section: dict, key: str, default: float, path: str) -> float:
        value = section.get(key, default)
        try:
            return float(value)
        except (TypeError, ValueError):
            errors.append(f"{path}.{key} must be a number, got {value!r}")
            return float(default)

    def _flow(value: Any, path: str, default: FlowLevel) -> FlowLevel:
        try:
            return FlowLevel(value)
        except ValueError:
            errors.append(f"{path} must be a flow level, got {value!r}")
            return default

    version = str(raw.get("version", "1.0"))

    # ── Cycle ──
    cycle_raw = raw.get("cycle", {}) or {}
    default_length = int(_number(cycle_raw, "default_length_days", 28, "cycle"))
    if default_length <= 0:
        errors.append(f"cycle.default_length_days must be > 0, got {default_length}")

    proportions_raw = cycle_raw.get("phase_proportions", {}) or {}
    proportions: dict[Phase, float] = {}
    for phase, default in (
        (Phase.menstrual, 0.15),
        (Phase.follicular, 0.35),
        (Phase.ovulation, 0.10),
    ):
        share = _number(proportions_raw, phase.value, default, "cycle.phase_proportions")
        if not (0.0 < share < 1.0):
            errors.append(
                f"cycle.phase_proportions.{phase.value} = {share} is out of range (0.0, 1.0)"
            )
        proportions[phase] = share
    unknown = set(proportions_raw) - {p.value for p in proportions}
    if unknown:
        errors.append(
            f"cycle.phase_proportions has unknown phases {sorted(unknown)}; "
            "luteal always takes the remainder"
        )
    if sum(proportions.values()) >= 1.0:
        errors.append("cycle.phase_proportions must sum to less than 1.0")

    # ── Growth ──
    growth_raw = raw.get("growth", {}) or {}
    modifiers_raw = growth_raw.get("phase_modifiers", {}) or {}
    modifiers: dict[Phase, float] = {}
    for phase, default in (
        (Phase.menstrual, 0.5),
        (Phase.follicular, 1.2),
        (Phase.ovulation, 1.5),
        (Phase.luteal, 1.0),
    ):
        modifier = _number(modifiers_raw, phase.value, default, "growth.phase_modifiers")
        if modifier < 0.0:
            errors.append(f"growth.phase_modifiers.{phase.value} must be >= 0, got {modifier}")
        modifiers[phase] = modifier

    growth = GrowthConfig(
        base_rate_per_hour=_number(growth_raw, "base_rate_per_hour", 0.01, "growth"),
        streak_bonus_per_day=_number(growth_raw, "streak_bonus_per_day", 0.005, "growth"),
        min_tick_hours=_number(growth_raw, "min_tick_hours", 1.0, "growth"),
        care_boost=_number(growth_raw, "care_boost", 0.1, "growth"),
        phase_modifiers=modifiers,
    )
    if growth.base_rate_per_hour < 0 or growth.streak_bonus_per_day < 0 or growth.care_boost < 0:
        errors.append("growth rates and boosts must be >= 0 (growth never decreases)")

    # ── Ledger ──
    ledger_raw = raw.get("ledger", {}) or {}
    fill_raw = ledger_raw.get("auto_fill", {}) or {}
    quick_raw = ledger_raw.get("quick_log", {}) or {}
    ledger = LedgerConfig(
        active_period_lookback_days=int(
            _number(ledger_raw, "active_period_lookback_days", 10, "ledger")
        ),
        auto_fill_flow_level=_flow(
            fill_raw.get("flow_level", "medium"), "ledger.auto_fill.flow_level", FlowLevel.medium
        ),
        auto_fill_notes=str(fill_raw.get("notes", "auto-filled")),
        quick_start_flow_level=_flow(
            quick_raw.get("start_flow_level", "medium"),
            "ledger.quick_log.start_flow_level",
            FlowLevel.medium,
        ),
        quick_end_flow_level=_flow(
            quick_raw.get("end_flow_level", "light"),
            "ledger.quick_log.end_flow_level",
            FlowLevel.light,
        ),
    )
    if ledger.active_period_lookback_days < 1:
        errors.append("ledger.active_period_lookback_days must be >= 1")

    # ── Notifications ──
    notif_raw = raw.get("notifications", {}) or {}
    days_before: list[int] = []
    for value in notif_raw.get("days_before_period", [3, 1]) or []:
        try:
            days_before.append(int(value))
        except (TypeError, ValueError):
            errors.append(f"notifications.days_before_period entries must be ints, got {value!r}")
    notifications = NotificationConfig(days_before_period=days_before)

    # ── Plant ──
    plant_raw = raw.get("plant", {}) or {}
    plant = PlantConfig(
        initial_growth_level=_number(plant_raw, "initial_growth_level", 1.0, "plant"),
    )
    if plant.initial_growth_level < 0:
        errors.append("plant.initial_growth_level must be >= 0")

    if errors:
        raise ConfigValidationError(
            f"garden_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return GardenConfig(
        version=version,
        cycle=CycleConfig(default_length_days=default_length, phase_proportions=proportions),
        growth=growth,
        ledger=ledger,
        notifications=notifications,
        plant=plant,
        _raw=raw,
    )


def load_garden_config(path: Path | None = None) -> GardenConfig:
    """Load and validate the garden config from disk.

    Args:
        path: Override path to YAML. Uses the bundled garden_config.yaml by default.

    Returns:
        Validated GardenConfig instance.
    """
    target = path or _CONFIG_PATH
    raw = _load_yaml(target)
    config = _validate_and_build(raw)
    logger.info("Loaded garden config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_config: GardenConfig | None = None
_config_lock = threading.Lock()


def get_garden_config() -> GardenConfig:
    """Return the global GardenConfig singleton, loading it on first call.

    Thread-safe.  Use ``reload_garden_config()`` to refresh after YAML changes.
    """
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:  # double-checked locking
                _config = load_garden_config()
    return _config


def reload_garden_config(path: Path | None = None) -> GardenConfig:
    """Reload the garden config from disk and replace the global singleton.

    If validation fails, the old config is retained and the error is re-raised.

    Args:
        path: Override path to YAML. Defaults to bundled garden_config.yaml.

    Returns:
        The newly loaded GardenConfig.

    Raises:
        ConfigValidationError: If the new config is invalid.
        FileNotFoundError:     If the config file is missing.
    """
    global _config
    new_config = load_garden_config(path)  # validate before acquiring lock
    with _config_lock:
        old_version = _config.version if _config else "none"
        _config = new_config
    logger.info("Reloaded garden config: %s → %s", old_version, new_config.version)
    return new_config
