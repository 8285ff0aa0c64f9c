"""
Configuration constants for the recovery and rest-timing engine.

All adjustable parameters are centralized here for easy tuning.
Values can be overridden from YAML, see core/config_loader.py.
"""

from dataclasses import dataclass
from typing import Final

# =============================================================================
# REST THRESHOLDS (per exercise category)
# =============================================================================


@dataclass(frozen=True)
class RestThresholds:
    """Rest targets for one exercise category, in seconds."""

    goal: float  # Rest considered sufficient from here on
    max_goal: float  # Rest considered excessive from here on

    def __post_init__(self) -> None:
        if self.goal < 0:
            raise ValueError("goal must be non-negative")
        if self.max_goal < self.goal:
            raise ValueError("max_goal must not be below goal")


REST_THRESHOLDS: Final[dict[str, RestThresholds]] = {
    "compound": RestThresholds(goal=180, max_goal=300),
    "isolation": RestThresholds(goal=90, max_goal=180),
}

DEFAULT_CATEGORY: Final[str] = "compound"  # Used when the category is absent/unknown

# Fraction of the goal where "early" turns into "approaching"
APPROACHING_FRACTION: Final[float] = 0.5

# =============================================================================
# REST ZONE STYLES (text, color)
# =============================================================================

ZONE_STYLES: Final[dict[str, tuple[str, str]]] = {
    "early": ("Keep resting", "#FF453A"),
    "approaching": ("Almost ready", "#FF9F0A"),
    "ready": ("Ready for next set", "#30D158"),
    "overdue": ("Rest is running long", "#BF5AF2"),
}

# =============================================================================
# RECOVERY DISPLAY BANDS
# =============================================================================

RECOVERY_READY_PCT: Final[float] = 90.0  # At or above: shown as ready
RECOVERY_RECOVERING_PCT: Final[float] = 50.0  # At or above: recovering, below: fatigued

RECOVERY_BAND_COLORS: Final[dict[str, str]] = {
    "ready": "#30D158",
    "recovering": "#FF9F0A",
    "fatigued": "#FF453A",
}

# =============================================================================
# MUSCLE GROUPS
# =============================================================================

CNS_NAME: Final[str] = "cns"

MUSCLE_REGIONS: Final[dict[str, list[str]]] = {
    "Upper Body": [
        "chest", "shoulders", "biceps", "triceps", "forearms",
        "lats", "traps", "lower_back", "neck",
    ],
    "Lower Body": ["quads", "hamstrings", "glutes", "calves", "abductors", "adductors"],
    "Core": ["abs", "obliques"],
}

DEFAULT_REGION: Final[str] = "Core"  # Muscles missing from the table land here

TOP_RECOVERING_LIMIT: Final[int] = 3
