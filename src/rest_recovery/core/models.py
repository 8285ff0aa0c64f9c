"""
Data models for rest-recovery.

Value objects for fatigue sources, recovery snapshots and rest timer state.
All timestamps are timezone-aware UTC datetimes; the io layer normalizes
raw payload fields before any of these are constructed.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Union

from .config import CNS_NAME

ExerciseCategory = Literal["compound", "isolation"]
RestZone = Literal["early", "approaching", "ready", "overdue"]
RecoveryBand = Literal["ready", "recovering", "fatigued"]


@dataclass(frozen=True)
class FatigueSource:
    """
    One source of fatigue: a muscle group or the CNS.

    fatigue_or_load is opaque to the engine (higher means more rest needed)
    and may be None when the upstream value was missing or malformed.
    """

    name: str
    recovery_hours: float
    source_timestamp: datetime | None = None
    fatigue_or_load: float | None = None
    total_sets: int | None = None  # muscle groups only, informational
    source_workout_id: int | None = None  # back-reference, not ownership

    def __post_init__(self) -> None:
        """Validate source data."""
        if self.recovery_hours < 0:
            raise ValueError("recovery_hours must be non-negative")
        if self.source_timestamp is not None and self.source_timestamp.tzinfo is None:
            raise ValueError("source_timestamp must be timezone-aware")

    @property
    def is_cns(self) -> bool:
        return self.name == CNS_NAME


@dataclass(frozen=True)
class RecoverySnapshot:
    """
    Recovery estimate for one fatigue source at one instant.

    Derived on every read; never stored. Values are unrounded.
    """

    recovery_until: datetime | None
    is_recovered: bool
    hours_until_recovery: float
    recovery_percentage: float


@dataclass(frozen=True)
class RecoveryStatus:
    """Recovery snapshots for every tracked muscle group plus the optional CNS slot."""

    per_muscle: dict[str, RecoverySnapshot] = field(default_factory=dict)
    cns: RecoverySnapshot | None = None  # None when CNS tracking is not available


@dataclass(frozen=True)
class RecoverySummary:
    """Counts and mean percentage over all muscle groups."""

    total: int
    recovered: int
    recovering: int
    average_percentage: float
    ready: int = 0  # recovered or at least the ready percentage


@dataclass(frozen=True)
class RestStatus:
    """Rest zone with its display text/color and the thresholds used."""

    zone: RestZone
    text: str
    color: str
    goal: float
    max_goal: float


# -----------------------------------------------------------------------------
# Rest timer states
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class TimerIdle:
    """No active rest interval."""


@dataclass(frozen=True)
class TimerRunning:
    """
    Counting up.

    anchor is a virtual start time: elapsed = now - anchor. It equals
    last_set_timestamp until the timer has been paused, after which it is
    shifted forward by the total paused duration.
    """

    last_set_timestamp: datetime
    category: str | None
    anchor: datetime


@dataclass(frozen=True)
class TimerPaused:
    """Frozen at frozen_elapsed seconds."""

    last_set_timestamp: datetime
    category: str | None
    frozen_elapsed: float

    def __post_init__(self) -> None:
        if self.frozen_elapsed < 0:
            raise ValueError("frozen_elapsed must be non-negative")


RestTimerState = Union[TimerIdle, TimerRunning, TimerPaused]


@dataclass(frozen=True)
class RestTimerSnapshot:
    """Read-only view of a rest timer at one instant."""

    last_set_timestamp: datetime | None
    last_exercise_category: str | None
    elapsed_seconds: float
    is_paused: bool
    rest_status: RestStatus
