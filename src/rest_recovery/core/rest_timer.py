"""
Rest timer between sets.

States (see models.py):

    Idle --start--> Running --pause--> Paused --resume--> Running
      ^                |                  |
      +------stop------+-------stop-------+

Elapsed time is always derived from absolute timestamps so display ticks
can be skipped. Pausing freezes the elapsed value; resuming rebases the
running anchor so that now - anchor == frozen elapsed.
"""

import logging
from datetime import datetime, timedelta, timezone

from .config import (
    APPROACHING_FRACTION,
    DEFAULT_CATEGORY,
    REST_THRESHOLDS,
    ZONE_STYLES,
    RestThresholds,
)
from .models import (
    RestStatus,
    RestTimerSnapshot,
    RestTimerState,
    RestZone,
    TimerIdle,
    TimerPaused,
    TimerRunning,
)

logger = logging.getLogger(__name__)

_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def _anchor_for(now: datetime, elapsed: float) -> datetime:
    """Running anchor such that now - anchor == elapsed, saturating at datetime.min."""
    try:
        return now - timedelta(seconds=elapsed)
    except OverflowError:
        return _EARLIEST


def classify_rest_zone(elapsed: float, goal: float, max_goal: float) -> RestZone:
    """
    Classify elapsed rest into a zone.

    elapsed <  goal * 0.5          -> "early"
    goal * 0.5 <= elapsed < goal   -> "approaching"
    goal <= elapsed < max_goal     -> "ready"
    elapsed >= max_goal            -> "overdue"

    The bands are checked from the top so the function is total even for
    degenerate thresholds (e.g. goal == max_goal).
    """
    if elapsed >= max_goal:
        return "overdue"
    if elapsed >= goal:
        return "ready"
    if elapsed >= goal * APPROACHING_FRACTION:
        return "approaching"
    return "early"


def thresholds_for(
    category: str | None,
    thresholds: dict[str, RestThresholds] | None = None,
) -> RestThresholds:
    """Look up rest thresholds for a category, falling back to the default category."""
    table = REST_THRESHOLDS if thresholds is None else thresholds
    if category is not None and category in table:
        return table[category]
    if category is not None:
        logger.warning("Unknown exercise category %r, using %r thresholds", category, DEFAULT_CATEGORY)
    if DEFAULT_CATEGORY in table:
        return table[DEFAULT_CATEGORY]
    return REST_THRESHOLDS[DEFAULT_CATEGORY]


def rest_status(
    elapsed: float,
    category: str | None,
    thresholds: dict[str, RestThresholds] | None = None,
    styles: dict[str, tuple[str, str]] | None = None,
) -> RestStatus:
    """
    Build the rest status for an elapsed duration.

    Args:
        elapsed: Seconds rested so far
        category: "compound" or "isolation" (None -> default category)
        thresholds: Category -> RestThresholds table (default: config)
        styles: Zone -> (text, color) table (default: config)

    Returns:
        RestStatus with zone, display text/color, goal and max_goal
    """
    limits = thresholds_for(category, thresholds)
    zone = classify_rest_zone(elapsed, limits.goal, limits.max_goal)
    style_table = ZONE_STYLES if styles is None else styles
    text, color = style_table.get(zone, ZONE_STYLES[zone])
    return RestStatus(
        zone=zone,
        text=text,
        color=color,
        goal=limits.goal,
        max_goal=limits.max_goal,
    )


class RestTimer:
    """
    Rest timer for one workout session.

    Every method that depends on the clock takes now explicitly.
    """

    def __init__(
        self,
        thresholds: dict[str, RestThresholds] | None = None,
        styles: dict[str, tuple[str, str]] | None = None,
    ):
        self.state: RestTimerState = TimerIdle()
        self.thresholds = thresholds
        self.styles = styles

    @property
    def is_running(self) -> bool:
        return isinstance(self.state, TimerRunning)

    @property
    def is_paused(self) -> bool:
        return isinstance(self.state, TimerPaused)

    @property
    def is_idle(self) -> bool:
        return isinstance(self.state, TimerIdle)

    @property
    def last_set_timestamp(self) -> datetime | None:
        if isinstance(self.state, (TimerRunning, TimerPaused)):
            return self.state.last_set_timestamp
        return None

    @property
    def category(self) -> str | None:
        if isinstance(self.state, (TimerRunning, TimerPaused)):
            return self.state.category
        return None

    @property
    def _paused_accumulated_seconds(self) -> float:
        """Total time spent paused in the current interval (running timer only)."""
        if isinstance(self.state, TimerRunning):
            return (self.state.anchor - self.state.last_set_timestamp).total_seconds()
        return 0.0

    def start(self, timestamp: datetime, category: str | None) -> None:
        """Begin a fresh rest interval at timestamp, discarding any pause history."""
        self.state = TimerRunning(
            last_set_timestamp=timestamp,
            category=category,
            anchor=timestamp,
        )
        logger.debug("Rest timer started at %s (%s)", timestamp.isoformat(), category)

    def pause(self, now: datetime) -> None:
        """Freeze the timer. No-op unless running."""
        if not isinstance(self.state, TimerRunning):
            return
        frozen = self.elapsed_seconds(now)
        self.state = TimerPaused(
            last_set_timestamp=self.state.last_set_timestamp,
            category=self.state.category,
            frozen_elapsed=frozen,
        )
        logger.debug("Rest timer paused at %.1fs", frozen)

    def resume(self, now: datetime) -> None:
        """Continue from the frozen value. No-op unless paused."""
        if not isinstance(self.state, TimerPaused):
            return
        frozen = self.state.frozen_elapsed
        self.state = TimerRunning(
            last_set_timestamp=self.state.last_set_timestamp,
            category=self.state.category,
            anchor=_anchor_for(now, frozen),
        )
        logger.debug("Rest timer resumed from %.1fs", frozen)

    def stop(self) -> None:
        """End the rest interval."""
        self.state = TimerIdle()
        logger.debug("Rest timer stopped")

    def elapsed_seconds(self, now: datetime) -> float:
        """
        Seconds rested so far.

        Running: (now - last_set) - paused_total, i.e. now - anchor,
        clamped at zero. Paused: the frozen value. Idle: 0.
        """
        if isinstance(self.state, TimerRunning):
            return max(0.0, (now - self.state.anchor).total_seconds())
        if isinstance(self.state, TimerPaused):
            return self.state.frozen_elapsed
        return 0.0

    def status(self, now: datetime) -> RestStatus:
        """Current rest zone. An idle timer is always "early"."""
        return rest_status(
            self.elapsed_seconds(now),
            self.category,
            self.thresholds,
            self.styles,
        )

    def snapshot(self, now: datetime) -> RestTimerSnapshot:
        """Read-only view of the timer at now."""
        return RestTimerSnapshot(
            last_set_timestamp=self.last_set_timestamp,
            last_exercise_category=self.category,
            elapsed_seconds=self.elapsed_seconds(now),
            is_paused=self.is_paused,
            rest_status=self.status(now),
        )

    def log_set(self, now: datetime, category: str | None) -> float:
        """
        Record a completed set.

        Returns the rest taken before this set (0 if the timer was idle)
        and restarts the timer for the next rest interval.
        """
        rested = self.elapsed_seconds(now)
        self.start(now, category)
        return rested

    def reconcile(
        self,
        last_set_timestamp: datetime | None,
        elapsed_seconds: float | None,
        is_paused: bool,
        category: str | None,
        now: datetime,
    ) -> None:
        """
        Reset local state to a server-supplied (timestamp, elapsed) pair.

        The local anchor is rebuilt from the remote elapsed value so local
        drift never outlives one polling interval. A missing elapsed value
        is recomputed from last_set_timestamp.
        """
        if last_set_timestamp is None:
            self.state = TimerIdle()
            return

        if elapsed_seconds is None:
            elapsed = max(0.0, (now - last_set_timestamp).total_seconds())
        else:
            elapsed = max(0.0, elapsed_seconds)

        if is_paused:
            self.state = TimerPaused(
                last_set_timestamp=last_set_timestamp,
                category=category,
                frozen_elapsed=elapsed,
            )
        else:
            self.state = TimerRunning(
                last_set_timestamp=last_set_timestamp,
                category=category,
                anchor=_anchor_for(now, elapsed),
            )
        logger.debug("Rest timer reconciled: %.1fs elapsed, paused=%s", elapsed, is_paused)
