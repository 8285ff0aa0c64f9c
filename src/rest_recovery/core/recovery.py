"""
Linear recovery model for a single fatigue source.

A source recorded at t0 with a prescribed recovery duration T is

    pct(t) = clip((t - t0) / T * 100, 0, 100)

percent recovered at time t. Elapsed time is clamped at zero so a
timestamp in the future (clock skew) reads as "just trained", never as
negative recovery.
"""

from datetime import datetime, timedelta

from .config import RECOVERY_READY_PCT, RECOVERY_RECOVERING_PCT
from .models import FatigueSource, RecoveryBand, RecoverySnapshot

SECONDS_PER_HOUR = 3600.0


def elapsed_hours(since: datetime, now: datetime) -> float:
    """Hours from since to now, clamped at zero."""
    return max(0.0, (now - since).total_seconds() / SECONDS_PER_HOUR)


def recovery_percentage(elapsed: float, recovery_hours: float) -> float:
    """
    Percent of the recovery duration that has elapsed.

    pct = clip(elapsed / T * 100, 0, 100), and 100 when T == 0.

    Args:
        elapsed: Hours since the fatigue was incurred (>= 0)
        recovery_hours: Prescribed duration for full recovery (>= 0)

    Returns:
        Unrounded percentage in [0, 100]
    """
    if recovery_hours <= 0:
        return 100.0
    return min(100.0, max(0.0, elapsed / recovery_hours * 100.0))


def estimate_recovery(source: FatigueSource, now: datetime) -> RecoverySnapshot:
    """
    Estimate how far a fatigue source has recovered at now.

    A source with no timestamp has nothing to recover from and is
    reported fully recovered.

    Args:
        source: Muscle group or CNS fatigue source
        now: Evaluation instant (timezone-aware)

    Returns:
        RecoverySnapshot with unrounded values
    """
    if source.source_timestamp is None:
        return RecoverySnapshot(
            recovery_until=None,
            is_recovered=True,
            hours_until_recovery=0.0,
            recovery_percentage=100.0,
        )

    hours = elapsed_hours(source.source_timestamp, now)
    pct = recovery_percentage(hours, source.recovery_hours)

    try:
        until = source.source_timestamp + timedelta(hours=source.recovery_hours)
    except OverflowError:
        # Past the datetime range; percentage and hours are still exact
        until = None

    return RecoverySnapshot(
        recovery_until=until,
        is_recovered=pct >= 100.0,
        hours_until_recovery=max(0.0, source.recovery_hours - hours),
        recovery_percentage=pct,
    )


def recovery_band(
    percentage: float,
    ready_pct: float = RECOVERY_READY_PCT,
    recovering_pct: float = RECOVERY_RECOVERING_PCT,
) -> RecoveryBand:
    """
    Bucket a recovery percentage for display.

    >= ready_pct      -> "ready"
    >= recovering_pct -> "recovering"
    otherwise         -> "fatigued"
    """
    if percentage >= ready_pct:
        return "ready"
    if percentage >= recovering_pct:
        return "recovering"
    return "fatigued"


def is_ready(snapshot: RecoverySnapshot, ready_pct: float = RECOVERY_READY_PCT) -> bool:
    """True if fully recovered or close enough to train the group again."""
    return snapshot.is_recovered or snapshot.recovery_percentage >= ready_pct
