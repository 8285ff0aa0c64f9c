"""
Recovery status across all tracked muscle groups and the CNS.
"""

import logging
from collections.abc import Iterable
from datetime import datetime

from .config import DEFAULT_REGION, MUSCLE_REGIONS, RECOVERY_READY_PCT, TOP_RECOVERING_LIMIT
from .models import FatigueSource, RecoverySnapshot, RecoveryStatus, RecoverySummary
from .recovery import estimate_recovery, is_ready

logger = logging.getLogger(__name__)


def aggregate(
    sources: Iterable[FatigueSource],
    cns_source: FatigueSource | None,
    now: datetime,
) -> RecoveryStatus:
    """
    Estimate recovery for every muscle group and the CNS.

    Args:
        sources: Muscle-group fatigue sources (unique names)
        cns_source: CNS load source, or None when CNS tracking is unavailable
        now: Evaluation instant

    Returns:
        RecoveryStatus; cns is None exactly when cns_source is None.
        If a muscle group appears twice, the later source wins.
    """
    per_muscle: dict[str, RecoverySnapshot] = {}
    for source in sources:
        if source.name in per_muscle:
            logger.warning("Duplicate muscle group %r, keeping the later entry", source.name)
        per_muscle[source.name] = estimate_recovery(source, now)

    cns = estimate_recovery(cns_source, now) if cns_source is not None else None
    return RecoveryStatus(per_muscle=per_muscle, cns=cns)


def summarize(status: RecoveryStatus, ready_pct: float = RECOVERY_READY_PCT) -> RecoverySummary:
    """
    Count recovered vs recovering muscle groups and average their percentages.

    ready counts groups that are recovered or at least ready_pct recovered.
    """
    snapshots = list(status.per_muscle.values())
    if not snapshots:
        return RecoverySummary(total=0, recovered=0, recovering=0, average_percentage=0.0, ready=0)

    recovered = sum(1 for s in snapshots if s.is_recovered)
    average = sum(s.recovery_percentage for s in snapshots) / len(snapshots)
    return RecoverySummary(
        total=len(snapshots),
        recovered=recovered,
        recovering=len(snapshots) - recovered,
        average_percentage=average,
        ready=sum(1 for s in snapshots if is_ready(s, ready_pct)),
    )


def region_for(muscle: str, regions: dict[str, list[str]] | None = None) -> str:
    """Body region a muscle group belongs to."""
    table = MUSCLE_REGIONS if regions is None else regions
    for region, muscles in table.items():
        if muscle in muscles:
            return region
    return DEFAULT_REGION


def group_by_region(
    status: RecoveryStatus,
    regions: dict[str, list[str]] | None = None,
) -> dict[str, list[tuple[str, RecoverySnapshot]]]:
    """
    Group muscle snapshots by body region.

    Every region in the table is present (possibly empty). Within a region
    the least recovered muscles come first, ties broken by name.
    """
    table = MUSCLE_REGIONS if regions is None else regions
    groups: dict[str, list[tuple[str, RecoverySnapshot]]] = {region: [] for region in table}
    groups.setdefault(DEFAULT_REGION, [])

    for muscle, snapshot in status.per_muscle.items():
        groups[region_for(muscle, table)].append((muscle, snapshot))

    for entries in groups.values():
        entries.sort(key=lambda item: (item[1].recovery_percentage, item[0]))
    return groups


def top_recovering(
    status: RecoveryStatus,
    limit: int = TOP_RECOVERING_LIMIT,
) -> list[tuple[str, RecoverySnapshot]]:
    """Muscle groups still recovering, soonest to be ready first."""
    recovering = [
        (muscle, snapshot)
        for muscle, snapshot in status.per_muscle.items()
        if snapshot.recovery_percentage < 100.0 and snapshot.hours_until_recovery > 0
    ]
    recovering.sort(key=lambda item: (item[1].hours_until_recovery, item[0]))
    return recovering[:limit]
