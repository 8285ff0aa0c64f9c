"""
JSON serialization for recovery and rest-timer payloads.

This is the single ingestion boundary: raw number-or-string fields are
normalized here (see core/normalize.py) before any model is built, and
models are converted back to JSON-compatible dicts on the way out.
"""

from datetime import datetime, timedelta
from typing import Any

from ..core.config import CNS_NAME
from ..core.models import (
    FatigueSource,
    RecoverySnapshot,
    RecoveryStatus,
    RestStatus,
    RestTimerSnapshot,
)
from ..core.normalize import to_int, to_number, to_number_or, to_timestamp


class ValidationError(Exception):
    """Raised when a payload is structurally unusable."""

    pass


def _require_mapping(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValidationError(f"{what} must be a JSON object, got {type(data).__name__}")
    return data


def format_timestamp(value: datetime | None) -> str | None:
    """Render an aware datetime as ISO-8601 with a Z suffix for UTC."""
    if value is None:
        return None
    text = value.isoformat()
    if text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text


def _source_timestamp(data: dict[str, Any], recovery_hours: float) -> datetime | None:
    """
    Find when the fatigue was incurred.

    An explicit source_timestamp wins; otherwise it is derived from
    recovery_until - recovery_hours, which is how server responses encode it.
    """
    explicit = to_timestamp(data.get("source_timestamp"))
    if explicit is not None:
        return explicit
    until = to_timestamp(data.get("recovery_until"))
    if until is not None:
        try:
            return until - timedelta(hours=recovery_hours)
        except OverflowError:
            return None
    return None


def dict_to_fatigue_source(name: str, data: dict[str, Any]) -> FatigueSource:
    """
    Build a FatigueSource from a MuscleRecovery/CNSRecovery payload.

    Missing or negative recovery_hours becomes 0 (immediately recovered).
    The magnitude is read from fatigue_score, falling back to cns_load.

    Args:
        name: Muscle group name, or the CNS marker
        data: Raw payload dict

    Returns:
        FatigueSource

    Raises:
        ValidationError: If data is not a mapping
    """
    data = _require_mapping(data, f"Recovery entry {name!r}")
    recovery_hours = max(0.0, to_number_or(data.get("recovery_hours"), 0.0))

    magnitude = to_number(data.get("fatigue_score"))
    if magnitude is None:
        magnitude = to_number(data.get("cns_load"))

    total_sets = to_int(data.get("total_sets"))
    workout_id = data.get("source_workout", data.get("source_workout_id"))

    return FatigueSource(
        name=name,
        recovery_hours=recovery_hours,
        source_timestamp=_source_timestamp(data, recovery_hours),
        fatigue_or_load=magnitude,
        total_sets=total_sets,
        source_workout_id=to_int(workout_id),
    )


def recovery_snapshot_to_dict(snapshot: RecoverySnapshot) -> dict[str, Any]:
    """
    Convert RecoverySnapshot to JSON-compatible dict.

    Values are unrounded; rounding is up to the consumer.
    """
    return {
        "recovery_until": format_timestamp(snapshot.recovery_until),
        "is_recovered": snapshot.is_recovered,
        "hours_until_recovery": snapshot.hours_until_recovery,
        "recovery_percentage": snapshot.recovery_percentage,
    }


def parse_recovery_response(
    data: dict[str, Any],
) -> tuple[list[FatigueSource], FatigueSource | None]:
    """
    Parse a recovery status response.

    Expected shape:
        {"recovery_status": {muscle: {...}}, "cns_recovery": {...} | null, ...}

    Returns:
        (muscle sources, CNS source or None)

    Raises:
        ValidationError: If the top level or recovery_status is not a mapping
    """
    data = _require_mapping(data, "Recovery status payload")
    raw_status = data.get("recovery_status") or {}
    raw_status = _require_mapping(raw_status, "recovery_status")

    sources = [
        dict_to_fatigue_source(str(muscle), entry)
        for muscle, entry in raw_status.items()
    ]

    raw_cns = data.get("cns_recovery")
    cns = dict_to_fatigue_source(CNS_NAME, raw_cns) if raw_cns is not None else None
    return sources, cns


def recovery_status_to_dict(
    status: RecoveryStatus,
    sources: list[FatigueSource],
    cns_source: FatigueSource | None,
    now: datetime,
) -> dict[str, Any]:
    """
    Convert an aggregated status back into the response shape.

    Source fields (magnitude, sets, hours, workout) are carried alongside
    the recomputed snapshot values.
    """
    by_name = {s.name: s for s in sources}
    recovery: dict[str, Any] = {}
    for muscle, snapshot in status.per_muscle.items():
        source = by_name[muscle]
        recovery[muscle] = {
            "muscle_group": muscle,
            "fatigue_score": source.fatigue_or_load,
            "total_sets": source.total_sets,
            "recovery_hours": source.recovery_hours,
            "source_workout": source.source_workout_id,
            **recovery_snapshot_to_dict(snapshot),
        }

    cns: dict[str, Any] | None = None
    if status.cns is not None and cns_source is not None:
        cns = {
            "cns_load": cns_source.fatigue_or_load,
            "recovery_hours": cns_source.recovery_hours,
            "source_workout": cns_source.source_workout_id,
            **recovery_snapshot_to_dict(status.cns),
        }

    return {
        "recovery_status": recovery,
        "cns_recovery": cns,
        "timestamp": format_timestamp(now),
    }


def rest_status_to_dict(status: RestStatus) -> dict[str, Any]:
    """Convert RestStatus to JSON-compatible dict."""
    return {
        "zone": status.zone,
        "text": status.text,
        "color": status.color,
        "goal": status.goal,
        "max_goal": status.max_goal,
    }


def parse_rest_timer_payload(
    data: dict[str, Any],
) -> tuple[datetime | None, float | None, bool, str | None]:
    """
    Parse a rest timer state payload.

    Returns:
        (last_set_timestamp, elapsed_seconds, is_paused, category) ready for
        RestTimer.reconcile(). A negative elapsed value is treated as 0.

    Raises:
        ValidationError: If data is not a mapping
    """
    data = _require_mapping(data, "Rest timer payload")
    last_set = to_timestamp(data.get("last_set_timestamp"))
    elapsed = to_number(data.get("elapsed_seconds"))
    if elapsed is not None:
        elapsed = max(0.0, elapsed)
    category = data.get("last_exercise_category")
    if category is not None:
        category = str(category).strip().lower() or None
    is_paused = data.get("is_paused", False)
    if isinstance(is_paused, str):
        is_paused = is_paused.strip().lower() in ("true", "1", "yes")
    return last_set, elapsed, bool(is_paused), category


def rest_timer_snapshot_to_dict(snapshot: RestTimerSnapshot) -> dict[str, Any]:
    """
    Convert RestTimerSnapshot to the rest timer payload shape.

    elapsed_seconds is floored to whole seconds, as the server reports it.
    """
    return {
        "last_set_timestamp": format_timestamp(snapshot.last_set_timestamp),
        "last_exercise_category": snapshot.last_exercise_category,
        "elapsed_seconds": int(snapshot.elapsed_seconds),
        "is_paused": snapshot.is_paused,
        "rest_status": rest_status_to_dict(snapshot.rest_status),
    }
