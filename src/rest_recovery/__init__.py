"""
Recovery and rest-timing engine.

Turns fatigue timestamps into time-decaying recovery estimates and tracks
rest between sets with pause/resume.
"""

from .core.aggregator import aggregate
from .core.models import FatigueSource, RecoverySnapshot, RecoveryStatus, RestStatus
from .core.recovery import estimate_recovery
from .core.rest_timer import RestTimer, classify_rest_zone, rest_status

__version__ = "0.1.0"

__all__ = [
    "FatigueSource",
    "RecoverySnapshot",
    "RecoveryStatus",
    "RestStatus",
    "RestTimer",
    "aggregate",
    "classify_rest_zone",
    "estimate_recovery",
    "rest_status",
]
