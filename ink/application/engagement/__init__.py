"""Client-side engagement state."""

from .manager import EngagementStateManager
from .result import EngagementResult, FailureKind, failure_kind_for

__all__ = [
    "EngagementResult",
    "EngagementStateManager",
    "FailureKind",
    "failure_kind_for",
]
