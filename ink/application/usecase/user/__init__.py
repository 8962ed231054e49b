"""User use cases."""

from .get_leaderboard import (
    GetLeaderboardRequest,
    GetLeaderboardResponse,
    GetLeaderboardUseCase,
    LeaderboardEntry,
)
from .get_user_profile import (
    GetUserProfileRequest,
    GetUserProfileUseCase,
    UserProfileItem,
)
from .start_session import (
    StartSessionRequest,
    StartSessionResponse,
    StartSessionUseCase,
)
from .update_profile import (
    UpdateUserProfileRequest,
    UpdateUserProfileResponse,
    UpdateUserProfileUseCase,
)

__all__ = [
    "GetLeaderboardRequest",
    "GetLeaderboardResponse",
    "GetLeaderboardUseCase",
    "GetUserProfileRequest",
    "GetUserProfileUseCase",
    "LeaderboardEntry",
    "StartSessionRequest",
    "StartSessionResponse",
    "StartSessionUseCase",
    "UpdateUserProfileRequest",
    "UpdateUserProfileResponse",
    "UpdateUserProfileUseCase",
    "UserProfileItem",
]
