"""Get leaderboard use case."""

from pydantic import BaseModel, Field

from ink.domain.service import UserService

from ..base import BaseUseCase
from .get_user_profile import UserProfileItem


class GetLeaderboardRequest(BaseModel):
    """Get leaderboard request."""

    limit: int | None = Field(default=None, ge=1, le=500)


class LeaderboardEntry(BaseModel):
    """One leaderboard row."""

    position: int
    user: UserProfileItem


class GetLeaderboardResponse(BaseModel):
    """Get leaderboard response."""

    entries: list[LeaderboardEntry]


class GetLeaderboardUseCase(BaseUseCase[GetLeaderboardRequest, GetLeaderboardResponse]):
    """Use case for the top users by point balance."""

    def __init__(self, user_service: UserService) -> None:
        """Initialize get leaderboard use case.

        Args:
            user_service: User domain service
        """
        self.user_service = user_service

    async def execute(self, request: GetLeaderboardRequest) -> GetLeaderboardResponse:
        users = await self.user_service.leaderboard(request.limit)
        return GetLeaderboardResponse(
            entries=[
                LeaderboardEntry(position=i, user=UserProfileItem.from_user(user))
                for i, user in enumerate(users, start=1)
            ]
        )
