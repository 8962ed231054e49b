"""Get user profile use case."""

from datetime import datetime

from pydantic import BaseModel

from ink.domain.error import NotFoundError, ValidationError
from ink.domain.model import User
from ink.domain.service import UserService, rank_for_points
from ink.domain.value import Badge, Handle, Rank

from ..base import BaseUseCase


class GetUserProfileRequest(BaseModel):
    """Get user profile request."""

    handle: str  # With or without the leading '@'


class UserProfileItem(BaseModel):
    """Public view of a user profile."""

    handle: str
    display_name: str | None  # None when the user hides their name
    points: int
    rank: Rank
    badge: Badge | None
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserProfileItem":
        return cls(
            handle=user.handle.root,
            display_name=user.display_name if user.public_name else None,
            points=user.points,
            rank=rank_for_points(user.points),
            badge=user.badge,
            created_at=user.created_at,
        )


class GetUserProfileUseCase(BaseUseCase[GetUserProfileRequest, UserProfileItem]):
    """Use case for getting a user's public profile by handle."""

    def __init__(self, user_service: UserService) -> None:
        """Initialize get user profile use case.

        Args:
            user_service: User domain service
        """
        self.user_service = user_service

    async def execute(self, request: GetUserProfileRequest) -> UserProfileItem:
        """Execute get user profile flow.

        Raises:
            NotFoundError: If no user holds the handle
        """
        try:
            handle = Handle.from_name(request.handle)
        except ValueError:
            raise ValidationError(f"Invalid handle: {request.handle}")

        user = await self.user_service.get_profile_by_handle(handle)
        if user is None:
            raise NotFoundError("User", handle.root)

        return UserProfileItem.from_user(user)
