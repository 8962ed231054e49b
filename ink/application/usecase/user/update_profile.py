"""Update user profile use case."""

import logfire
from pydantic import BaseModel, Field

from ink.domain.service import UserService
from ink.domain.value import UserId

from ..base import BaseUseCase


class UpdateUserProfileRequest(BaseModel):
    """Update user profile request. Fields left as None are unchanged."""

    user_id: str
    handle: str | None = None  # New handle, with or without '@'
    display_name: str | None = Field(default=None, min_length=1, max_length=100)
    public_name: bool | None = None


class UpdateUserProfileResponse(BaseModel):
    """The user's own profile after the update."""

    user_id: str
    handle: str
    display_name: str | None
    public_name: bool


class UpdateUserProfileUseCase(
    BaseUseCase[UpdateUserProfileRequest, UpdateUserProfileResponse]
):
    """Use case for the settings page: change handle, name and name visibility."""

    def __init__(self, user_service: UserService) -> None:
        """Initialize update user profile use case.

        Args:
            user_service: User domain service
        """
        self.user_service = user_service

    async def execute(
        self, request: UpdateUserProfileRequest
    ) -> UpdateUserProfileResponse:
        """Execute update profile flow.

        The handle moves first, so a taken handle leaves the display
        settings untouched as well.

        Raises:
            ValidationError: If the new handle is malformed or taken
            NotFoundError: If the user has no profile
        """
        user_id = UserId(request.user_id)

        with logfire.span("update_user_profile.execute", user_id=user_id):
            if request.handle is not None:
                await self.user_service.rename_handle(user_id, request.handle)
            profile = await self.user_service.update_profile(
                user_id,
                display_name=request.display_name,
                public_name=request.public_name,
            )

            return UpdateUserProfileResponse(
                user_id=profile.id,
                handle=profile.handle.root,
                display_name=profile.display_name,
                public_name=profile.public_name,
            )
