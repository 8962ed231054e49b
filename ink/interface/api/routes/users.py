"""User profile routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, Query
from pydantic import BaseModel, Field

from ink.application.usecase.engagement import (
    RecordActionRequest,
    RecordActionResponse,
    RecordActionUseCase,
)
from ink.application.usecase.user import (
    GetLeaderboardRequest,
    GetLeaderboardResponse,
    GetLeaderboardUseCase,
    GetUserProfileRequest,
    GetUserProfileUseCase,
    StartSessionRequest,
    StartSessionResponse,
    StartSessionUseCase,
    UpdateUserProfileRequest,
    UpdateUserProfileResponse,
    UpdateUserProfileUseCase,
    UserProfileItem,
)
from ink.domain.service import JWTService
from ink.domain.value import ActionKind
from ink.interface.api.identity import require_identity

router = APIRouter(prefix="/users", tags=["users"], route_class=DishkaRoute)


class RecordActionAPIRequest(BaseModel):
    """API request for recording a point-earning action."""

    action: ActionKind


class UpdateProfileAPIRequest(BaseModel):
    """API request for the settings page. Omitted fields are unchanged."""

    handle: str | None = None
    display_name: str | None = Field(default=None, min_length=1, max_length=100)
    public_name: bool | None = None


@router.get("/me", response_model=StartSessionResponse)
async def get_me(
    start_session_use_case: FromDishka[StartSessionUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> StartSessionResponse:
    """Start a session for the current user.

    Creates the profile on first sign-in and returns it together with
    the user's likes and ballots.

    Example:
        GET /users/me
        Cookie: auth_token=...

        Response:
        {
            "user_id": "u-42",
            "handle": "@ada",
            "display_name": "Ada",
            "points": 0,
            "rank": "Newcomer",
            "liked_post_ids": [],
            "voted_polls": {}
            ...
        }
    """
    identity = require_identity(jwt_service, auth_token, "load your profile")
    return await start_session_use_case.execute(
        StartSessionRequest(
            user_id=identity.user_id,
            email=identity.email,
            display_name=identity.display_name,
        )
    )


@router.patch("/me", response_model=UpdateUserProfileResponse)
async def update_me(
    request: UpdateProfileAPIRequest,
    update_use_case: FromDishka[UpdateUserProfileUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> UpdateUserProfileResponse:
    """Change the current user's handle, display name or name visibility.

    Example:
        PATCH /users/me
        Cookie: auth_token=...

        Request:
        {
            "handle": "countess",
            "public_name": false
        }
    """
    identity = require_identity(jwt_service, auth_token, "update your profile")
    return await update_use_case.execute(
        UpdateUserProfileRequest(
            user_id=identity.user_id,
            handle=request.handle,
            display_name=request.display_name,
            public_name=request.public_name,
        )
    )


@router.post("/me/actions", response_model=RecordActionResponse)
async def record_action(
    request: RecordActionAPIRequest,
    record_action_use_case: FromDishka[RecordActionUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> RecordActionResponse:
    """Award points for sharing, asking the AI or running an analysis."""
    identity = require_identity(jwt_service, auth_token, "earn points")
    return await record_action_use_case.execute(
        RecordActionRequest(
            user_id=identity.user_id, email=identity.email, action=request.action
        )
    )


@router.get("/leaderboard", response_model=GetLeaderboardResponse)
async def get_leaderboard(
    get_leaderboard_use_case: FromDishka[GetLeaderboardUseCase],
    limit: int | None = Query(default=None, ge=1, le=500),
) -> GetLeaderboardResponse:
    """Top users by points, highest first."""
    return await get_leaderboard_use_case.execute(GetLeaderboardRequest(limit=limit))


@router.get("/{handle}", response_model=UserProfileItem)
async def get_user_profile(
    handle: str,
    get_user_profile_use_case: FromDishka[GetUserProfileUseCase],
) -> UserProfileItem:
    """Get a public profile by handle.

    Args:
        handle: Handle with or without '@' (e.g. "ada" or "@ada")
        get_user_profile_use_case: Get user profile use case from DI

    Returns:
        Public profile; the display name is omitted when the user hides it
    """
    return await get_user_profile_use_case.execute(GetUserProfileRequest(handle=handle))
