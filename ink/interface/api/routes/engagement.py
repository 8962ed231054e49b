"""Like, poll vote and pin routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie
from pydantic import BaseModel, Field

from ink.application.usecase.engagement import (
    LikePostRequest,
    LikePostResponse,
    LikePostUseCase,
    PinPostRequest,
    PinPostResponse,
    PinPostUseCase,
    UnlikePostRequest,
    UnlikePostResponse,
    UnlikePostUseCase,
    VotePollRequest,
    VotePollResponse,
    VotePollUseCase,
)
from ink.domain.service import JWTService
from ink.domain.value import Partition
from ink.interface.api.identity import require_identity

router = APIRouter(prefix="/posts", tags=["engagement"], route_class=DishkaRoute)


class VoteAPIRequest(BaseModel):
    """API request for voting on a poll."""

    options: list[str] = Field(min_length=1, max_length=4)


@router.post("/{partition}/{post_id}/like", response_model=LikePostResponse)
async def like_post(
    partition: Partition,
    post_id: str,
    like_post_use_case: FromDishka[LikePostUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> LikePostResponse:
    """Like a post.

    Requires authentication. Responds 409 if the post is already liked.

    Args:
        partition: "feed" or "pinned"
        post_id: Post ID
        like_post_use_case: Like post use case from DI
        jwt_service: JWT service for token verification (injected)
        auth_token: JWT token from cookie
    """
    identity = require_identity(jwt_service, auth_token, "like posts")
    return await like_post_use_case.execute(
        LikePostRequest(
            user_id=identity.user_id,
            email=identity.email,
            post_id=post_id,
            partition=partition,
        )
    )


@router.delete("/{partition}/{post_id}/like", response_model=UnlikePostResponse)
async def unlike_post(
    partition: Partition,
    post_id: str,
    unlike_post_use_case: FromDishka[UnlikePostUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> UnlikePostResponse:
    """Remove a like from a post.

    Requires authentication. Responds 409 if the post is not liked.
    """
    identity = require_identity(jwt_service, auth_token, "unlike posts")
    return await unlike_post_use_case.execute(
        UnlikePostRequest(user_id=identity.user_id, post_id=post_id, partition=partition)
    )


@router.post("/{partition}/{post_id}/vote", response_model=VotePollResponse)
async def vote_poll(
    partition: Partition,
    post_id: str,
    request: VoteAPIRequest,
    vote_poll_use_case: FromDishka[VotePollUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> VotePollResponse:
    """Vote on a post's poll.

    Requires authentication. Responds 409 on a second ballot from the same
    user and 400 once the poll window has ended.

    Example:
        POST /posts/feed/3f2a.../vote
        Cookie: auth_token=...

        Request:
        {"options": ["Vim"]}

        Response:
        {
            "post_id": "3f2a...",
            "options": ["Vim"],
            "counts": {"Vim": 4, "Emacs": 2, "VS Code": 9},
            "total_votes": 15,
            "points_awarded": 2
        }
    """
    identity = require_identity(jwt_service, auth_token, "vote")
    return await vote_poll_use_case.execute(
        VotePollRequest(
            user_id=identity.user_id,
            email=identity.email,
            post_id=post_id,
            partition=partition,
            options=request.options,
        )
    )


@router.post("/{post_id}/pin", response_model=PinPostResponse)
async def pin_post(
    post_id: str,
    pin_post_use_case: FromDishka[PinPostUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> PinPostResponse:
    """Pin a feed post as the topic of the day.

    Administrator only.
    """
    identity = require_identity(jwt_service, auth_token, "pin posts")
    return await pin_post_use_case.execute(
        PinPostRequest(user_id=identity.user_id, email=identity.email, post_id=post_id)
    )
