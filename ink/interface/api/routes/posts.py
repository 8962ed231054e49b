"""Feed and post routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, status
from pydantic import BaseModel, Field

from ink.application.usecase.post import (
    CreatePostRequest,
    CreatePostResponse,
    CreatePostUseCase,
    DeletePostRequest,
    DeletePostResponse,
    DeletePostUseCase,
    GetFeedRequest,
    GetFeedResponse,
    GetFeedUseCase,
    PostItem,
    PublishGeneratedPostRequest,
    PublishGeneratedPostUseCase,
)
from ink.domain.service import JWTService
from ink.domain.value import Partition
from ink.interface.api.identity import require_identity

router = APIRouter(tags=["posts"], route_class=DishkaRoute)


class CreatePostAPIRequest(BaseModel):
    """API request for creating a post."""

    headline: str = Field(min_length=1, max_length=300)
    content: str = ""
    image_url: str | None = None
    poll_options: list[str] | None = Field(default=None, min_length=2, max_length=4)
    allow_multiple: bool = False


class PublishGeneratedAPIRequest(BaseModel):
    """API request for storing a generated post."""

    headline: str = Field(min_length=1, max_length=300)
    content: str = Field(min_length=1)
    author: str = Field(min_length=1)
    handle: str = Field(min_length=1)
    image_url: str | None = None


@router.get("/feed", response_model=GetFeedResponse)
async def get_feed(
    get_feed_use_case: FromDishka[GetFeedUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> GetFeedResponse:
    """Get the topic of the day, topic history and the feed.

    Authentication is optional; signed-in callers also get their likes
    and ballots marked on each post.

    Args:
        get_feed_use_case: Get feed use case from DI
        jwt_service: JWT service for token verification (injected)
        auth_token: JWT token from cookie (optional)

    Returns:
        Pinned topic, history and feed items, newest first
    """
    payload = jwt_service.get_payload_from_token(auth_token)
    return await get_feed_use_case.execute(
        GetFeedRequest(user_id=payload.user_id if payload else None)
    )


@router.post(
    "/posts", response_model=CreatePostResponse, status_code=status.HTTP_201_CREATED
)
async def create_post(
    request: CreatePostAPIRequest,
    create_post_use_case: FromDishka[CreatePostUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> CreatePostResponse:
    """Publish a post to the feed.

    Requires authentication. Awards post points to the author.

    Example:
        POST /posts
        Cookie: auth_token=...

        Request:
        {
            "headline": "Which editor do you use?",
            "poll_options": ["Vim", "Emacs", "VS Code"]
        }
    """
    identity = require_identity(jwt_service, auth_token, "create posts")
    return await create_post_use_case.execute(
        CreatePostRequest(
            user_id=identity.user_id,
            email=identity.email,
            headline=request.headline,
            content=request.content,
            image_url=request.image_url,
            poll_options=request.poll_options,
            allow_multiple=request.allow_multiple,
        )
    )


@router.post(
    "/posts/generated", response_model=PostItem, status_code=status.HTTP_201_CREATED
)
async def publish_generated_post(
    request: PublishGeneratedAPIRequest,
    publish_use_case: FromDishka[PublishGeneratedPostUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> PostItem:
    """Store a post produced by a content-generation flow.

    Administrator only. No points are awarded.
    """
    identity = require_identity(jwt_service, auth_token, "publish generated posts")
    return await publish_use_case.execute(
        PublishGeneratedPostRequest(
            user_id=identity.user_id,
            email=identity.email,
            headline=request.headline,
            content=request.content,
            author=request.author,
            handle=request.handle,
            image_url=request.image_url,
        )
    )


@router.delete("/posts/{partition}/{post_id}", response_model=DeletePostResponse)
async def delete_post(
    partition: Partition,
    post_id: str,
    delete_post_use_case: FromDishka[DeletePostUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> DeletePostResponse:
    """Delete a feed post or a past topic of the day.

    Administrator only.

    Example:
        DELETE /posts/pinned/9f1c...
        Cookie: auth_token=...
    """
    identity = require_identity(jwt_service, auth_token, "delete posts")
    return await delete_post_use_case.execute(
        DeletePostRequest(
            user_id=identity.user_id,
            email=identity.email,
            partition=partition,
            post_id=post_id,
        )
    )
