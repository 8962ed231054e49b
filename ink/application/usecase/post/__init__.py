"""Post use cases."""

from .create_post import CreatePostRequest, CreatePostResponse, CreatePostUseCase
from .delete_post import DeletePostRequest, DeletePostResponse, DeletePostUseCase
from .get_feed import (
    GetFeedRequest,
    GetFeedResponse,
    GetFeedUseCase,
    PollItem,
    PollOptionItem,
    PostItem,
)
from .publish_generated import (
    PublishGeneratedPostRequest,
    PublishGeneratedPostUseCase,
)

__all__ = [
    "CreatePostRequest",
    "CreatePostResponse",
    "CreatePostUseCase",
    "DeletePostRequest",
    "DeletePostResponse",
    "DeletePostUseCase",
    "GetFeedRequest",
    "GetFeedResponse",
    "GetFeedUseCase",
    "PollItem",
    "PollOptionItem",
    "PostItem",
    "PublishGeneratedPostRequest",
    "PublishGeneratedPostUseCase",
]
