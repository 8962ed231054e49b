"""Engagement use cases."""

from .like_post import LikePostRequest, LikePostResponse, LikePostUseCase
from .pin_post import PinPostRequest, PinPostResponse, PinPostUseCase
from .record_action import (
    RecordActionRequest,
    RecordActionResponse,
    RecordActionUseCase,
)
from .unlike_post import UnlikePostRequest, UnlikePostResponse, UnlikePostUseCase
from .vote_poll import VotePollRequest, VotePollResponse, VotePollUseCase

__all__ = [
    "LikePostRequest",
    "LikePostResponse",
    "LikePostUseCase",
    "PinPostRequest",
    "PinPostResponse",
    "PinPostUseCase",
    "RecordActionRequest",
    "RecordActionResponse",
    "RecordActionUseCase",
    "UnlikePostRequest",
    "UnlikePostResponse",
    "UnlikePostUseCase",
    "VotePollRequest",
    "VotePollResponse",
    "VotePollUseCase",
]
