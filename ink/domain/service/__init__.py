"""Domain services."""

from .base import Service
from .engagement_service import EngagementService, validate_selection
from .jwt_service import JWTService
from .points_service import PointPolicy, PointsService, rank_for_points
from .post_service import Feed, PostService
from .user_service import UserService

__all__ = [
    "EngagementService",
    "Feed",
    "JWTService",
    "PointPolicy",
    "PointsService",
    "PostService",
    "Service",
    "UserService",
    "rank_for_points",
    "validate_selection",
]
