"""Like post use case."""

from pydantic import BaseModel

from ink.domain.service import EngagementService, PointsService, PostService
from ink.domain.value import ActionKind, Partition, PostId, UserId

from ..base import BaseUseCase
from .common import award_quietly


class LikePostRequest(BaseModel):
    """Like post request."""

    user_id: str  # User ID from authenticated user
    email: str | None = None
    post_id: str
    partition: Partition = Partition.FEED


class LikePostResponse(BaseModel):
    """Like post response."""

    post_id: str
    liked: bool
    likes: int
    points_awarded: int


class LikePostUseCase(BaseUseCase[LikePostRequest, LikePostResponse]):
    """Use case for liking a post."""

    def __init__(
        self,
        engagement_service: EngagementService,
        post_service: PostService,
        points_service: PointsService,
    ) -> None:
        """Initialize like post use case.

        Args:
            engagement_service: Engagement domain service
            post_service: Post domain service
            points_service: Points domain service
        """
        self.engagement_service = engagement_service
        self.post_service = post_service
        self.points_service = points_service

    async def execute(self, request: LikePostRequest) -> LikePostResponse:
        """Execute like flow.

        Raises:
            AlreadyDoneError: If the user already liked the post
            NotFoundError: If the post does not exist
            ConflictError: If the like kept losing races
        """
        user_id = UserId(request.user_id)
        post_id = PostId(request.post_id)

        await self.engagement_service.like(user_id, post_id, request.partition)
        points = await award_quietly(
            self.points_service, user_id, ActionKind.LIKE, request.email
        )
        post = await self.post_service.get_post(request.partition, post_id)

        return LikePostResponse(
            post_id=post_id, liked=True, likes=post.likes, points_awarded=points
        )
