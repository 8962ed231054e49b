"""Unlike post use case."""

from pydantic import BaseModel

from ink.domain.error import NotFoundError
from ink.domain.service import EngagementService, PostService
from ink.domain.value import Partition, PostId, UserId

from ..base import BaseUseCase


class UnlikePostRequest(BaseModel):
    """Unlike post request."""

    user_id: str  # User ID from authenticated user
    post_id: str
    partition: Partition = Partition.FEED


class UnlikePostResponse(BaseModel):
    """Unlike post response."""

    post_id: str
    liked: bool
    likes: int


class UnlikePostUseCase(BaseUseCase[UnlikePostRequest, UnlikePostResponse]):
    """Use case for removing a like from a post."""

    def __init__(
        self, engagement_service: EngagementService, post_service: PostService
    ) -> None:
        """Initialize unlike post use case.

        Args:
            engagement_service: Engagement domain service
            post_service: Post domain service
        """
        self.engagement_service = engagement_service
        self.post_service = post_service

    async def execute(self, request: UnlikePostRequest) -> UnlikePostResponse:
        """Execute unlike flow.

        Raises:
            AlreadyDoneError: If the user has not liked the post
        """
        post_id = PostId(request.post_id)
        await self.engagement_service.unlike(
            UserId(request.user_id), post_id, request.partition
        )

        # The post may have been deleted since it was liked
        try:
            likes = (await self.post_service.get_post(request.partition, post_id)).likes
        except NotFoundError:
            likes = 0

        return UnlikePostResponse(post_id=post_id, liked=False, likes=likes)
