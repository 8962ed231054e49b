"""Pin post use case."""

from pydantic import BaseModel

from ink.domain.service import EngagementService, PostService
from ink.domain.value import Partition, PostId, PostOrigin, UserId

from ..base import BaseUseCase


class PinPostRequest(BaseModel):
    """Pin post request."""

    user_id: str  # Administrator performing the pin
    email: str | None = None
    post_id: str


class PinPostResponse(BaseModel):
    """Pin post response."""

    source_id: str
    pinned_id: str
    source_deleted: bool


class PinPostUseCase(BaseUseCase[PinPostRequest, PinPostResponse]):
    """Use case for pinning a feed post as the topic of the day."""

    def __init__(
        self, engagement_service: EngagementService, post_service: PostService
    ) -> None:
        """Initialize pin post use case.

        Args:
            engagement_service: Engagement domain service
            post_service: Post domain service
        """
        self.engagement_service = engagement_service
        self.post_service = post_service

    async def execute(self, request: PinPostRequest) -> PinPostResponse:
        """Execute pin flow.

        Raises:
            NotFoundError: If the post is not in the feed
            NotAuthorizedError: If the user is not the administrator
        """
        post = await self.post_service.get_post(Partition.FEED, PostId(request.post_id))
        pinned = await self.engagement_service.pin(
            UserId(request.user_id), post, request.email
        )
        return PinPostResponse(
            source_id=post.id,
            pinned_id=pinned.id,
            source_deleted=post.origin == PostOrigin.USER,
        )
