"""Publish generated post use case."""

import logfire
from pydantic import BaseModel, Field

from ink.config import EngagementSettings
from ink.domain.error import NotAuthorizedError
from ink.domain.model import utc_now
from ink.domain.service import PointsService, PostService
from ink.domain.value import UserId

from ..base import BaseUseCase
from .get_feed import PostItem


class PublishGeneratedPostRequest(BaseModel):
    """Publish generated post request."""

    user_id: str  # Administrator running the generation flow
    email: str | None = None
    headline: str = Field(min_length=1, max_length=300)
    content: str = Field(min_length=1)
    author: str = Field(min_length=1)  # Byline of the generating persona
    handle: str = Field(min_length=1)
    image_url: str | None = None


class PublishGeneratedPostUseCase(BaseUseCase[PublishGeneratedPostRequest, PostItem]):
    """Use case for storing a post written by a content-generation flow.

    Generated posts earn nobody points and have no author account.
    """

    def __init__(
        self,
        post_service: PostService,
        points_service: PointsService,
        engagement_settings: EngagementSettings,
    ) -> None:
        self.post_service = post_service
        self.points_service = points_service
        self.engagement_settings = engagement_settings

    async def execute(self, request: PublishGeneratedPostRequest) -> PostItem:
        """Execute publish flow.

        Raises:
            NotAuthorizedError: If the user is not the administrator
            ValidationError: If the post is malformed
        """
        user_id = UserId(request.user_id)

        with logfire.span("publish_generated_post.execute", user_id=user_id):
            if not self.points_service.is_admin(user_id, request.email):
                raise NotAuthorizedError("publish generated posts", user_id)

            post = await self.post_service.publish_generated(
                request.headline,
                request.content,
                request.author,
                request.handle,
                image_url=request.image_url,
            )
            return PostItem.from_post(
                post, self.engagement_settings.poll_window_hours, utc_now()
            )
