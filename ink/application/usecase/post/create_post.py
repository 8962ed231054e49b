"""Create post use case."""

import logfire
from pydantic import BaseModel, Field

from ink.config import EngagementSettings
from ink.domain.model import utc_now
from ink.domain.service import PointsService, PostService, UserService
from ink.domain.value import ActionKind, UserId

from ..engagement.common import award_quietly
from ..base import BaseUseCase
from .get_feed import PostItem


class CreatePostRequest(BaseModel):
    """Create post request."""

    user_id: str  # Author ID from authenticated user
    email: str | None = None
    headline: str = Field(min_length=1, max_length=300)
    content: str = ""
    image_url: str | None = None
    poll_options: list[str] | None = None
    allow_multiple: bool = False


class CreatePostResponse(BaseModel):
    """Create post response."""

    post: PostItem
    points_awarded: int


class CreatePostUseCase(BaseUseCase[CreatePostRequest, CreatePostResponse]):
    """Use case for publishing a user post to the feed."""

    def __init__(
        self,
        post_service: PostService,
        user_service: UserService,
        points_service: PointsService,
        engagement_settings: EngagementSettings,
    ) -> None:
        """Initialize create post use case.

        Args:
            post_service: Post domain service
            user_service: User domain service
            points_service: Points domain service
            engagement_settings: Engagement settings (poll window)
        """
        self.post_service = post_service
        self.user_service = user_service
        self.points_service = points_service
        self.engagement_settings = engagement_settings

    async def execute(self, request: CreatePostRequest) -> CreatePostResponse:
        """Execute create post flow.

        Steps:
        1. Load the author's profile for the byline
        2. Store the post (with its poll, if any)
        3. Award post points

        Raises:
            NotFoundError: If the author has no profile
            ValidationError: If the post or poll is malformed
        """
        user_id = UserId(request.user_id)

        with logfire.span("create_post.execute", user_id=user_id):
            author = await self.user_service.get_profile(user_id)
            post = await self.post_service.create_post(
                author,
                request.headline,
                content=request.content,
                image_url=request.image_url,
                poll_options=request.poll_options,
                allow_multiple=request.allow_multiple,
            )
            points = await award_quietly(
                self.points_service, user_id, ActionKind.POST, request.email
            )

            return CreatePostResponse(
                post=PostItem.from_post(
                    post, self.engagement_settings.poll_window_hours, utc_now()
                ),
                points_awarded=points,
            )
