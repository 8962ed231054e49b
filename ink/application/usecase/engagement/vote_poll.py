"""Vote on poll use case."""

import logfire
from pydantic import BaseModel, Field

from ink.config import EngagementSettings
from ink.domain.error import NotFoundError, PollClosedError
from ink.domain.model import utc_now
from ink.domain.service import EngagementService, PointsService, PostService
from ink.domain.value import ActionKind, Partition, PostId, UserId

from ..base import BaseUseCase
from .common import award_quietly


class VotePollRequest(BaseModel):
    """Vote on poll request."""

    user_id: str  # User ID from authenticated user
    email: str | None = None
    post_id: str
    partition: Partition = Partition.FEED
    options: list[str] = Field(min_length=1)


class VotePollResponse(BaseModel):
    """Vote on poll response."""

    post_id: str
    options: list[str]
    counts: dict[str, int]
    total_votes: int
    points_awarded: int


class VotePollUseCase(BaseUseCase[VotePollRequest, VotePollResponse]):
    """Use case for casting a ballot on a post's poll."""

    def __init__(
        self,
        engagement_service: EngagementService,
        post_service: PostService,
        points_service: PointsService,
        engagement_settings: EngagementSettings,
    ) -> None:
        """Initialize vote poll use case.

        Args:
            engagement_service: Engagement domain service
            post_service: Post domain service
            points_service: Points domain service
            engagement_settings: Engagement settings (poll window)
        """
        self.engagement_service = engagement_service
        self.post_service = post_service
        self.points_service = points_service
        self.engagement_settings = engagement_settings

    async def execute(self, request: VotePollRequest) -> VotePollResponse:
        """Execute vote flow.

        Steps:
        1. Load the post and refuse votes after the poll window
        2. Record the ballot and option counters in one transaction
        3. Award vote points

        Raises:
            NotFoundError: If the post or its poll does not exist
            PollClosedError: If the poll window has ended
            AlreadyDoneError: If the user already voted
            ValidationError: If the selection does not fit the poll
        """
        user_id = UserId(request.user_id)
        post_id = PostId(request.post_id)

        with logfire.span("vote_poll.execute", user_id=user_id, post_id=post_id):
            post = await self.post_service.get_post(request.partition, post_id)
            if post.poll is None:
                raise NotFoundError("Poll", post_id)
            if not post.is_poll_open(utc_now(), self.engagement_settings.poll_window_hours):
                raise PollClosedError(post_id)

            vote, poll = await self.engagement_service.vote(
                user_id, post_id, request.partition, request.options
            )
            points = await award_quietly(
                self.points_service, user_id, ActionKind.VOTE, request.email
            )

            return VotePollResponse(
                post_id=post_id,
                options=list(vote.options),
                counts=poll.counts(),
                total_votes=poll.total_votes,
                points_awarded=points,
            )
