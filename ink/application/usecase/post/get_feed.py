"""Get feed use case."""

from datetime import datetime

import logfire
from pydantic import BaseModel

from ink.config import EngagementSettings
from ink.domain.model import Post, utc_now
from ink.domain.service import EngagementService, PostService
from ink.domain.value import Partition, PostOrigin, UserId

from ..base import BaseUseCase


class PollOptionItem(BaseModel):
    """Poll option in response."""

    text: str
    votes: int


class PollItem(BaseModel):
    """Poll in response."""

    options: list[PollOptionItem]
    allow_multiple: bool
    total_votes: int
    closes_at: datetime
    is_open: bool
    my_vote: list[str] | None = None


class PostItem(BaseModel):
    """Post in response."""

    post_id: str
    partition: Partition
    origin: PostOrigin
    author_id: str | None
    author: str
    handle: str
    headline: str
    content: str
    image_url: str | None
    likes: int
    comments: int
    poll: PollItem | None
    created_at: datetime
    liked_by_me: bool = False

    @classmethod
    def from_post(
        cls,
        post: Post,
        poll_window_hours: int,
        now: datetime,
        liked: bool = False,
        my_vote: tuple[str, ...] | None = None,
    ) -> "PostItem":
        """Build the response item for a post."""
        poll = None
        if post.poll is not None:
            poll = PollItem(
                options=[
                    PollOptionItem(text=o.text, votes=o.votes) for o in post.poll.options
                ],
                allow_multiple=post.poll.allow_multiple,
                total_votes=post.poll.total_votes,
                closes_at=post.poll_closes_at(poll_window_hours),
                is_open=post.is_poll_open(now, poll_window_hours),
                my_vote=list(my_vote) if my_vote is not None else None,
            )

        return cls(
            post_id=post.id,
            partition=post.partition,
            origin=post.origin,
            author_id=post.author_id,
            author=post.author,
            handle=post.handle,
            headline=post.headline,
            content=post.content,
            image_url=post.image_url,
            likes=post.likes,
            comments=post.comments,
            poll=poll,
            created_at=post.created_at,
            liked_by_me=liked,
        )


class GetFeedRequest(BaseModel):
    """Get feed request."""

    user_id: str | None = None  # Current user ID (if authenticated)


class GetFeedResponse(BaseModel):
    """Get feed response."""

    pinned: PostItem | None
    history: list[PostItem]
    items: list[PostItem]


class GetFeedUseCase(BaseUseCase[GetFeedRequest, GetFeedResponse]):
    """Use case for loading the topic of the day and the feed."""

    def __init__(
        self,
        post_service: PostService,
        engagement_service: EngagementService,
        engagement_settings: EngagementSettings,
    ) -> None:
        """Initialize get feed use case.

        Args:
            post_service: Post domain service
            engagement_service: Engagement domain service
            engagement_settings: Engagement settings (poll window)
        """
        self.post_service = post_service
        self.engagement_service = engagement_service
        self.engagement_settings = engagement_settings

    async def execute(self, request: GetFeedRequest) -> GetFeedResponse:
        """Execute get feed flow.

        Args:
            request: Get feed request

        Returns:
            Pinned topic, topic history and feed items, annotated with the
            caller's likes and ballots when authenticated
        """
        with logfire.span("get_feed.execute", user_id=request.user_id):
            feed = await self.post_service.list_feed()

            liked: set = set()
            voted: dict = {}
            if request.user_id:
                user_id = UserId(request.user_id)
                liked = await self.engagement_service.liked_post_ids(user_id)
                voted = await self.engagement_service.voted_polls(user_id)

            now = utc_now()
            window = self.engagement_settings.poll_window_hours

            def item(post: Post) -> PostItem:
                return PostItem.from_post(
                    post,
                    window,
                    now,
                    liked=post.id in liked,
                    my_vote=voted.get(post.id),
                )

            return GetFeedResponse(
                pinned=item(feed.pinned) if feed.pinned else None,
                history=[item(post) for post in feed.history],
                items=[item(post) for post in feed.items],
            )
