"""Relation records between users and posts.

Each record is stored under the deterministic (user, post) key, so its
existence alone answers "has this user liked / voted on this post".
"""

from datetime import datetime

from pydantic import Field

from ink.domain.model.common import DomainModel, utc_now
from ink.domain.value import Partition, PostId, UserId, relation_key


class Like(DomainModel):
    """A user's like on a post."""

    user_id: UserId
    post_id: PostId
    partition: Partition
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def key(self) -> str:
        return relation_key(self.user_id, self.post_id)


class PollVote(DomainModel):
    """A user's ballot on a post's poll. At most one per (user, post)."""

    user_id: UserId
    post_id: PostId
    partition: Partition
    options: tuple[str, ...] = Field(min_length=1)
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def key(self) -> str:
        return relation_key(self.user_id, self.post_id)
