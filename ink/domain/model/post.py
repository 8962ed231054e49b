"""Post aggregate root.

Posts live either in the normal feed or pinned as the topic of the day,
and may carry a poll.
"""

from datetime import datetime, timedelta
from typing import Optional, Sequence

from pydantic import Field, field_validator

from ink.domain.model.common import DomainModel, utc_now
from ink.domain.value import Partition, PostId, PostOrigin, UserId


class PollOption(DomainModel):
    """One answer of a poll and its running vote count."""

    text: str = Field(min_length=1, max_length=80)
    votes: int = Field(default=0, ge=0)


class Poll(DomainModel):
    """Poll embedded in a post.

    Business rules:
    - 2 to 4 options with distinct texts, kept in display order
    - Single choice unless allow_multiple is set
    """

    options: tuple[PollOption, ...] = Field(min_length=2, max_length=4)
    allow_multiple: bool = False

    @field_validator("options")
    @classmethod
    def validate_unique_options(
        cls, v: tuple[PollOption, ...]
    ) -> tuple[PollOption, ...]:
        """Reject duplicate option texts."""
        texts = [option.text for option in v]
        if len(set(texts)) != len(texts):
            raise ValueError("Poll options must be unique")
        return v

    @classmethod
    def from_texts(cls, texts: Sequence[str], allow_multiple: bool = False) -> "Poll":
        """Create a fresh poll with zero votes per option."""
        return cls(
            options=tuple(PollOption(text=text.strip()) for text in texts),
            allow_multiple=allow_multiple,
        )

    @property
    def option_texts(self) -> tuple[str, ...]:
        return tuple(option.text for option in self.options)

    @property
    def total_votes(self) -> int:
        return sum(option.votes for option in self.options)

    def counts(self) -> dict[str, int]:
        """Vote count per option text."""
        return {option.text: option.votes for option in self.options}

    def with_votes(self, selected: Sequence[str]) -> "Poll":
        """Return a copy with each selected option counted once more."""
        chosen = set(selected)
        return self.model_copy(
            update={
                "options": tuple(
                    option.model_copy(update={"votes": option.votes + 1})
                    if option.text in chosen
                    else option
                    for option in self.options
                )
            }
        )


class Post(DomainModel):
    """Post aggregate root.

    The like counter is a cached count of Like records; the records are
    the source of truth for who liked what.
    """

    id: PostId
    partition: Partition = Partition.FEED
    origin: PostOrigin = PostOrigin.USER
    author_id: Optional[UserId] = None
    author: str = ""
    handle: str = ""
    headline: str = Field(min_length=1, max_length=300)
    content: str = ""
    image_url: Optional[str] = None
    likes: int = Field(default=0, ge=0)
    comments: int = Field(default=0, ge=0)
    poll: Optional[Poll] = None
    created_at: datetime = Field(default_factory=utc_now)

    def poll_closes_at(self, window_hours: int) -> datetime:
        """End of the voting window."""
        return self.created_at + timedelta(hours=window_hours)

    def is_poll_open(self, now: datetime, window_hours: int) -> bool:
        """Whether the post has a poll still accepting votes at ``now``."""
        return self.poll is not None and now < self.poll_closes_at(window_hours)
