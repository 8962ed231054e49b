"""Domain model entities for engagement."""

from ink.domain.model.common import DomainModel, utc_now
from ink.domain.model.engagement import Like, PollVote
from ink.domain.model.post import Poll, PollOption, Post
from ink.domain.model.user import HandleReservation, User

__all__ = [
    "DomainModel",
    "HandleReservation",
    "Like",
    "Poll",
    "PollOption",
    "PollVote",
    "Post",
    "User",
    "utc_now",
]
