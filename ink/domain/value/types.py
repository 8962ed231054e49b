"""Domain value objects for engagement.

Value objects are immutable and defined by their values, not identity.
"""

import re
from enum import Enum

from pydantic import field_validator

from ink.domain.value.common import RootValueObject


class Partition(str, Enum):
    """Logical bucket a post lives in."""

    FEED = "feed"
    PINNED = "pinned"

    @property
    def collection(self) -> str:
        """Store collection backing this partition."""
        return _PARTITION_COLLECTIONS[self]


_PARTITION_COLLECTIONS = {
    Partition.FEED: "feedItems",
    Partition.PINNED: "dailyTopics",
}


class PostOrigin(str, Enum):
    """Who created a post.

    Generated posts are written by the content-generation flows on behalf
    of the administrator and are never deleted when pinned.
    """

    USER = "user"
    GENERATED = "generated"


class ActionKind(str, Enum):
    """User actions that accrue points."""

    LIKE = "like"
    SHARE = "share"
    POST = "post"
    ASK_AI = "ask_ai"
    ANALYZE = "analyze"
    VOTE = "vote"


class Badge(str, Enum):
    """Verification badge shown next to a handle."""

    BLUE = "blue"
    GREY = "grey"
    ORANGE = "orange"


class Rank(str, Enum):
    """Rank derived from a point balance."""

    NEWCOMER = "Newcomer"
    TINKERER = "Tinkerer"
    CONTRIBUTOR = "Contributor"
    ANALYST = "Analyst"
    PRODIGY = "Prodigy"
    VISIONARY = "Visionary"
    INK_MASTER = "Ink Master"
    MILLION_INK = "1 Million Ink"


class Handle(RootValueObject[str]):
    """Public, unique user handle.

    Always stored with a leading '@', e.g. '@ada' or '@ada417'.
    """

    @field_validator("root")
    @classmethod
    def validate_handle_format(cls, v: str) -> str:
        """Validate '@' prefix and allowed characters."""
        if not re.match(r"^@[a-z0-9_]{1,64}$", v):
            raise ValueError(
                "Handle must start with '@' followed by 1-64 lowercase letters, digits or underscores"
            )
        return v

    @classmethod
    def from_name(cls, name: str) -> "Handle":
        """Build a handle from a bare name, adding the '@' prefix."""
        return cls(f"@{name.lstrip('@').lower()}")

    @property
    def name(self) -> str:
        """Handle without the '@' prefix (the reservation key)."""
        return self.root[1:]
