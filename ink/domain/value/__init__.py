"""Domain value objects for engagement."""

from ink.domain.value.identifiers import PostId, UserId, relation_key
from ink.domain.value.types import (
    ActionKind,
    Badge,
    Handle,
    Partition,
    PostOrigin,
    Rank,
)

__all__ = [
    # Identifiers
    "UserId",
    "PostId",
    "relation_key",
    # Types
    "ActionKind",
    "Badge",
    "Handle",
    "Partition",
    "PostOrigin",
    "Rank",
]
