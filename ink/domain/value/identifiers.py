"""Strongly typed identifiers for engagement entities.

User ids come from the identity provider and post ids are store document
ids, so both are opaque strings.
"""

from typing import NewType

UserId = NewType("UserId", str)
PostId = NewType("PostId", str)


def relation_key(user_id: UserId, post_id: PostId) -> str:
    """Deterministic document key for a (user, post) relation record.

    Likes and poll votes use this key so a second record for the same
    pair lands on the same document instead of creating a duplicate.
    """
    return f"{user_id}_{post_id}"
