"""Collection names used by the engagement service.

Post collections come from ``Partition.collection``.
"""


class Collection:
    """Store collections outside the two post partitions."""

    USERS = "users"
    HANDLES = "handles"
    LIKES = "likes"
    POLL_VOTES = "pollVotes"
