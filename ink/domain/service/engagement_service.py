"""Engagement domain service.

Durable side of likes, poll votes and pinning. Every operation that
touches a shared counter runs as one store transaction, so the relation
record and the counter change commit together or not at all.
"""

from typing import Optional, Sequence

import logfire

from ink.domain.error import (
    AlreadyDoneError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from ink.domain.model import Like, Poll, PollVote, Post, utc_now
from ink.domain.repository import Collection, DocumentStore, FieldFilter, Transaction
from ink.domain.value import Partition, PostId, PostOrigin, UserId, relation_key

from .base import Service
from .points_service import PointsService
from .post_service import new_post_id


def validate_selection(poll: Poll, options: Sequence[str]) -> tuple[str, ...]:
    """Check a ballot against a poll.

    Returns:
        The selected option texts

    Raises:
        ValidationError: If empty, duplicated, unknown, or several options
            on a single-choice poll
    """
    selected = tuple(options)
    if not selected:
        raise ValidationError("Select at least one option")
    if len(set(selected)) != len(selected):
        raise ValidationError("An option can only be selected once")
    unknown = [o for o in selected if o not in poll.option_texts]
    if unknown:
        raise ValidationError(f"Unknown poll option: {unknown[0]}")
    if len(selected) > 1 and not poll.allow_multiple:
        raise ValidationError("This poll accepts a single option")
    return selected


class EngagementService(Service):
    """Domain service for likes, poll votes and pinning."""

    def __init__(self, store: DocumentStore, points_service: PointsService) -> None:
        """Initialize engagement service.

        Args:
            store: Document store
            points_service: Points service, used to recognise the administrator
        """
        super().__init__(store)
        self.points_service = points_service

    async def like(self, user_id: UserId, post_id: PostId, partition: Partition) -> Like:
        """Like a post.

        Creates the Like record and increments the post's like counter in one
        transaction.

        Args:
            user_id: User ID
            post_id: Post ID
            partition: Partition holding the post

        Returns:
            Created like

        Raises:
            AlreadyDoneError: If the user already liked the post
            NotFoundError: If the post does not exist
            ConflictError: If the transaction kept losing races
        """
        key = relation_key(user_id, post_id)

        async def body(txn: Transaction) -> Like:
            if await txn.get(Collection.LIKES, key) is not None:
                raise AlreadyDoneError("Post already liked")
            if await txn.get(partition.collection, post_id) is None:
                raise NotFoundError("Post", post_id)

            like = Like(user_id=user_id, post_id=post_id, partition=partition)
            txn.increment(partition.collection, post_id, "likes", 1)
            txn.set(Collection.LIKES, key, like.to_document())
            return like

        with logfire.span("engagement_service.like", user_id=user_id, post_id=post_id):
            try:
                like = await self.store.transaction(body)
            except AlreadyDoneError:
                logfire.warn("Duplicate like attempt", user_id=user_id, post_id=post_id)
                raise
            logfire.info("Post liked", user_id=user_id, post_id=post_id)
            return like

    async def unlike(self, user_id: UserId, post_id: PostId, partition: Partition) -> None:
        """Remove a like from a post.

        Deletes the Like record and decrements the like counter (never below
        zero) in one transaction.

        Raises:
            AlreadyDoneError: If the user has not liked the post
            ConflictError: If the transaction kept losing races
        """
        key = relation_key(user_id, post_id)

        async def body(txn: Transaction) -> None:
            if await txn.get(Collection.LIKES, key) is None:
                raise AlreadyDoneError("Post is not liked")
            post = await txn.get(partition.collection, post_id)

            txn.delete(Collection.LIKES, key)
            if post is not None and post.data.get("likes", 0) > 0:
                txn.increment(partition.collection, post_id, "likes", -1)

        with logfire.span("engagement_service.unlike", user_id=user_id, post_id=post_id):
            await self.store.transaction(body)
            logfire.info("Like removed", user_id=user_id, post_id=post_id)

    async def vote(
        self,
        user_id: UserId,
        post_id: PostId,
        partition: Partition,
        options: Sequence[str],
    ) -> tuple[PollVote, Poll]:
        """Cast a ballot on a post's poll.

        The Vote record key is derived from (user, post), so two ballots from
        the same account collide on it: the later transaction either sees the
        record on retry or loses the commit race.

        Args:
            user_id: User ID
            post_id: Post ID
            partition: Partition holding the post
            options: Selected option texts

        Returns:
            Tuple of (created vote, poll with updated counters)

        Raises:
            AlreadyDoneError: If the user already voted on this poll
            NotFoundError: If the post or its poll does not exist
            ValidationError: If the selection does not fit the poll
            ConflictError: If the transaction kept losing races
        """
        key = relation_key(user_id, post_id)

        async def body(txn: Transaction) -> tuple[PollVote, Poll]:
            if await txn.get(Collection.POLL_VOTES, key) is not None:
                raise AlreadyDoneError("Already voted on this poll")
            snapshot = await txn.get(partition.collection, post_id)
            if snapshot is None:
                raise NotFoundError("Post", post_id)
            post = Post.from_document(snapshot.id, snapshot.data)
            if post.poll is None:
                raise NotFoundError("Poll", post_id)

            selected = validate_selection(post.poll, options)
            updated = post.poll.with_votes(selected)
            vote = PollVote(
                user_id=user_id, post_id=post_id, partition=partition, options=selected
            )
            txn.update(
                partition.collection, post_id, {"poll": updated.model_dump(mode="json")}
            )
            txn.set(Collection.POLL_VOTES, key, vote.to_document())
            return vote, updated

        with logfire.span("engagement_service.vote", user_id=user_id, post_id=post_id):
            try:
                vote, poll = await self.store.transaction(body)
            except AlreadyDoneError:
                logfire.warn("Duplicate vote attempt", user_id=user_id, post_id=post_id)
                raise
            logfire.info(
                "Vote recorded", user_id=user_id, post_id=post_id, options=list(vote.options)
            )
            return vote, poll

    async def pin(
        self, actor_id: UserId, post: Post, actor_email: Optional[str] = None
    ) -> Post:
        """Make a feed post the topic of the day.

        One batch creates a copy in the pinned partition with a fresh id and
        creation time, and deletes the source when a user wrote it. Generated
        posts stay in the feed.

        Args:
            actor_id: User performing the pin
            post: Post to pin
            actor_email: Actor email, used to recognise the administrator

        Returns:
            The pinned copy

        Raises:
            NotAuthorizedError: If the actor is not the administrator
            ValidationError: If the post is already pinned
        """
        with logfire.span("engagement_service.pin", actor_id=actor_id, post_id=post.id):
            if not self.points_service.is_admin(actor_id, actor_email):
                logfire.warn("Pin attempt by non-admin", actor_id=actor_id)
                raise NotAuthorizedError("pin posts", actor_id)
            if post.partition == Partition.PINNED:
                raise ValidationError(f"Post {post.id} is already pinned")

            pinned = post.model_copy(
                update={
                    "id": new_post_id(),
                    "partition": Partition.PINNED,
                    "created_at": utc_now(),
                }
            )
            batch = self.store.batch()
            batch.set(Partition.PINNED.collection, pinned.id, pinned.to_document())
            if post.origin == PostOrigin.USER:
                batch.delete(post.partition.collection, post.id)
            await batch.commit()

            logfire.info(
                "Post pinned",
                source_id=post.id,
                pinned_id=pinned.id,
                source_deleted=post.origin == PostOrigin.USER,
            )
            return pinned

    async def liked_post_ids(self, user_id: UserId) -> set[PostId]:
        """Ids of every post the user has liked.

        Reads all of the user's Like records (no pagination).
        """
        with logfire.span("engagement_service.liked_post_ids", user_id=user_id):
            snapshots = await self.store.query(
                Collection.LIKES, filters=[FieldFilter("user_id", "==", user_id)]
            )
            return {PostId(s.data["post_id"]) for s in snapshots}

    async def voted_polls(self, user_id: UserId) -> dict[PostId, tuple[str, ...]]:
        """Options the user picked, per post they voted on."""
        with logfire.span("engagement_service.voted_polls", user_id=user_id):
            snapshots = await self.store.query(
                Collection.POLL_VOTES, filters=[FieldFilter("user_id", "==", user_id)]
            )
            votes = [PollVote.from_document(s.id, s.data) for s in snapshots]
            return {vote.post_id: vote.options for vote in votes}
