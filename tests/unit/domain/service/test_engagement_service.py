"""Unit tests for EngagementService."""

import asyncio

import pytest

from ink.domain.error import (
    AlreadyDoneError,
    ConflictError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from ink.domain.repository import Collection, DocumentStore
from ink.domain.service import EngagementService, PostService
from ink.domain.value import Partition, PostId, PostOrigin, UserId
from tests.conftest import ADMIN_EMAIL, ADMIN_USER_ID, save_post
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()

USER = UserId("u-1")
POST = PostId("p-1")


async def likes_of(store: DocumentStore, post_id: str, partition=Partition.FEED) -> int:
    return (await store.get(partition.collection, post_id)).data["likes"]


class TestLike:
    """Tests for like and unlike methods."""

    @pytest.mark.asyncio
    async def test_like_creates_record_and_increments_counter(self, unit_env):
        """Liking should create the relation record and bump the counter by one."""
        # Arrange
        engagement_service = await unit_env.get(EngagementService)
        store = await unit_env.get(DocumentStore)
        await save_post(store, POST)

        # Act
        like = await engagement_service.like(USER, POST, Partition.FEED)

        # Assert
        assert like.key == "u-1_p-1"
        assert await store.get(Collection.LIKES, "u-1_p-1") is not None
        assert await likes_of(store, POST) == 1

    @pytest.mark.asyncio
    async def test_like_then_unlike_restores_prior_state(self, unit_env):
        """Unlike should undo the record and the counter change."""
        # Arrange
        engagement_service = await unit_env.get(EngagementService)
        store = await unit_env.get(DocumentStore)
        await save_post(store, POST, likes=4)

        # Act
        await engagement_service.like(USER, POST, Partition.FEED)
        await engagement_service.unlike(USER, POST, Partition.FEED)

        # Assert
        assert await store.get(Collection.LIKES, "u-1_p-1") is None
        assert await likes_of(store, POST) == 4

    @pytest.mark.asyncio
    async def test_duplicate_like_is_already_done(self, unit_env):
        """Second like from the same user should be rejected without counting."""
        engagement_service = await unit_env.get(EngagementService)
        store = await unit_env.get(DocumentStore)
        await save_post(store, POST)
        await engagement_service.like(USER, POST, Partition.FEED)

        with pytest.raises(AlreadyDoneError):
            await engagement_service.like(USER, POST, Partition.FEED)
        assert await likes_of(store, POST) == 1

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_likes_count_once(self, unit_env):
        """Two sessions liking at once should produce one record and one increment."""
        # Arrange
        engagement_service = await unit_env.get(EngagementService)
        store = await unit_env.get(DocumentStore)
        await save_post(store, POST)

        # Act
        results = await asyncio.gather(
            engagement_service.like(USER, POST, Partition.FEED),
            engagement_service.like(USER, POST, Partition.FEED),
            return_exceptions=True,
        )

        # Assert
        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 1
        assert isinstance(failures[0], (AlreadyDoneError, ConflictError))
        assert await likes_of(store, POST) == 1

    @pytest.mark.asyncio
    async def test_like_missing_post_fails(self, unit_env):
        engagement_service = await unit_env.get(EngagementService)

        with pytest.raises(NotFoundError):
            await engagement_service.like(USER, PostId("ghost"), Partition.FEED)

    @pytest.mark.asyncio
    async def test_unlike_without_like_is_already_done(self, unit_env):
        engagement_service = await unit_env.get(EngagementService)
        store = await unit_env.get(DocumentStore)
        await save_post(store, POST)

        with pytest.raises(AlreadyDoneError):
            await engagement_service.unlike(USER, POST, Partition.FEED)

    @pytest.mark.asyncio
    async def test_unlike_never_takes_counter_below_zero(self, unit_env):
        """A drifted counter at zero should stay at zero."""
        # Arrange
        engagement_service = await unit_env.get(EngagementService)
        store = await unit_env.get(DocumentStore)
        await save_post(store, POST)
        await engagement_service.like(USER, POST, Partition.FEED)
        await store.update(Partition.FEED.collection, POST, {"likes": 0})

        # Act
        await engagement_service.unlike(USER, POST, Partition.FEED)

        # Assert
        assert await likes_of(store, POST) == 0
        assert await store.get(Collection.LIKES, "u-1_p-1") is None


class TestVote:
    """Tests for vote method."""

    @pytest.mark.asyncio
    async def test_vote_counts_option_and_records_ballot(self, unit_env):
        """Voting should bump the chosen option and store the ballot."""
        # Arrange
        engagement_service = await unit_env.get(EngagementService)
        post_service = await unit_env.get(PostService)
        store = await unit_env.get(DocumentStore)
        await save_post(store, POST, poll_options=["A", "B"])

        # Act
        vote, poll = await engagement_service.vote(USER, POST, Partition.FEED, ["A"])

        # Assert
        assert vote.options == ("A",)
        assert poll.counts() == {"A": 1, "B": 0}
        stored = await post_service.get_post(Partition.FEED, POST)
        assert stored.poll.counts() == {"A": 1, "B": 0}
        assert (await store.get(Collection.POLL_VOTES, "u-1_p-1")).data["options"] == [
            "A"
        ]

    @pytest.mark.asyncio
    async def test_second_vote_is_already_done_and_counts_unchanged(self, unit_env):
        """Voting A then B should reject B and leave counters at A=1, B=0."""
        # Arrange
        engagement_service = await unit_env.get(EngagementService)
        post_service = await unit_env.get(PostService)
        store = await unit_env.get(DocumentStore)
        await save_post(store, POST, poll_options=["A", "B"])
        await engagement_service.vote(USER, POST, Partition.FEED, ["A"])

        # Act & Assert
        with pytest.raises(AlreadyDoneError):
            await engagement_service.vote(USER, POST, Partition.FEED, ["B"])
        stored = await post_service.get_post(Partition.FEED, POST)
        assert stored.poll.counts() == {"A": 1, "B": 0}

    @pytest.mark.asyncio
    async def test_concurrent_votes_count_exactly_once(self, unit_env):
        """Two simultaneous ballots from one account should yield one record and one increment."""
        # Arrange
        engagement_service = await unit_env.get(EngagementService)
        post_service = await unit_env.get(PostService)
        store = await unit_env.get(DocumentStore)
        await save_post(store, POST, poll_options=["A", "B"])

        # Act
        results = await asyncio.gather(
            engagement_service.vote(USER, POST, Partition.FEED, ["A"]),
            engagement_service.vote(USER, POST, Partition.FEED, ["B"]),
            return_exceptions=True,
        )

        # Assert
        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 1
        assert isinstance(failures[0], (AlreadyDoneError, ConflictError))
        stored = await post_service.get_post(Partition.FEED, POST)
        assert stored.poll.total_votes == 1
        assert len(await store.query(Collection.POLL_VOTES)) == 1

    @pytest.mark.asyncio
    async def test_votes_from_different_users_all_count(self, unit_env):
        """Concurrent ballots from different users should all be counted."""
        engagement_service = await unit_env.get(EngagementService)
        post_service = await unit_env.get(PostService)
        store = await unit_env.get(DocumentStore)
        await save_post(store, POST, poll_options=["A", "B"])

        await asyncio.gather(
            *(
                engagement_service.vote(UserId(f"u-{i}"), POST, Partition.FEED, ["B"])
                for i in range(3)
            )
        )

        stored = await post_service.get_post(Partition.FEED, POST)
        assert stored.poll.counts() == {"A": 0, "B": 3}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "options,allow_multiple",
        [([], False), (["Z"], False), (["A", "A"], True), (["A", "B"], False)],
    )
    async def test_invalid_selection_is_rejected(self, unit_env, options, allow_multiple):
        """Empty, unknown, duplicated or multiple-on-single selections should fail."""
        engagement_service = await unit_env.get(EngagementService)
        store = await unit_env.get(DocumentStore)
        await save_post(
            store, POST, poll_options=["A", "B"], allow_multiple=allow_multiple
        )

        with pytest.raises(ValidationError):
            await engagement_service.vote(USER, POST, Partition.FEED, options)
        assert await store.get(Collection.POLL_VOTES, "u-1_p-1") is None

    @pytest.mark.asyncio
    async def test_multiple_choice_poll_counts_every_option(self, unit_env):
        engagement_service = await unit_env.get(EngagementService)
        store = await unit_env.get(DocumentStore)
        await save_post(store, POST, poll_options=["A", "B", "C"], allow_multiple=True)

        _, poll = await engagement_service.vote(USER, POST, Partition.FEED, ["A", "C"])

        assert poll.counts() == {"A": 1, "B": 0, "C": 1}

    @pytest.mark.asyncio
    async def test_vote_on_post_without_poll_fails(self, unit_env):
        engagement_service = await unit_env.get(EngagementService)
        store = await unit_env.get(DocumentStore)
        await save_post(store, POST)

        with pytest.raises(NotFoundError, match="Poll"):
            await engagement_service.vote(USER, POST, Partition.FEED, ["A"])


class TestPin:
    """Tests for pin method."""

    @pytest.mark.asyncio
    async def test_pin_user_post_moves_it(self, unit_env):
        """Pinning a user post should copy it to the pinned partition and delete the source."""
        # Arrange
        engagement_service = await unit_env.get(EngagementService)
        store = await unit_env.get(DocumentStore)
        post = await save_post(store, POST, likes=7)

        # Act
        pinned = await engagement_service.pin(UserId(ADMIN_USER_ID), post)

        # Assert
        assert pinned.id != post.id
        assert pinned.partition == Partition.PINNED
        assert pinned.likes == 7
        assert pinned.created_at >= post.created_at
        assert await store.get(Partition.FEED.collection, POST) is None
        assert await store.get(Partition.PINNED.collection, pinned.id) is not None

    @pytest.mark.asyncio
    async def test_pin_generated_post_keeps_source(self, unit_env):
        """Generated posts should stay in the feed when pinned."""
        engagement_service = await unit_env.get(EngagementService)
        store = await unit_env.get(DocumentStore)
        post = await save_post(store, POST, origin=PostOrigin.GENERATED)

        await engagement_service.pin(UserId("any-id"), post, actor_email=ADMIN_EMAIL)

        assert await store.get(Partition.FEED.collection, POST) is not None
        assert len(await store.query(Partition.PINNED.collection)) == 1

    @pytest.mark.asyncio
    async def test_pin_by_non_admin_is_refused(self, unit_env):
        engagement_service = await unit_env.get(EngagementService)
        store = await unit_env.get(DocumentStore)
        post = await save_post(store, POST)

        with pytest.raises(NotAuthorizedError):
            await engagement_service.pin(USER, post, actor_email="ada@example.com")
        assert await store.get(Partition.FEED.collection, POST) is not None


class TestReconciliationQueries:
    """Tests for liked_post_ids and voted_polls."""

    @pytest.mark.asyncio
    async def test_queries_return_only_the_users_relations(self, unit_env):
        # Arrange
        engagement_service = await unit_env.get(EngagementService)
        store = await unit_env.get(DocumentStore)
        await save_post(store, "p-1", poll_options=["A", "B"])
        await save_post(store, "p-2")
        await engagement_service.like(USER, PostId("p-1"), Partition.FEED)
        await engagement_service.like(USER, PostId("p-2"), Partition.FEED)
        await engagement_service.like(UserId("u-2"), PostId("p-2"), Partition.FEED)
        await engagement_service.vote(USER, PostId("p-1"), Partition.FEED, ["B"])

        # Act
        liked = await engagement_service.liked_post_ids(USER)
        voted = await engagement_service.voted_polls(USER)

        # Assert
        assert liked == {"p-1", "p-2"}
        assert voted == {"p-1": ("B",)}
