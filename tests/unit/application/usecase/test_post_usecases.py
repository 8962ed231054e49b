"""Unit tests for the feed and create-post use cases."""

from datetime import timedelta

import pytest

from ink.application.usecase.post import (
    CreatePostRequest,
    CreatePostUseCase,
    DeletePostRequest,
    DeletePostUseCase,
    GetFeedRequest,
    GetFeedUseCase,
    PublishGeneratedPostRequest,
    PublishGeneratedPostUseCase,
)
from ink.domain.error import NotAuthorizedError, NotFoundError, ValidationError
from ink.domain.model import utc_now
from ink.domain.repository import Collection, DocumentStore
from ink.domain.service import EngagementService
from ink.domain.value import Partition, PostId, PostOrigin, UserId
from tests.conftest import ADMIN_EMAIL, ADMIN_USER_ID, save_post, save_user
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()


class TestCreatePostUseCase:
    """Tests for CreatePostUseCase."""

    @pytest.mark.asyncio
    async def test_create_post_awards_post_points(self, unit_env):
        # Arrange
        store = await unit_env.get(DocumentStore)
        await save_user(store, "u-1", "ada", display_name="Ada")
        use_case = await unit_env.get(CreatePostUseCase)

        # Act
        response = await use_case.execute(
            CreatePostRequest(user_id="u-1", headline="Hello", content="First post")
        )

        # Assert
        assert response.points_awarded == 25
        assert response.post.author == "Ada"
        assert response.post.handle == "@ada"
        assert response.post.origin == PostOrigin.USER
        assert response.post.poll is None
        assert (await store.get(Collection.USERS, "u-1")).data["points"] == 25

    @pytest.mark.asyncio
    async def test_create_poll_post(self, unit_env):
        store = await unit_env.get(DocumentStore)
        await save_user(store, "u-1", "ada")
        use_case = await unit_env.get(CreatePostUseCase)

        response = await use_case.execute(
            CreatePostRequest(
                user_id="u-1",
                headline="Best editor?",
                poll_options=["vim", "emacs"],
                allow_multiple=True,
            )
        )

        poll = response.post.poll
        assert [o.text for o in poll.options] == ["vim", "emacs"]
        assert poll.allow_multiple is True
        assert poll.total_votes == 0
        assert poll.is_open is True

    @pytest.mark.asyncio
    async def test_duplicate_poll_options_are_rejected(self, unit_env):
        store = await unit_env.get(DocumentStore)
        await save_user(store, "u-1", "ada")
        use_case = await unit_env.get(CreatePostUseCase)

        with pytest.raises(ValidationError):
            await use_case.execute(
                CreatePostRequest(
                    user_id="u-1", headline="Pick", poll_options=["A", "A"]
                )
            )

        assert (await store.get(Collection.USERS, "u-1")).data["points"] == 0

    @pytest.mark.asyncio
    async def test_author_without_profile_is_not_found(self, unit_env):
        use_case = await unit_env.get(CreatePostUseCase)

        with pytest.raises(NotFoundError):
            await use_case.execute(CreatePostRequest(user_id="ghost", headline="Hi"))


class TestGetFeedUseCase:
    """Tests for GetFeedUseCase."""

    @pytest.mark.asyncio
    async def test_anonymous_feed(self, unit_env):
        # Arrange
        store = await unit_env.get(DocumentStore)
        now = utc_now()
        await save_post(store, "old", created_at=now - timedelta(hours=2))
        await save_post(store, "new", created_at=now - timedelta(hours=1))
        await save_post(
            store,
            "topic",
            partition=Partition.PINNED,
            origin=PostOrigin.GENERATED,
            created_at=now,
        )
        use_case = await unit_env.get(GetFeedUseCase)

        # Act
        response = await use_case.execute(GetFeedRequest())

        # Assert
        assert response.pinned.post_id == "topic"
        assert response.history == []
        assert [item.post_id for item in response.items] == ["new", "old"]
        assert not any(item.liked_by_me for item in response.items)

    @pytest.mark.asyncio
    async def test_feed_marks_callers_likes_and_ballots(self, unit_env):
        # Arrange
        store = await unit_env.get(DocumentStore)
        engagement_service = await unit_env.get(EngagementService)
        await save_post(store, "p-1")
        await save_post(store, "p-2", poll_options=["A", "B"])
        await engagement_service.like(UserId("u-1"), PostId("p-1"), Partition.FEED)
        await engagement_service.vote(UserId("u-1"), PostId("p-2"), Partition.FEED, ["B"])
        use_case = await unit_env.get(GetFeedUseCase)

        # Act
        mine = await use_case.execute(GetFeedRequest(user_id="u-1"))
        theirs = await use_case.execute(GetFeedRequest(user_id="u-2"))

        # Assert
        by_id = {item.post_id: item for item in mine.items}
        assert by_id["p-1"].liked_by_me is True
        assert by_id["p-1"].likes == 1
        assert by_id["p-2"].liked_by_me is False
        assert by_id["p-2"].poll.my_vote == ["B"]
        assert by_id["p-2"].poll.total_votes == 1

        others = {item.post_id: item for item in theirs.items}
        assert others["p-1"].liked_by_me is False
        assert others["p-2"].poll.my_vote is None

    @pytest.mark.asyncio
    async def test_expired_poll_is_reported_closed(self, unit_env):
        store = await unit_env.get(DocumentStore)
        created = utc_now() - timedelta(hours=30)
        await save_post(store, "p-1", poll_options=["A", "B"], created_at=created)
        use_case = await unit_env.get(GetFeedUseCase)

        response = await use_case.execute(GetFeedRequest())

        poll = response.items[0].poll
        assert poll.is_open is False
        assert poll.closes_at == created + timedelta(hours=24)


class TestDeletePostUseCase:
    """Tests for DeletePostUseCase."""

    @pytest.mark.asyncio
    async def test_admin_deletes_past_topic(self, unit_env):
        # Arrange
        store = await unit_env.get(DocumentStore)
        await save_post(store, "t-1", partition=Partition.PINNED)
        use_case = await unit_env.get(DeletePostUseCase)

        # Act
        response = await use_case.execute(
            DeletePostRequest(
                user_id=ADMIN_USER_ID, partition=Partition.PINNED, post_id="t-1"
            )
        )

        # Assert
        assert response.post_id == "t-1"
        assert await store.get(Partition.PINNED.collection, "t-1") is None

    @pytest.mark.asyncio
    async def test_non_admin_cannot_delete(self, unit_env):
        store = await unit_env.get(DocumentStore)
        await save_post(store, "p-1")
        use_case = await unit_env.get(DeletePostUseCase)

        with pytest.raises(NotAuthorizedError):
            await use_case.execute(
                DeletePostRequest(user_id="u-1", partition=Partition.FEED, post_id="p-1")
            )
        assert await store.get(Partition.FEED.collection, "p-1") is not None

    @pytest.mark.asyncio
    async def test_missing_post_is_not_found(self, unit_env):
        use_case = await unit_env.get(DeletePostUseCase)

        with pytest.raises(NotFoundError):
            await use_case.execute(
                DeletePostRequest(
                    user_id="u-1",
                    email=ADMIN_EMAIL,
                    partition=Partition.FEED,
                    post_id="missing",
                )
            )


class TestPublishGeneratedPostUseCase:
    """Tests for PublishGeneratedPostUseCase."""

    @pytest.mark.asyncio
    async def test_admin_publishes_generated_post(self, unit_env):
        # Arrange
        store = await unit_env.get(DocumentStore)
        use_case = await unit_env.get(PublishGeneratedPostUseCase)

        # Act
        item = await use_case.execute(
            PublishGeneratedPostRequest(
                user_id=ADMIN_USER_ID,
                headline="Rust in the kernel",
                content="A summary of this week's debate.",
                author="Ink Bot",
                handle="@inkbot",
            )
        )

        # Assert
        assert item.origin == PostOrigin.GENERATED
        assert item.author == "Ink Bot"
        stored = await store.get(Partition.FEED.collection, item.post_id)
        assert stored is not None
        assert await store.get(Collection.USERS, ADMIN_USER_ID) is None

    @pytest.mark.asyncio
    async def test_non_admin_cannot_publish(self, unit_env):
        use_case = await unit_env.get(PublishGeneratedPostUseCase)

        with pytest.raises(NotAuthorizedError):
            await use_case.execute(
                PublishGeneratedPostRequest(
                    user_id="u-1",
                    headline="Spam",
                    content="Spam",
                    author="Me",
                    handle="@me",
                )
            )
