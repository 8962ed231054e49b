"""Unit tests for PostService."""

from datetime import datetime, timezone

import pytest

from ink.domain.error import NotFoundError, ValidationError
from ink.domain.repository import DocumentStore
from ink.domain.service import PostService
from ink.domain.value import Partition, PostId, PostOrigin
from tests.conftest import save_post, save_user
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()


def at(day: int) -> datetime:
    return datetime(2026, 5, day, 9, 30, tzinfo=timezone.utc)


class TestCreatePost:
    """Tests for create_post method."""

    @pytest.mark.asyncio
    async def test_create_post_with_poll(self, unit_env):
        """A new post should start with zero likes and zero-count options."""
        # Arrange
        post_service = await unit_env.get(PostService)
        store = await unit_env.get(DocumentStore)
        author = await save_user(store, "u-1", "ada", display_name="Ada")

        # Act
        post = await post_service.create_post(
            author, "Tabs or spaces?", poll_options=["Tabs", "Spaces"]
        )

        # Assert
        saved = await post_service.get_post(Partition.FEED, post.id)
        assert saved == post
        assert saved.origin == PostOrigin.USER
        assert saved.author == "Ada"
        assert saved.handle == "@ada"
        assert saved.likes == 0
        assert saved.poll.counts() == {"Tabs": 0, "Spaces": 0}

    @pytest.mark.asyncio
    async def test_create_post_with_malformed_poll_fails(self, unit_env):
        """Duplicate options should surface as a domain ValidationError."""
        post_service = await unit_env.get(PostService)
        store = await unit_env.get(DocumentStore)
        author = await save_user(store, "u-1", "ada")

        with pytest.raises(ValidationError):
            await post_service.create_post(author, "Pick one", poll_options=["A", "A"])

    @pytest.mark.asyncio
    async def test_publish_generated_post(self, unit_env):
        """Generated posts have no author account."""
        post_service = await unit_env.get(PostService)

        post = await post_service.publish_generated(
            "Weekly digest", "Body", author="Ink Bot", handle="@inkbot"
        )

        assert post.origin == PostOrigin.GENERATED
        assert post.author_id is None


class TestListFeed:
    """Tests for list_feed method."""

    @pytest.mark.asyncio
    async def test_feed_splits_topic_history_and_items(self, unit_env):
        """Newest pinned post is the topic, older ones are history, items newest first."""
        # Arrange
        post_service = await unit_env.get(PostService)
        store = await unit_env.get(DocumentStore)
        await save_post(store, "t-old", Partition.PINNED, created_at=at(1))
        await save_post(store, "t-new", Partition.PINNED, created_at=at(3))
        await save_post(store, "p-1", created_at=at(2))
        await save_post(store, "p-2", created_at=at(4))

        # Act
        feed = await post_service.list_feed()

        # Assert
        assert feed.pinned.id == "t-new"
        assert [p.id for p in feed.history] == ["t-old"]
        assert [p.id for p in feed.items] == ["p-2", "p-1"]

    @pytest.mark.asyncio
    async def test_empty_feed(self, unit_env):
        post_service = await unit_env.get(PostService)

        feed = await post_service.list_feed()

        assert feed.pinned is None
        assert feed.history == []
        assert feed.items == []


class TestDeletePost:
    """Tests for get_post and delete_post."""

    @pytest.mark.asyncio
    async def test_deleted_post_is_not_found(self, unit_env):
        post_service = await unit_env.get(PostService)
        store = await unit_env.get(DocumentStore)
        await save_post(store, "p-1")

        await post_service.delete_post(Partition.FEED, PostId("p-1"))

        with pytest.raises(NotFoundError):
            await post_service.get_post(Partition.FEED, PostId("p-1"))
