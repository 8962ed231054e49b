"""Post domain service."""

from dataclasses import dataclass, field
from typing import Optional, Sequence
from uuid import uuid4

import logfire

from ink.domain.error import NotFoundError, ValidationError
from ink.domain.model import Poll, Post, User
from ink.domain.repository import DocumentStore
from ink.domain.value import Partition, PostId, PostOrigin

from .base import Service


def new_post_id() -> PostId:
    """Generate a document id for a new post."""
    return PostId(uuid4().hex)


@dataclass
class Feed:
    """What the feed page shows.

    The newest pinned post is the topic of the day; older pinned posts
    form the topic history.
    """

    pinned: Optional[Post]
    history: list[Post] = field(default_factory=list)
    items: list[Post] = field(default_factory=list)


class PostService(Service):
    """Domain service for post operations."""

    def __init__(self, store: DocumentStore) -> None:
        """Initialize post service.

        Args:
            store: Document store
        """
        super().__init__(store)

    async def create_post(
        self,
        author: User,
        headline: str,
        content: str = "",
        image_url: Optional[str] = None,
        poll_options: Optional[Sequence[str]] = None,
        allow_multiple: bool = False,
    ) -> Post:
        """Create a user post in the feed.

        Args:
            author: Author profile
            headline: Headline, or the question when a poll is attached
            content: Body text
            image_url: Optional image reference
            poll_options: Option texts when the post is a poll
            allow_multiple: Whether voters may pick several options

        Returns:
            Created post

        Raises:
            ValidationError: If the post or its poll is malformed
        """
        with logfire.span("post_service.create_post", author_id=author.id):
            try:
                post = Post(
                    id=new_post_id(),
                    partition=Partition.FEED,
                    origin=PostOrigin.USER,
                    author_id=author.id,
                    author=author.display_name or author.handle.name,
                    handle=author.handle.root,
                    headline=headline,
                    content=content,
                    image_url=image_url,
                    poll=(
                        Poll.from_texts(poll_options, allow_multiple)
                        if poll_options
                        else None
                    ),
                )
            except ValueError as e:
                raise ValidationError(str(e)) from e

            await self.store.set(Partition.FEED.collection, post.id, post.to_document())
            logfire.info("Post created", post_id=post.id, has_poll=post.poll is not None)
            return post

    async def publish_generated(
        self,
        headline: str,
        content: str,
        author: str,
        handle: str,
        image_url: Optional[str] = None,
    ) -> Post:
        """Store a post produced by a content-generation flow.

        Generated posts have no author account and are never deleted when
        pinned.
        """
        with logfire.span("post_service.publish_generated"):
            try:
                post = Post(
                    id=new_post_id(),
                    partition=Partition.FEED,
                    origin=PostOrigin.GENERATED,
                    author=author,
                    handle=handle,
                    headline=headline,
                    content=content,
                    image_url=image_url,
                )
            except ValueError as e:
                raise ValidationError(str(e)) from e

            await self.store.set(Partition.FEED.collection, post.id, post.to_document())
            logfire.info("Generated post published", post_id=post.id)
            return post

    async def get_post(self, partition: Partition, post_id: PostId) -> Post:
        """Get a post.

        Raises:
            NotFoundError: If the post does not exist in that partition
        """
        snapshot = await self.store.get(partition.collection, post_id)
        if snapshot is None:
            raise NotFoundError("Post", post_id)
        return Post.from_document(snapshot.id, snapshot.data)

    async def list_feed(self) -> Feed:
        """Pinned topic, topic history and feed items, newest first."""
        with logfire.span("post_service.list_feed"):
            pinned = [
                Post.from_document(s.id, s.data)
                for s in await self.store.query(
                    Partition.PINNED.collection, order_by="created_at", descending=True
                )
            ]
            items = [
                Post.from_document(s.id, s.data)
                for s in await self.store.query(
                    Partition.FEED.collection, order_by="created_at", descending=True
                )
            ]

            topic = pinned[0] if pinned else None
            if topic is not None:
                items = [item for item in items if item.id != topic.id]

            logfire.info("Feed loaded", pinned=len(pinned), items=len(items))
            return Feed(pinned=topic, history=pinned[1:], items=items)

    async def delete_post(self, partition: Partition, post_id: PostId) -> None:
        """Delete a post (administrative). No-op if absent."""
        with logfire.span("post_service.delete_post", post_id=post_id):
            await self.store.delete(partition.collection, post_id)
            logfire.info("Post deleted", post_id=post_id, partition=partition.value)
