"""Test configuration and fixtures."""

from datetime import datetime
from typing import Optional, Sequence

import logfire

from ink.domain.model import Poll, Post, User
from ink.domain.repository import Collection, DocumentStore
from ink.domain.value import Handle, Partition, PostId, PostOrigin, UserId

# Keep spans local during tests
logfire.configure(send_to_logfire=False, console=False)

ADMIN_USER_ID = "admin-user"
ADMIN_EMAIL = "admin@techink.dev"


async def save_user(
    store: DocumentStore,
    user_id: str,
    handle: str,
    points: int = 0,
    display_name: Optional[str] = None,
    public_name: bool = True,
) -> User:
    """Store a profile and its handle reservation."""
    user = User(
        id=UserId(user_id),
        handle=Handle.from_name(handle),
        display_name=display_name,
        points=points,
        public_name=public_name,
    )
    await store.set(Collection.USERS, user.id, user.to_document())
    await store.set(Collection.HANDLES, user.handle.name, {"user_id": user.id})
    return user


async def save_post(
    store: DocumentStore,
    post_id: str,
    partition: Partition = Partition.FEED,
    origin: PostOrigin = PostOrigin.USER,
    likes: int = 0,
    poll_options: Optional[Sequence[str]] = None,
    allow_multiple: bool = False,
    created_at: Optional[datetime] = None,
    headline: str = "Test Post",
) -> Post:
    """Store a post directly, bypassing PostService."""
    fields = {}
    if created_at is not None:
        fields["created_at"] = created_at
    post = Post(
        id=PostId(post_id),
        partition=partition,
        origin=origin,
        author_id=UserId("author") if origin == PostOrigin.USER else None,
        author="Author",
        handle="@author",
        headline=headline,
        likes=likes,
        poll=Poll.from_texts(poll_options, allow_multiple) if poll_options else None,
        **fields,
    )
    await store.set(partition.collection, post.id, post.to_document())
    return post
