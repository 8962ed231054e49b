"""Delete post use case."""

import logfire
from pydantic import BaseModel

from ink.domain.error import NotAuthorizedError
from ink.domain.service import PointsService, PostService
from ink.domain.value import Partition, PostId, UserId

from ..base import BaseUseCase


class DeletePostRequest(BaseModel):
    """Delete post request."""

    user_id: str  # Administrator performing the deletion
    email: str | None = None
    partition: Partition
    post_id: str


class DeletePostResponse(BaseModel):
    """Delete post response."""

    post_id: str
    partition: Partition


class DeletePostUseCase(BaseUseCase[DeletePostRequest, DeletePostResponse]):
    """Use case for removing a post from the feed or the topic history."""

    def __init__(self, post_service: PostService, points_service: PointsService) -> None:
        """Initialize delete post use case.

        Args:
            post_service: Post domain service
            points_service: Points service, used to recognise the administrator
        """
        self.post_service = post_service
        self.points_service = points_service

    async def execute(self, request: DeletePostRequest) -> DeletePostResponse:
        """Execute delete flow.

        Likes and ballots of the post are left in place; they no longer
        match any post and are ignored by the feed.

        Raises:
            NotAuthorizedError: If the user is not the administrator
            NotFoundError: If the post does not exist in the partition
        """
        user_id = UserId(request.user_id)
        post_id = PostId(request.post_id)

        with logfire.span("delete_post.execute", user_id=user_id, post_id=post_id):
            if not self.points_service.is_admin(user_id, request.email):
                raise NotAuthorizedError("delete posts", user_id)

            await self.post_service.get_post(request.partition, post_id)
            await self.post_service.delete_post(request.partition, post_id)

            return DeletePostResponse(post_id=post_id, partition=request.partition)
