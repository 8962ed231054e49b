"""Start session use case."""

from datetime import datetime

import logfire
from pydantic import BaseModel

from ink.domain.error import ConflictError
from ink.domain.service import rank_for_points
from ink.domain.value import Badge, Rank, UserId

from ...engagement import EngagementStateManager
from ..base import BaseUseCase
from ...session import Session, SessionProvider


class StartSessionRequest(BaseModel):
    """Start session request, built from a verified identity token."""

    user_id: str
    email: str | None = None
    display_name: str | None = None


class StartSessionResponse(BaseModel):
    """Signed-in user's profile and engagement state."""

    user_id: str
    handle: str
    display_name: str | None
    email: str | None
    public_name: bool
    badge: Badge | None
    points: int
    rank: Rank
    created_at: datetime
    liked_post_ids: list[str]
    voted_polls: dict[str, list[str]]


class StartSessionUseCase(BaseUseCase[StartSessionRequest, StartSessionResponse]):
    """Use case for signing a user in.

    Provisions the profile on first sign-in (handle allocation included)
    and reconciles the user's likes and ballots.
    """

    def __init__(
        self, session_provider: SessionProvider, manager: EngagementStateManager
    ) -> None:
        """Initialize start session use case.

        Args:
            session_provider: Session identity provider of this request
            manager: Engagement state manager bound to that provider
        """
        self.session_provider = session_provider
        self.manager = manager

    async def execute(self, request: StartSessionRequest) -> StartSessionResponse:
        """Execute sign-in flow.

        Raises:
            ConflictError: If no handle could be reserved, or the session was
                replaced before its state loaded
            StoreUnavailableError: If the store cannot be reached
        """
        session = Session(
            user_id=UserId(request.user_id),
            email=request.email,
            display_name=request.display_name,
        )

        with logfire.span("start_session.execute", user_id=session.user_id):
            await self.manager.attach()
            try:
                await self.session_provider.sign_in(session)
                profile = self.manager.profile
                if profile is None:
                    raise ConflictError(
                        f"Session of user {session.user_id} was replaced during sign-in"
                    )

                return StartSessionResponse(
                    user_id=profile.id,
                    handle=profile.handle.root,
                    display_name=profile.display_name,
                    email=profile.email,
                    public_name=profile.public_name,
                    badge=profile.badge,
                    points=self.manager.point_balance,
                    rank=rank_for_points(self.manager.point_balance),
                    created_at=profile.created_at,
                    liked_post_ids=sorted(self.manager.liked_post_ids),
                    voted_polls={
                        post_id: list(options)
                        for post_id, options in self.manager.voted_polls.items()
                    },
                )
            finally:
                self.manager.detach()
