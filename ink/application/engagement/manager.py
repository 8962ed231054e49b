"""Engagement state manager.

Keeps a local, synchronously readable view of what the signed-in user has
already done (liked posts, poll ballots, point balance) and applies every
mutation optimistically: the local view changes first, the durable write
follows, and the local change is reverted if the write fails.
"""

from datetime import datetime
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Sequence

import logfire

from ink.config import EngagementSettings
from ink.domain.error import DomainError
from ink.domain.model import Poll, Post, User, utc_now
from ink.domain.service import EngagementService, PointsService, UserService
from ink.domain.value import ActionKind, Partition, PostId

from ..session import Session, SessionProvider
from .result import EngagementResult, FailureKind


class EngagementStateManager:
    """Per-session cache of the user's engagement, with optimistic mutations.

    Every operation returns an EngagementResult instead of raising for
    expected failures. Unexpected exceptions still roll back the local
    change and propagate.

    A rollback only touches local state if the session has not changed
    since the operation started; state belonging to a newer session is
    never reverted by an older operation.

    Mutations are refused with NOT_READY until the current session has
    been reconciled, so reconciliation never overwrites a change made
    while it was loading. If reconciliation fails, calling ``attach``
    again retries it.
    """

    def __init__(
        self,
        session_provider: SessionProvider,
        user_service: UserService,
        engagement_service: EngagementService,
        points_service: PointsService,
        engagement_settings: EngagementSettings,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize engagement state manager.

        Args:
            session_provider: Source of the signed-in identity
            user_service: User domain service
            engagement_service: Engagement domain service
            points_service: Points domain service
            engagement_settings: Engagement settings (poll window)
            clock: Current time, used for the poll window check
        """
        self.session_provider = session_provider
        self.user_service = user_service
        self.engagement_service = engagement_service
        self.points_service = points_service
        self.engagement_settings = engagement_settings
        self._clock = clock

        self._liked: set[PostId] = set()
        self._voted: dict[PostId, tuple[str, ...]] = {}
        self._balance = 0
        self._profile: Optional[User] = None
        # Bumped on every session transition
        self._generation = 0
        self._reconciled = False
        self._unsubscribe: Optional[Callable[[], None]] = None

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def session(self) -> Optional[Session]:
        return self.session_provider.current

    @property
    def liked_post_ids(self) -> frozenset[PostId]:
        return frozenset(self._liked)

    @property
    def voted_polls(self) -> Mapping[PostId, tuple[str, ...]]:
        return MappingProxyType(dict(self._voted))

    @property
    def point_balance(self) -> int:
        return self._balance

    @property
    def profile(self) -> Optional[User]:
        return self._profile

    @property
    def ready(self) -> bool:
        """Whether a session is signed in and its state has been loaded."""
        return self.session is not None and self._reconciled

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    async def attach(self) -> None:
        """Follow the session provider and reconcile the current session."""
        if self._unsubscribe is None:
            self._unsubscribe = self.session_provider.subscribe(self._on_session_changed)
        await self._on_session_changed(self.session_provider.current)

    def detach(self) -> None:
        """Stop following the session provider."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def _on_session_changed(self, session: Optional[Session]) -> None:
        self._generation += 1
        self._clear()
        if session is not None:
            await self._reconcile(session, self._generation)

    def _clear(self) -> None:
        self._liked = set()
        self._voted = {}
        self._balance = 0
        self._profile = None
        self._reconciled = False

    async def _reconcile(self, session: Session, generation: int) -> None:
        """Load profile, likes and ballots of the session's user.

        Fetches every relation record of the user; likes and votes made
        from other sessions show up here and only here.
        """
        with logfire.span("engagement_state.reconcile", user_id=session.user_id):
            profile, created = await self.user_service.provision_profile(
                session.user_id, session.email, session.display_name
            )
            liked = await self.engagement_service.liked_post_ids(session.user_id)
            voted = await self.engagement_service.voted_polls(session.user_id)

            if generation != self._generation:
                logfire.info("Discarding reconciliation of a replaced session")
                return

            self._profile = profile
            self._balance = profile.points
            self._liked = set(liked)
            self._voted = dict(voted)
            self._reconciled = True
            logfire.info(
                "Engagement state reconciled",
                user_id=session.user_id,
                created=created,
                likes=len(liked),
                votes=len(voted),
            )

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def like(self, post_id: PostId, partition: Partition) -> EngagementResult[None]:
        """Like a post, then award like points."""
        session = self.session
        if session is None:
            return EngagementResult.failed(
                FailureKind.NOT_AUTHENTICATED, "Sign in to like posts"
            )
        if not self._reconciled:
            return self._not_ready()
        if post_id in self._liked:
            return EngagementResult.failed(FailureKind.ALREADY_DONE, "Post already liked")

        generation = self._generation
        self._liked.add(post_id)
        try:
            await self.engagement_service.like(session.user_id, post_id, partition)
        except DomainError as e:
            self._rollback(generation, lambda: self._liked.discard(post_id))
            logfire.warn("Like rolled back", post_id=post_id, error=str(e))
            return EngagementResult.from_error(e)
        except Exception:
            self._rollback(generation, lambda: self._liked.discard(post_id))
            raise

        await self.award(ActionKind.LIKE)
        return EngagementResult.success()

    async def unlike(self, post_id: PostId, partition: Partition) -> EngagementResult[None]:
        """Remove a like from a post."""
        session = self.session
        if session is None:
            return EngagementResult.failed(
                FailureKind.NOT_AUTHENTICATED, "Sign in to unlike posts"
            )
        if not self._reconciled:
            return self._not_ready()
        if post_id not in self._liked:
            return EngagementResult.failed(FailureKind.ALREADY_DONE, "Post is not liked")

        generation = self._generation
        self._liked.discard(post_id)
        try:
            await self.engagement_service.unlike(session.user_id, post_id, partition)
        except DomainError as e:
            self._rollback(generation, lambda: self._liked.add(post_id))
            logfire.warn("Unlike rolled back", post_id=post_id, error=str(e))
            return EngagementResult.from_error(e)
        except Exception:
            self._rollback(generation, lambda: self._liked.add(post_id))
            raise

        return EngagementResult.success()

    async def vote(
        self,
        post_id: PostId,
        partition: Partition,
        options: Sequence[str],
        snapshot: Optional[Post] = None,
    ) -> EngagementResult[Poll]:
        """Cast a ballot, then award vote points.

        Args:
            post_id: Post carrying the poll
            partition: Partition holding the post
            options: Selected option texts
            snapshot: Post as currently displayed; when given, its creation
                time is used to refuse votes after the poll window

        Returns:
            Result carrying the poll with updated counters
        """
        session = self.session
        if session is None:
            return EngagementResult.failed(FailureKind.NOT_AUTHENTICATED, "Sign in to vote")
        if not self._reconciled:
            return self._not_ready()
        if post_id in self._voted:
            return EngagementResult.failed(
                FailureKind.ALREADY_DONE, "Already voted on this poll"
            )
        if snapshot is not None and not snapshot.is_poll_open(
            self._clock(), self.engagement_settings.poll_window_hours
        ):
            return EngagementResult.failed(FailureKind.POLL_CLOSED, "This poll has ended")

        generation = self._generation
        self._voted[post_id] = tuple(options)
        try:
            _, poll = await self.engagement_service.vote(
                session.user_id, post_id, partition, options
            )
        except DomainError as e:
            self._rollback(generation, lambda: self._voted.pop(post_id, None))
            logfire.warn("Vote rolled back", post_id=post_id, error=str(e))
            return EngagementResult.from_error(e)
        except Exception:
            self._rollback(generation, lambda: self._voted.pop(post_id, None))
            raise

        await self.award(ActionKind.VOTE)
        return EngagementResult.success(poll)

    async def pin(self, post: Post) -> EngagementResult[Post]:
        """Pin a feed post as the topic of the day (administrator only)."""
        session = self.session
        if session is None:
            return EngagementResult.failed(
                FailureKind.NOT_AUTHENTICATED, "Sign in to pin posts"
            )
        try:
            pinned = await self.engagement_service.pin(
                session.user_id, post, session.email
            )
        except DomainError as e:
            return EngagementResult.from_error(e)
        return EngagementResult.success(pinned)

    async def award(self, action: ActionKind) -> EngagementResult[int]:
        """Award points for an action to the signed-in user.

        The local balance moves first and is restored if the increment
        fails. Failures are logged and reported, never raised.

        Returns:
            Result carrying the points added (0 for the administrator)
        """
        session = self.session
        if session is None:
            return EngagementResult.failed(
                FailureKind.NOT_AUTHENTICATED, "Sign in to earn points"
            )
        if not self._reconciled:
            return self._not_ready()

        delta = self.points_service.delta_for(session.user_id, action, session.email)
        if delta == 0:
            return EngagementResult.success(0)

        generation = self._generation
        self._balance += delta
        try:
            await self.points_service.award(session.user_id, action, session.email)
        except DomainError as e:
            self._rollback(generation, lambda: self._restore_balance(delta))
            logfire.error(
                "Point award failed",
                user_id=session.user_id,
                action=action.value,
                error=str(e),
            )
            return EngagementResult.from_error(e)
        except Exception:
            self._rollback(generation, lambda: self._restore_balance(delta))
            raise
        return EngagementResult.success(delta)

    def _not_ready(self) -> EngagementResult:
        return EngagementResult.failed(
            FailureKind.NOT_READY, "Your activity is still loading, try again shortly"
        )

    def _restore_balance(self, delta: int) -> None:
        self._balance -= delta

    def _rollback(self, generation: int, revert: Callable[[], object]) -> None:
        if generation != self._generation:
            logfire.info("Skipping rollback for a replaced session")
            return
        revert()
