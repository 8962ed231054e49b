"""Point accrual domain service."""

from typing import Optional

import logfire

from ink.config import EngagementSettings, PointSettings
from ink.domain.repository import Collection, DocumentStore
from ink.domain.value import ActionKind, Rank, UserId

from .base import Service

# Lower bound of each rank, highest first
RANK_THRESHOLDS: list[tuple[int, Rank]] = [
    (1_000_000, Rank.MILLION_INK),
    (500_000, Rank.INK_MASTER),
    (100_000, Rank.VISIONARY),
    (50_000, Rank.PRODIGY),
    (10_000, Rank.ANALYST),
    (1_000, Rank.CONTRIBUTOR),
    (1, Rank.TINKERER),
]


def rank_for_points(points: int) -> Rank:
    """Rank shown for a point balance."""
    for threshold, rank in RANK_THRESHOLDS:
        if points >= threshold:
            return rank
    return Rank.NEWCOMER


class PointPolicy:
    """Pure mapping from action kind to point delta."""

    def __init__(self, point_settings: PointSettings) -> None:
        self._deltas = {
            ActionKind.LIKE: point_settings.like,
            ActionKind.SHARE: point_settings.share,
            ActionKind.POST: point_settings.post,
            ActionKind.ASK_AI: point_settings.ask_ai,
            ActionKind.ANALYZE: point_settings.analyze,
            ActionKind.VOTE: point_settings.vote,
        }

    def delta(self, action: ActionKind) -> int:
        """Points awarded for one action."""
        return self._deltas[action]


class PointsService(Service):
    """Domain service applying the point policy to user balances."""

    def __init__(
        self,
        store: DocumentStore,
        policy: PointPolicy,
        engagement_settings: EngagementSettings,
    ) -> None:
        """Initialize points service.

        Args:
            store: Document store
            policy: Point policy
            engagement_settings: Engagement settings naming the administrator
        """
        super().__init__(store)
        self.policy = policy
        self.engagement_settings = engagement_settings

    def is_admin(self, user_id: UserId, email: Optional[str] = None) -> bool:
        """Whether the identity is the site administrator."""
        if user_id in self.engagement_settings.admin_user_ids:
            return True
        admin_emails = {e.lower() for e in self.engagement_settings.admin_emails}
        return email is not None and email.lower() in admin_emails

    def delta_for(self, user_id: UserId, action: ActionKind, email: Optional[str] = None) -> int:
        """Delta the user would receive for an action (0 for the administrator)."""
        if self.is_admin(user_id, email):
            return 0
        return self.policy.delta(action)

    async def award(
        self, user_id: UserId, action: ActionKind, email: Optional[str] = None
    ) -> int:
        """Atomically add the action's points to the user's balance.

        Uses the store's increment primitive, never a read-modify-write.

        Args:
            user_id: User ID
            action: Action performed
            email: User email, used to recognise the administrator

        Returns:
            Points actually added (0 for the administrator)

        Raises:
            NotFoundError: If the user has no profile
            StoreUnavailableError: If the store cannot be reached
        """
        with logfire.span(
            "points_service.award", user_id=user_id, action=action.value
        ):
            delta = self.delta_for(user_id, action, email)
            if delta == 0:
                logfire.info("No points awarded", user_id=user_id, action=action.value)
                return 0

            await self.store.increment(Collection.USERS, user_id, "points", delta)
            logfire.info(
                "Points awarded", user_id=user_id, action=action.value, delta=delta
            )
            return delta
