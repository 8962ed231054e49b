"""Helpers shared by engagement use cases."""

from typing import Optional

import logfire

from ink.domain.error import DomainError
from ink.domain.service import PointsService
from ink.domain.value import ActionKind, UserId


async def award_quietly(
    points_service: PointsService,
    user_id: UserId,
    action: ActionKind,
    email: Optional[str] = None,
) -> int:
    """Award points for an action that already succeeded.

    A failed award does not undo the action; it is logged and reported
    as zero points.
    """
    try:
        return await points_service.award(user_id, action, email)
    except DomainError as e:
        logfire.error(
            "Point award failed", user_id=user_id, action=action.value, error=str(e)
        )
        return 0
