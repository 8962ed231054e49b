"""Record action use case."""

from pydantic import BaseModel

from ink.domain.error import ValidationError
from ink.domain.service import PointsService, UserService
from ink.domain.value import ActionKind, UserId

from ..base import BaseUseCase

# Actions without a durable record of their own; the rest are awarded by
# the like, vote and post flows
RECORDABLE_ACTIONS = {ActionKind.SHARE, ActionKind.ASK_AI, ActionKind.ANALYZE}


class RecordActionRequest(BaseModel):
    """Record action request."""

    user_id: str  # User ID from authenticated user
    email: str | None = None
    action: ActionKind


class RecordActionResponse(BaseModel):
    """Record action response."""

    action: ActionKind
    points_awarded: int
    points: int


class RecordActionUseCase(
    BaseUseCase[RecordActionRequest, RecordActionResponse]
):
    """Use case for awarding points for share, ask-AI and analyze actions."""

    def __init__(self, points_service: PointsService, user_service: UserService) -> None:
        """Initialize record action use case.

        Args:
            points_service: Points domain service
            user_service: User domain service
        """
        self.points_service = points_service
        self.user_service = user_service

    async def execute(self, request: RecordActionRequest) -> RecordActionResponse:
        """Execute record action flow.

        Raises:
            ValidationError: If the action is awarded by another flow
            NotFoundError: If the user has no profile
        """
        if request.action not in RECORDABLE_ACTIONS:
            raise ValidationError(
                f"Points for '{request.action.value}' are awarded automatically"
            )

        user_id = UserId(request.user_id)
        delta = await self.points_service.award(user_id, request.action, request.email)
        profile = await self.user_service.get_profile(user_id)

        return RecordActionResponse(
            action=request.action, points_awarded=delta, points=profile.points
        )
