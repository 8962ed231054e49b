"""Application layer DI providers."""

from dishka import Scope, provide

from ink.application.engagement import EngagementStateManager
from ink.application.session import SessionProvider
from ink.application.usecase.engagement import (
    LikePostUseCase,
    PinPostUseCase,
    RecordActionUseCase,
    UnlikePostUseCase,
    VotePollUseCase,
)
from ink.application.usecase.post import (
    CreatePostUseCase,
    DeletePostUseCase,
    GetFeedUseCase,
    PublishGeneratedPostUseCase,
)
from ink.application.usecase.user import (
    GetLeaderboardUseCase,
    GetUserProfileUseCase,
    StartSessionUseCase,
    UpdateUserProfileUseCase,
)
from ink.config import EngagementSettings
from ink.domain.service import (
    EngagementService,
    PointsService,
    PostService,
    UserService,
)
from ink.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Session state
    @provide(scope=Scope.REQUEST)
    def get_session_provider(self) -> SessionProvider:
        """Provide an anonymous session provider for the request."""
        return SessionProvider()

    @provide(scope=Scope.REQUEST)
    def get_engagement_state_manager(
        self,
        session_provider: SessionProvider,
        user_service: UserService,
        engagement_service: EngagementService,
        points_service: PointsService,
        engagement_settings: EngagementSettings,
    ) -> EngagementStateManager:
        """Provide engagement state manager bound to the request's session."""
        return EngagementStateManager(
            session_provider=session_provider,
            user_service=user_service,
            engagement_service=engagement_service,
            points_service=points_service,
            engagement_settings=engagement_settings,
        )

    # User use cases
    @provide(scope=Scope.REQUEST)
    def get_start_session_use_case(
        self, session_provider: SessionProvider, manager: EngagementStateManager
    ) -> StartSessionUseCase:
        """Provide start session use case."""
        return StartSessionUseCase(session_provider=session_provider, manager=manager)

    @provide(scope=Scope.REQUEST)
    def get_get_user_profile_use_case(
        self, user_service: UserService
    ) -> GetUserProfileUseCase:
        """Provide get user profile use case."""
        return GetUserProfileUseCase(user_service=user_service)

    @provide(scope=Scope.REQUEST)
    def get_get_leaderboard_use_case(
        self, user_service: UserService
    ) -> GetLeaderboardUseCase:
        """Provide get leaderboard use case."""
        return GetLeaderboardUseCase(user_service=user_service)

    @provide(scope=Scope.REQUEST)
    def get_update_user_profile_use_case(
        self, user_service: UserService
    ) -> UpdateUserProfileUseCase:
        """Provide update user profile use case."""
        return UpdateUserProfileUseCase(user_service=user_service)

    # Post use cases
    @provide(scope=Scope.REQUEST)
    def get_create_post_use_case(
        self,
        post_service: PostService,
        user_service: UserService,
        points_service: PointsService,
        engagement_settings: EngagementSettings,
    ) -> CreatePostUseCase:
        """Provide create post use case."""
        return CreatePostUseCase(
            post_service=post_service,
            user_service=user_service,
            points_service=points_service,
            engagement_settings=engagement_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_get_feed_use_case(
        self,
        post_service: PostService,
        engagement_service: EngagementService,
        engagement_settings: EngagementSettings,
    ) -> GetFeedUseCase:
        """Provide get feed use case."""
        return GetFeedUseCase(
            post_service=post_service,
            engagement_service=engagement_service,
            engagement_settings=engagement_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_delete_post_use_case(
        self, post_service: PostService, points_service: PointsService
    ) -> DeletePostUseCase:
        """Provide delete post use case."""
        return DeletePostUseCase(
            post_service=post_service, points_service=points_service
        )

    @provide(scope=Scope.REQUEST)
    def get_publish_generated_post_use_case(
        self,
        post_service: PostService,
        points_service: PointsService,
        engagement_settings: EngagementSettings,
    ) -> PublishGeneratedPostUseCase:
        """Provide publish generated post use case."""
        return PublishGeneratedPostUseCase(
            post_service=post_service,
            points_service=points_service,
            engagement_settings=engagement_settings,
        )

    # Engagement use cases
    @provide(scope=Scope.REQUEST)
    def get_like_post_use_case(
        self,
        engagement_service: EngagementService,
        post_service: PostService,
        points_service: PointsService,
    ) -> LikePostUseCase:
        """Provide like post use case."""
        return LikePostUseCase(
            engagement_service=engagement_service,
            post_service=post_service,
            points_service=points_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_unlike_post_use_case(
        self, engagement_service: EngagementService, post_service: PostService
    ) -> UnlikePostUseCase:
        """Provide unlike post use case."""
        return UnlikePostUseCase(
            engagement_service=engagement_service, post_service=post_service
        )

    @provide(scope=Scope.REQUEST)
    def get_vote_poll_use_case(
        self,
        engagement_service: EngagementService,
        post_service: PostService,
        points_service: PointsService,
        engagement_settings: EngagementSettings,
    ) -> VotePollUseCase:
        """Provide vote poll use case."""
        return VotePollUseCase(
            engagement_service=engagement_service,
            post_service=post_service,
            points_service=points_service,
            engagement_settings=engagement_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_pin_post_use_case(
        self, engagement_service: EngagementService, post_service: PostService
    ) -> PinPostUseCase:
        """Provide pin post use case."""
        return PinPostUseCase(
            engagement_service=engagement_service, post_service=post_service
        )

    @provide(scope=Scope.REQUEST)
    def get_record_action_use_case(
        self, points_service: PointsService, user_service: UserService
    ) -> RecordActionUseCase:
        """Provide record action use case."""
        return RecordActionUseCase(
            points_service=points_service, user_service=user_service
        )
