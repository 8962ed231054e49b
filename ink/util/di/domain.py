"""Domain layer DI providers."""

from dishka import Scope, provide

from ink.config import AuthSettings, EngagementSettings, PointSettings
from ink.domain.repository import DocumentStore
from ink.domain.service import (
    EngagementService,
    JWTService,
    PointPolicy,
    PointsService,
    PostService,
    UserService,
)
from ink.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped; the document store they share is
    APP-scoped and safe to use from concurrent requests.
    """

    scope = Scope.REQUEST

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide(scope=Scope.APP)
    def get_point_policy(self, point_settings: PointSettings) -> PointPolicy:
        """Provide the point accrual policy."""
        return PointPolicy(point_settings)

    @provide
    def get_points_service(
        self,
        store: DocumentStore,
        policy: PointPolicy,
        engagement_settings: EngagementSettings,
    ) -> PointsService:
        """Provide points domain service."""
        return PointsService(
            store=store, policy=policy, engagement_settings=engagement_settings
        )

    @provide
    def get_user_service(
        self, store: DocumentStore, engagement_settings: EngagementSettings
    ) -> UserService:
        """Provide user domain service."""
        return UserService(store=store, engagement_settings=engagement_settings)

    @provide
    def get_post_service(self, store: DocumentStore) -> PostService:
        """Provide post domain service."""
        return PostService(store=store)

    @provide
    def get_engagement_service(
        self, store: DocumentStore, points_service: PointsService
    ) -> EngagementService:
        """Provide engagement domain service."""
        return EngagementService(store=store, points_service=points_service)
