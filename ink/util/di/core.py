"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from ink.config import (
    AuthSettings,
    EngagementSettings,
    PointSettings,
    Settings,
    StoreSettings,
)
from ink.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings."""
        return settings.auth

    @provide(scope=Scope.APP)
    def provide_store_settings(self, settings: Settings) -> StoreSettings:
        """Provide document store settings."""
        return settings.store

    @provide(scope=Scope.APP)
    def provide_engagement_settings(self, settings: Settings) -> EngagementSettings:
        """Provide engagement rules."""
        return settings.engagement

    @provide(scope=Scope.APP)
    def provide_point_settings(self, settings: Settings) -> PointSettings:
        """Provide point deltas."""
        return settings.points
