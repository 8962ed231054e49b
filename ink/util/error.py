"""Errors raised while wiring the service together.

These never reach API clients: they stop the process at startup or
fail a test container build.
"""


class UtilError(Exception):
    """Base class for infrastructure errors."""

    pass


class ConfigurationError(UtilError):
    """Settings are unusable for the current environment."""

    pass


class DependencyInjectionError(UtilError):
    """A DI component has no implementation of the requested kind."""

    def __init__(self, component: str, mock: bool):
        self.component = component
        self.mock = mock
        kind = "mock" if mock else "production"
        super().__init__(f"No {kind} implementation for component '{component}'")
