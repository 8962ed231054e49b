"""Dependency injection wiring.

Containers are built from PROVIDERS. Concrete entries are used as they
are; component entries are bases whose subclasses are the production and
mock implementations, and one of them is picked per container.
"""

from typing import Collection, Type

from ink.util.di.application import ProdApplicationProvider
from ink.util.di.base import Component, ProviderBase
from ink.util.di.core import ProdConfigProvider
from ink.util.di.domain import ProdDomainProvider
from ink.util.di.infrastructure import PersistenceProvider, ProdPersistenceProvider
from ink.util.error import DependencyInjectionError

PROVIDERS: list[Type[ProviderBase]] = [
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    PersistenceProvider,
]


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Implementation class to instantiate for a PROVIDERS entry.

    Raises:
        DependencyInjectionError: If a component lacks the requested kind
    """
    implementations = {
        getattr(impl, "__is_mock__", False): impl for impl in base.__subclasses__()
    }
    if not implementations:
        return base
    if use_mock not in implementations:
        raise DependencyInjectionError(base.__mock_component__ or base.__name__, use_mock)
    return implementations[use_mock]


def mockable_components() -> set[Component]:
    """Names of the components that can be swapped for mocks."""
    return {p.__mock_component__ for p in PROVIDERS if p.__mock_component__}


def build_providers(mocked: Collection[Component] = ()) -> list[ProviderBase]:
    """One provider instance per PROVIDERS entry.

    Args:
        mocked: Components to build from their mock implementation
    """
    return [
        get_provider(base, use_mock=base.__mock_component__ in mocked)()
        for base in PROVIDERS
    ]


__all__ = [
    "Component",
    "ProviderBase",
    "PROVIDERS",
    "build_providers",
    "get_provider",
    "mockable_components",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdApplicationProvider",
    "PersistenceProvider",
    "ProdPersistenceProvider",
]
