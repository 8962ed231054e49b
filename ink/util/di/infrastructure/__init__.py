"""Infrastructure component providers."""

# Importing the production subclass registers it with its component base
from .persistence import PersistenceProvider, ProdPersistenceProvider

__all__ = [
    "PersistenceProvider",
    "ProdPersistenceProvider",
]
