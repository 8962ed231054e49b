"""Document store implementations."""

from .inmemory import InMemoryDocumentStore
from .sql import SqlDocumentStore

__all__ = [
    "InMemoryDocumentStore",
    "SqlDocumentStore",
]
