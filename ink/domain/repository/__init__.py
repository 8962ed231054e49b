"""Store interfaces for the engagement domain.

Interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from ink.domain.repository.collection import Collection
from ink.domain.repository.document import (
    DeleteWrite,
    DocumentSnapshot,
    DocumentStore,
    FieldFilter,
    IncrementWrite,
    SetWrite,
    Transaction,
    TransactionBody,
    UpdateWrite,
    Write,
    WriteBatch,
)

__all__ = [
    "Collection",
    "DeleteWrite",
    "DocumentSnapshot",
    "DocumentStore",
    "FieldFilter",
    "IncrementWrite",
    "SetWrite",
    "Transaction",
    "TransactionBody",
    "UpdateWrite",
    "Write",
    "WriteBatch",
]
