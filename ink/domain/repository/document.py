"""Document store interface.

The engagement service persists everything as schema-less documents
addressed by (collection, id). The store provides atomic increments,
atomic write batches and optimistic transactions; those three
primitives are what keeps shared counters correct under concurrent
sessions.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Literal, Optional, Sequence, TypeVar, Union

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")

FilterOp = Literal["==", "!=", "<", "<=", ">", ">=", "in", "array_contains"]


class DocumentSnapshot(BaseModel):
    """Point-in-time copy of a stored document.

    ``revision`` changes on every committed write, including a delete
    followed by a re-create, so it identifies the exact version read.
    """

    model_config = ConfigDict(frozen=True)

    collection: str
    id: str
    data: dict[str, Any]
    revision: str


@dataclass(frozen=True)
class FieldFilter:
    """Query predicate on a top-level document field."""

    field: str
    op: FilterOp
    value: Any


@dataclass(frozen=True)
class SetWrite:
    """Create or overwrite a document; merge keeps unspecified fields."""

    collection: str
    doc_id: str
    data: dict[str, Any]
    merge: bool = False


@dataclass(frozen=True)
class UpdateWrite:
    """Overwrite some fields of an existing document."""

    collection: str
    doc_id: str
    fields: dict[str, Any]


@dataclass(frozen=True)
class DeleteWrite:
    """Remove a document if present."""

    collection: str
    doc_id: str


@dataclass(frozen=True)
class IncrementWrite:
    """Add ``amount`` to a numeric field of an existing document."""

    collection: str
    doc_id: str
    field: str
    amount: int


Write = Union[SetWrite, UpdateWrite, DeleteWrite, IncrementWrite]


class Transaction(ABC):
    """Read-then-conditional-write unit of work.

    All reads must happen before the first write. The commit succeeds only
    if none of the documents read changed in the meantime.
    """

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Optional[DocumentSnapshot]:
        """Read a document and pin its revision for the commit check."""
        pass

    @abstractmethod
    def set(
        self, collection: str, doc_id: str, data: dict[str, Any], merge: bool = False
    ) -> None:
        pass

    @abstractmethod
    def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        pass

    @abstractmethod
    def delete(self, collection: str, doc_id: str) -> None:
        pass

    @abstractmethod
    def increment(self, collection: str, doc_id: str, field: str, amount: int) -> None:
        pass


class WriteBatch(ABC):
    """Group of writes committed atomically, without reads."""

    @abstractmethod
    def set(
        self, collection: str, doc_id: str, data: dict[str, Any], merge: bool = False
    ) -> "WriteBatch":
        pass

    @abstractmethod
    def update(
        self, collection: str, doc_id: str, fields: dict[str, Any]
    ) -> "WriteBatch":
        pass

    @abstractmethod
    def delete(self, collection: str, doc_id: str) -> "WriteBatch":
        pass

    @abstractmethod
    def increment(
        self, collection: str, doc_id: str, field: str, amount: int
    ) -> "WriteBatch":
        pass

    @abstractmethod
    async def commit(self) -> None:
        """Apply all writes, or none of them.

        Raises:
            NotFoundError: If an update or increment targets a missing document
            StoreUnavailableError: If the store cannot be reached
        """
        pass


TransactionBody = Callable[[Transaction], Awaitable[T]]


class DocumentStore(ABC):
    """Transactional document store.

    Defines the contract the engagement service depends on.
    Implementations live in the persistence layer.
    """

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Optional[DocumentSnapshot]:
        """Fetch a document.

        Returns:
            The document if found, None otherwise
        """
        pass

    @abstractmethod
    async def set(
        self, collection: str, doc_id: str, data: dict[str, Any], merge: bool = False
    ) -> None:
        """Upsert a document.

        Overwrites an existing document unless ``merge`` is set, in which
        case only the given fields change.
        """
        pass

    @abstractmethod
    async def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        """Partially update a document.

        Raises:
            NotFoundError: If the document does not exist
        """
        pass

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> None:
        """Remove a document. No-op if absent."""
        pass

    @abstractmethod
    async def increment(
        self, collection: str, doc_id: str, field: str, amount: int
    ) -> None:
        """Atomically add ``amount`` to a numeric field.

        Concurrent increments never overwrite each other.

        Raises:
            NotFoundError: If the document does not exist
        """
        pass

    @abstractmethod
    async def transaction(self, body: TransactionBody[T]) -> T:
        """Run ``body`` as an optimistic transaction.

        The body is re-run when a document it read was changed before the
        commit, up to an implementation-defined number of attempts.
        Exceptions raised by the body abort the transaction and propagate.

        Returns:
            Whatever the body returned on the committed attempt

        Raises:
            ConflictError: If every attempt lost a race
        """
        pass

    @abstractmethod
    def batch(self) -> WriteBatch:
        """Start a new atomic write batch."""
        pass

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[DocumentSnapshot]:
        """Snapshot query over one collection.

        Documents without the ``order_by`` field are left out.

        Returns:
            Matching documents in the requested order
        """
        pass
