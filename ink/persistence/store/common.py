"""Shared machinery for revision-checked document stores.

Concrete stores only need to read documents, scan a collection and
commit a list of writes guarded by expected revisions. Transactions,
batches, retries and query evaluation are built on top of that here.
"""

import copy
from abc import abstractmethod
from typing import Any, Optional, Sequence
from uuid import uuid4

import logfire

from ink.domain.error import ConflictError, NotFoundError, ValidationError
from ink.domain.repository import (
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

DocKey = tuple[str, str]


class TransactionConflictError(Exception):
    """A document read by a transaction changed before its commit.

    Internal to the stores: it triggers a retry and is turned into
    ConflictError once the attempt budget is spent.
    """

    pass


def new_revision() -> str:
    """Fresh opaque revision token."""
    return uuid4().hex


def apply_write(current: Optional[dict[str, Any]], write: Write) -> Optional[dict[str, Any]]:
    """Compute a document's new fields after one write.

    Args:
        current: Current fields, or None if the document does not exist
        write: Write to apply

    Returns:
        New fields, or None if the document is deleted

    Raises:
        NotFoundError: If an update or increment targets a missing document
        ValidationError: If an increment targets a non-numeric field
    """
    if isinstance(write, SetWrite):
        if write.merge and current is not None:
            return {**current, **copy.deepcopy(write.data)}
        return copy.deepcopy(write.data)

    if isinstance(write, DeleteWrite):
        return None

    if current is None:
        raise NotFoundError("Document", f"{write.collection}/{write.doc_id}")

    if isinstance(write, UpdateWrite):
        return {**current, **copy.deepcopy(write.fields)}

    if isinstance(write, IncrementWrite):
        value = current.get(write.field, 0)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(
                f"Cannot increment non-numeric field '{write.field}' "
                f"of {write.collection}/{write.doc_id}"
            )
        return {**current, write.field: value + write.amount}

    raise TypeError(f"Unknown write: {write!r}")


def matches(data: dict[str, Any], field_filter: FieldFilter) -> bool:
    """Evaluate one filter against document fields.

    A missing field never matches.
    """
    if field_filter.field not in data:
        return False
    value = data[field_filter.field]
    op = field_filter.op
    try:
        if op == "==":
            return value == field_filter.value
        if op == "!=":
            return value != field_filter.value
        if op == "<":
            return value < field_filter.value
        if op == "<=":
            return value <= field_filter.value
        if op == ">":
            return value > field_filter.value
        if op == ">=":
            return value >= field_filter.value
        if op == "in":
            return value in field_filter.value
        if op == "array_contains":
            return isinstance(value, list) and field_filter.value in value
    except TypeError:
        # Mixed types never compare, same as an index lookup would
        return False
    raise ValueError(f"Unsupported filter operator: {op}")


def run_query(
    snapshots: Sequence[DocumentSnapshot],
    filters: Sequence[FieldFilter],
    order_by: Optional[str],
    descending: bool,
    limit: Optional[int],
) -> list[DocumentSnapshot]:
    """Filter, order and truncate a collection scan."""
    results = [s for s in snapshots if all(matches(s.data, f) for f in filters)]
    if order_by is not None:
        results = [s for s in results if s.data.get(order_by) is not None]
        results.sort(key=lambda s: s.data[order_by], reverse=descending)
    if limit is not None:
        results = results[:limit]
    return results


class BufferedTransaction(Transaction):
    """Transaction that records read revisions and buffers writes."""

    def __init__(self, store: "RevisionedDocumentStore") -> None:
        self._store = store
        self.reads: dict[DocKey, Optional[str]] = {}
        self.writes: list[Write] = []

    async def get(self, collection: str, doc_id: str) -> Optional[DocumentSnapshot]:
        if self.writes:
            raise ValueError("Transaction reads must happen before any write")
        snapshot = await self._store.read_document(collection, doc_id)
        # The first read pins the revision; a later re-read cannot hide a change
        self.reads.setdefault(
            (collection, doc_id), snapshot.revision if snapshot else None
        )
        return snapshot

    def set(
        self, collection: str, doc_id: str, data: dict[str, Any], merge: bool = False
    ) -> None:
        self.writes.append(SetWrite(collection, doc_id, data, merge))

    def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        self.writes.append(UpdateWrite(collection, doc_id, fields))

    def delete(self, collection: str, doc_id: str) -> None:
        self.writes.append(DeleteWrite(collection, doc_id))

    def increment(self, collection: str, doc_id: str, field: str, amount: int) -> None:
        self.writes.append(IncrementWrite(collection, doc_id, field, amount))


class BufferedWriteBatch(WriteBatch):
    """Write batch committed through the store's blind-write path."""

    def __init__(self, store: "RevisionedDocumentStore") -> None:
        self._store = store
        self._writes: list[Write] = []
        self._committed = False

    def set(
        self, collection: str, doc_id: str, data: dict[str, Any], merge: bool = False
    ) -> "BufferedWriteBatch":
        self._writes.append(SetWrite(collection, doc_id, data, merge))
        return self

    def update(
        self, collection: str, doc_id: str, fields: dict[str, Any]
    ) -> "BufferedWriteBatch":
        self._writes.append(UpdateWrite(collection, doc_id, fields))
        return self

    def delete(self, collection: str, doc_id: str) -> "BufferedWriteBatch":
        self._writes.append(DeleteWrite(collection, doc_id))
        return self

    def increment(
        self, collection: str, doc_id: str, field: str, amount: int
    ) -> "BufferedWriteBatch":
        self._writes.append(IncrementWrite(collection, doc_id, field, amount))
        return self

    async def commit(self) -> None:
        if self._committed:
            raise ValueError("Write batch already committed")
        self._committed = True
        await self._store.write(self._writes)


class RevisionedDocumentStore(DocumentStore):
    """Document store built on revision-checked commits.

    Subclasses implement ``read_document``, ``scan`` and ``commit_writes``.
    """

    def __init__(self, max_transaction_attempts: int = 5) -> None:
        self.max_transaction_attempts = max_transaction_attempts

    @abstractmethod
    async def read_document(
        self, collection: str, doc_id: str
    ) -> Optional[DocumentSnapshot]:
        pass

    @abstractmethod
    async def scan(self, collection: str) -> list[DocumentSnapshot]:
        """All documents of a collection."""
        pass

    @abstractmethod
    async def commit_writes(
        self, writes: Sequence[Write], expected: dict[DocKey, Optional[str]]
    ) -> None:
        """Atomically apply writes if every expected revision still holds.

        ``expected`` maps document keys to the revision read, or None when
        the document was absent.

        Raises:
            TransactionConflictError: If any expected revision changed
            NotFoundError: If an update or increment targets a missing document
        """
        pass

    async def get(self, collection: str, doc_id: str) -> Optional[DocumentSnapshot]:
        return await self.read_document(collection, doc_id)

    async def set(
        self, collection: str, doc_id: str, data: dict[str, Any], merge: bool = False
    ) -> None:
        await self.write([SetWrite(collection, doc_id, data, merge)])

    async def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        await self.write([UpdateWrite(collection, doc_id, fields)])

    async def delete(self, collection: str, doc_id: str) -> None:
        await self.write([DeleteWrite(collection, doc_id)])

    async def increment(
        self, collection: str, doc_id: str, field: str, amount: int
    ) -> None:
        await self.write([IncrementWrite(collection, doc_id, field, amount)])

    def batch(self) -> WriteBatch:
        return BufferedWriteBatch(self)

    async def query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[DocumentSnapshot]:
        return run_query(await self.scan(collection), filters, order_by, descending, limit)

    async def write(self, writes: Sequence[Write]) -> None:
        """Commit writes that do not depend on any read.

        Only physical races (e.g. two inserts of the same key) can
        conflict here, and re-applying blind writes is safe.
        """
        for _ in range(self.max_transaction_attempts):
            try:
                await self.commit_writes(writes, {})
                return
            except TransactionConflictError:
                continue
        raise ConflictError(
            f"Write failed after {self.max_transaction_attempts} conflicting attempts"
        )

    async def transaction(self, body: TransactionBody):
        for attempt in range(1, self.max_transaction_attempts + 1):
            txn = BufferedTransaction(self)
            result = await body(txn)
            try:
                await self.commit_writes(txn.writes, txn.reads)
            except TransactionConflictError as e:
                logfire.debug("Transaction conflict", attempt=attempt, reason=str(e))
                continue
            return result

        logfire.warn(
            "Transaction abandoned after repeated conflicts",
            attempts=self.max_transaction_attempts,
        )
        raise ConflictError(
            f"Transaction failed after {self.max_transaction_attempts} conflicting attempts"
        )
