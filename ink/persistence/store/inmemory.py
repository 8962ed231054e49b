"""In-memory document store for testing."""

import asyncio
import copy
from typing import Any, Optional, Sequence

from ink.domain.repository import DocumentSnapshot, Write
from ink.persistence.store.common import (
    DocKey,
    RevisionedDocumentStore,
    TransactionConflictError,
    apply_write,
    new_revision,
)


class InMemoryDocumentStore(RevisionedDocumentStore):
    """In-memory implementation of DocumentStore for testing.

    Reads yield to the event loop, so transactions started together with
    ``asyncio.gather`` interleave and exercise the conflict path.
    """

    def __init__(self, max_transaction_attempts: int = 5) -> None:
        super().__init__(max_transaction_attempts)
        self._documents: dict[DocKey, tuple[dict[str, Any], str]] = {}
        self._lock = asyncio.Lock()

    def _snapshot(self, key: DocKey) -> Optional[DocumentSnapshot]:
        entry = self._documents.get(key)
        if entry is None:
            return None
        data, revision = entry
        return DocumentSnapshot(
            collection=key[0], id=key[1], data=copy.deepcopy(data), revision=revision
        )

    async def read_document(
        self, collection: str, doc_id: str
    ) -> Optional[DocumentSnapshot]:
        await asyncio.sleep(0)
        return self._snapshot((collection, doc_id))

    async def scan(self, collection: str) -> list[DocumentSnapshot]:
        await asyncio.sleep(0)
        snapshots = []
        for key, (data, revision) in sorted(self._documents.items()):
            if key[0] == collection:
                snapshots.append(
                    DocumentSnapshot(
                        collection=collection,
                        id=key[1],
                        data=copy.deepcopy(data),
                        revision=revision,
                    )
                )
        return snapshots

    async def commit_writes(
        self, writes: Sequence[Write], expected: dict[DocKey, Optional[str]]
    ) -> None:
        async with self._lock:
            for key, revision in expected.items():
                entry = self._documents.get(key)
                current = entry[1] if entry else None
                if current != revision:
                    raise TransactionConflictError(f"{key[0]}/{key[1]} changed")

            # Stage everything first so a failing write leaves nothing behind
            staged: dict[DocKey, Optional[dict[str, Any]]] = {}
            for write in writes:
                key = (write.collection, write.doc_id)
                if key in staged:
                    current_data = staged[key]
                else:
                    entry = self._documents.get(key)
                    current_data = entry[0] if entry else None
                staged[key] = apply_write(current_data, write)

            for key, data in staged.items():
                if data is None:
                    self._documents.pop(key, None)
                else:
                    self._documents[key] = (data, new_revision())
