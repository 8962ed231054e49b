"""SQLAlchemy-backed document store.

All collections live in the ``documents`` table. A commit locks every
touched row, checks the revisions the caller read, and applies its writes
inside one database transaction.
"""

from typing import Any, Optional, Sequence

import logfire
from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ink.domain.error import StoreUnavailableError
from ink.domain.model import utc_now
from ink.domain.repository import DocumentSnapshot, Write
from ink.persistence.store.common import (
    DocKey,
    RevisionedDocumentStore,
    TransactionConflictError,
    apply_write,
    new_revision,
)
from ink.persistence.tables import documents_table


def _key_clause(key: DocKey):
    collection, doc_id = key
    return (documents_table.c.collection == collection) & (
        documents_table.c.doc_id == doc_id
    )


def _row_to_snapshot(row: RowMapping) -> DocumentSnapshot:
    return DocumentSnapshot(
        collection=row["collection"],
        id=row["doc_id"],
        data=dict(row["data"]),
        revision=row["revision"],
    )


class SqlDocumentStore(RevisionedDocumentStore):
    """Document store implementation on a relational database."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        max_transaction_attempts: int = 5,
    ) -> None:
        super().__init__(max_transaction_attempts)
        self._session_factory = session_factory

    async def read_document(
        self, collection: str, doc_id: str
    ) -> Optional[DocumentSnapshot]:
        stmt = select(documents_table).where(_key_clause((collection, doc_id)))
        try:
            async with self._session_factory() as session:
                row = (await session.execute(stmt)).mappings().first()
        except SQLAlchemyError as e:
            logfire.error(
                "Document read failed", collection=collection, doc_id=doc_id, error=str(e)
            )
            raise StoreUnavailableError(f"Cannot read {collection}/{doc_id}") from e
        return _row_to_snapshot(row) if row else None

    async def scan(self, collection: str) -> list[DocumentSnapshot]:
        stmt = (
            select(documents_table)
            .where(documents_table.c.collection == collection)
            .order_by(documents_table.c.doc_id)
        )
        try:
            async with self._session_factory() as session:
                rows = (await session.execute(stmt)).mappings().all()
        except SQLAlchemyError as e:
            logfire.error("Collection scan failed", collection=collection, error=str(e))
            raise StoreUnavailableError(f"Cannot read {collection}") from e
        return [_row_to_snapshot(row) for row in rows]

    async def commit_writes(
        self, writes: Sequence[Write], expected: dict[DocKey, Optional[str]]
    ) -> None:
        # Lock in a fixed order so concurrent commits cannot deadlock
        keys = sorted({(w.collection, w.doc_id) for w in writes} | set(expected))
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    current: dict[DocKey, Optional[RowMapping]] = {}
                    for key in keys:
                        stmt = (
                            select(documents_table)
                            .where(_key_clause(key))
                            .with_for_update()
                        )
                        current[key] = (await session.execute(stmt)).mappings().first()

                    for key, revision in expected.items():
                        row = current[key]
                        if (row["revision"] if row else None) != revision:
                            raise TransactionConflictError(f"{key[0]}/{key[1]} changed")

                    staged: dict[DocKey, Optional[dict[str, Any]]] = {}
                    for write in writes:
                        key = (write.collection, write.doc_id)
                        if key in staged:
                            base = staged[key]
                        else:
                            row = current[key]
                            base = dict(row["data"]) if row else None
                        staged[key] = apply_write(base, write)

                    await self._apply(session, staged, current)
        except IntegrityError as e:
            # Another commit inserted the same key first
            raise TransactionConflictError(str(e)) from e
        except SQLAlchemyError as e:
            logfire.error("Document commit failed", writes=len(writes), error=str(e))
            raise StoreUnavailableError("Cannot commit writes") from e

    async def _apply(
        self,
        session: AsyncSession,
        staged: dict[DocKey, Optional[dict[str, Any]]],
        current: dict[DocKey, Optional[RowMapping]],
    ) -> None:
        now = utc_now()
        for key, data in staged.items():
            row = current[key]
            if data is None:
                if row is not None:
                    await session.execute(delete(documents_table).where(_key_clause(key)))
            elif row is None:
                await session.execute(
                    insert(documents_table).values(
                        collection=key[0],
                        doc_id=key[1],
                        data=data,
                        revision=new_revision(),
                        updated_at=now,
                    )
                )
            else:
                result = await session.execute(
                    update(documents_table)
                    .where(_key_clause(key))
                    .where(documents_table.c.revision == row["revision"])
                    .values(data=data, revision=new_revision(), updated_at=now)
                )
                if result.rowcount != 1:
                    raise TransactionConflictError(f"{key[0]}/{key[1]} changed")
