"""Base class for store-backed domain services."""

from ink.domain.repository import DocumentStore


class Service:
    """Domain service working against the document store.

    Services own the rules that span several documents (a relation record
    and the counter it moves, a profile and its handle reservation) and
    express each rule as one store transaction or batch.
    """

    def __init__(self, store: DocumentStore) -> None:
        self.store = store
