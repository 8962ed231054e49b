"""Base model for all domain entities."""

from datetime import datetime, timezone
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict

M = TypeVar("M", bound="DomainModel")


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class DomainModel(BaseModel):
    """Base class for all domain models.

    Entities are immutable and travel to and from the document store as
    JSON-compatible dicts. The document id is never part of the stored
    fields; entities with an ``id`` field get it from the snapshot key.
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,
    )

    def to_document(self) -> dict[str, Any]:
        """Serialize to stored document fields."""
        return self.model_dump(mode="json", exclude={"id"})

    @classmethod
    def from_document(cls: type[M], doc_id: str, data: dict[str, Any]) -> M:
        """Build the entity from a stored document."""
        if "id" in cls.model_fields:
            return cls.model_validate({**data, "id": doc_id})
        return cls.model_validate(data)
