"""Base use case."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel

RequestT = TypeVar("RequestT", bound=BaseModel)
ResponseT = TypeVar("ResponseT", bound=BaseModel)


class BaseUseCase(ABC, Generic[RequestT, ResponseT]):
    """One request/response flow over the domain services.

    Expected failures are raised as domain errors; the interface layer
    turns them into HTTP responses.
    """

    @abstractmethod
    async def execute(self, request: RequestT) -> ResponseT:
        pass
