"""Container construction and FastAPI wiring."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from fastapi import FastAPI

from ink.util.di import build_providers


def create_container() -> AsyncContainer:
    """Production container: real implementation of every component.

    Settings come from the environment when first resolved.
    """
    return make_async_container(*build_providers(), FastapiProvider())


def setup_di(app: FastAPI, container: AsyncContainer) -> None:
    """Attach the container to the app; routes resolve through DishkaRoute."""
    setup_dishka(container, app)


@asynccontextmanager
async def container_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Close the app's container on shutdown, disposing the database engine."""
    yield
    await app.state.dishka_container.close()
