"""Logfire setup.

Services open one span per operation, named ``<service>.<operation>``,
and log events inside it:

    with logfire.span("engagement_service.vote", user_id=user_id, post_id=post_id):
        ...
        logfire.info("Vote recorded", post_id=post_id)
"""

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from ink import __version__
from ink.config import Settings


def should_send(settings: Settings) -> bool:
    """Whether spans leave the process.

    An explicit OBSERVABILITY__SEND_TO_LOGFIRE wins; otherwise spans are
    sent exactly when a token is configured.
    """
    if settings.observability.send_to_logfire is not None:
        return settings.observability.send_to_logfire
    return bool(settings.observability.logfire_token)


def configure_logfire(settings: Settings) -> None:
    """Configure logfire for this process. Call once, before create_app."""
    logfire.configure(
        service_name="ink-engagement",
        service_version=__version__,
        environment=settings.environment,
        send_to_logfire=should_send(settings),
        token=settings.observability.logfire_token,
        console=logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    )
    logfire.info(
        "Observability configured",
        environment=settings.environment,
        git_sha=settings.git_sha,
        send_to_logfire=should_send(settings),
    )


def instrument_fastapi(app: FastAPI) -> None:
    """Trace every HTTP request except health probes."""
    logfire.instrument_fastapi(app, capture_headers=False, excluded_urls="/health")


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace the statements issued by the SQL document store."""
    logfire.instrument_sqlalchemy(engine=engine.sync_engine)
