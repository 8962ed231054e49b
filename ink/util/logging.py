"""Standard library logging setup.

Application events go through logfire; this only shapes what uvicorn,
alembic and SQLAlchemy print through ``logging``.
"""

import logging
import sys

from ink.config import Settings

# Libraries that log every request or statement at INFO
_NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "alembic.runtime.migration")


def setup_logging(settings: Settings) -> None:
    """Configure root logging for the process.

    DEBUG when ``settings.debug`` is set, WARNING in production and INFO
    elsewhere. Noisy library loggers stay at WARNING unless debugging.
    """
    if settings.debug:
        level = logging.DEBUG
    elif settings.environment == "production":
        level = logging.WARNING
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        stream=sys.stdout,
        force=True,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level if settings.debug else logging.WARNING)

    logging.getLogger(__name__).info(
        "Logging configured for %s at %s",
        settings.environment,
        logging.getLevelName(level),
    )
