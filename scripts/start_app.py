#!/usr/bin/env python3
"""Serve the engagement API with uvicorn.

Logfire is configured before the app factory runs so configuration
errors (e.g. a missing production JWT secret) are reported too.
"""

import sys

import logfire
import uvicorn

from ink.config import Settings
from ink.util.logging import setup_logging
from ink.util.observability import configure_logfire


def main() -> int:
    settings = Settings()
    setup_logging(settings)
    configure_logfire(settings)

    logfire.info(
        "Starting engagement API",
        host=settings.host,
        port=settings.port,
        git_sha=settings.git_sha,
    )
    try:
        uvicorn.run(
            "ink.interface.api.app:create_app",
            factory=True,
            host=settings.host,
            port=settings.port,
            log_level="debug" if settings.debug else "info",
        )
    except Exception as e:
        logfire.exception("Engagement API failed to start", error=str(e))
        raise
    return 0


if __name__ == "__main__":
    sys.exit(main())
