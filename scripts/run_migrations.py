#!/usr/bin/env python3
"""Bring the documents table to the latest schema revision."""

import sys

import logfire
from alembic import command
from alembic.config import Config

from ink.config import Settings
from ink.util.logging import setup_logging
from ink.util.observability import configure_logfire


def upgrade(revision: str = "head") -> None:
    """Apply migrations up to ``revision``; the URL comes from Settings."""
    with logfire.span("migrations.upgrade", revision=revision):
        command.upgrade(Config("alembic.ini"), revision)


def main() -> int:
    settings = Settings()
    setup_logging(settings)
    configure_logfire(settings)

    revision = sys.argv[1] if len(sys.argv) > 1 else "head"
    try:
        upgrade(revision)
    except Exception as e:
        logfire.exception("Database migration failed", revision=revision, error=str(e))
        # Deploys must stop rather than serve a stale schema
        raise
    logfire.info("Database schema up to date", revision=revision)
    return 0


if __name__ == "__main__":
    sys.exit(main())
