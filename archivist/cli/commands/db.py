"""Database maintenance commands."""

import cyclopts

from archivist.cli.console import get_console
from archivist.config import Config
from archivist.infrastructure.persistence.migrate import run_migrations

app = cyclopts.App(name="db", help="Database maintenance")


@app.command
def upgrade(revision: str = "head") -> None:
    """Apply pending migrations to the configured database.

    Args:
        revision: Target Alembic revision.
    """
    config = Config()
    run_migrations(config.database.url, revision)
    get_console().success(f"Database at {config.database.url} is at {revision}")
