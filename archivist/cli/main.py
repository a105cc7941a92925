"""Main CLI application using Cyclopts."""

import cyclopts

from archivist.cli.commands import db, repository
from archivist.cli.commands.validate import validate
from archivist.config import Config, configure_logging

app = cyclopts.App(
    name="archivist",
    help="Archivist - archival record store",
)

app.command(validate, name="validate")
app.command(db.app, name="db")
app.command(repository.app, name="repo")


def main() -> None:
    configure_logging(Config().logging)
    app()


if __name__ == "__main__":
    main()
