"""Repository administration commands."""

import asyncio
import sys

import cyclopts

from archivist.application.di import create_container
from archivist.cli.console import get_console
from archivist.config import Config
from archivist.domain.auth.model.identity import Identity, System
from archivist.domain.record.command.create_repository import (
    CreateRepository,
    CreateRepositoryHandler,
)
from archivist.domain.record.service.repository import RepositoryService
from archivist.domain.shared.error import ArchivistError
from archivist.infrastructure.persistence.migrate import run_migrations
from archivist.util.di.scope import Scope

app = cyclopts.App(name="repo", help="Manage repositories")


def _prepare() -> Config:
    config = Config()
    if config.database.auto_migrate:
        run_migrations(config.database.url)
    return config


@app.command
def create(repo_code: str, name: str) -> None:
    """Create a repository.

    Args:
        repo_code: Short unique code, e.g. ``special-collections``.
        name: Display name.
    """

    async def _run() -> None:
        container = create_container(_prepare())
        try:
            async with container(scope=Scope.UOW, context={Identity: System()}) as uow:
                handler = await uow.get(CreateRepositoryHandler)
                created = await handler.run(CreateRepository(repo_code=repo_code, name=name))
        finally:
            await container.close()
        get_console().success(f"Created {created.uri} ({created.repo_code})")

    try:
        asyncio.run(_run())
    except ArchivistError as exc:
        get_console().error(exc.message)
        sys.exit(1)


@app.command(name="list")
def list_repositories() -> None:
    """List repositories."""

    async def _run() -> list[dict[str, object]]:
        container = create_container(_prepare())
        try:
            async with container(scope=Scope.UOW, context={Identity: System()}) as uow:
                service = await uow.get(RepositoryService)
                repositories = await service.list()
        finally:
            await container.close()
        return [{"uri": r.uri, "code": r.repo_code, "name": r.name} for r in repositories]

    rows = asyncio.run(_run())
    get_console().table(rows, [("uri", "URI"), ("code", "Code"), ("name", "Name")])
