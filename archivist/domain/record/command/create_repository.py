from archivist.domain.auth.model.capability import Capability
from archivist.domain.auth.model.identity import Identity
from archivist.domain.record.service.repository import RepositoryService
from archivist.domain.shared.authorization.gate import requires
from archivist.domain.shared.command import Command, CommandHandler, Result


class CreateRepository(Command):
    repo_code: str
    name: str


class RepositoryCreated(Result):
    id: int
    uri: str
    repo_code: str


class CreateRepositoryHandler(CommandHandler[CreateRepository, RepositoryCreated]):
    __auth__ = requires(Capability.MANAGE_REPOSITORY)
    identity: Identity
    repository_service: RepositoryService

    async def run(self, cmd: CreateRepository) -> RepositoryCreated:
        repository = await self.repository_service.create(cmd.repo_code, cmd.name)
        return RepositoryCreated(
            id=repository.id, uri=repository.uri, repo_code=repository.repo_code
        )
