import logging
import re

from archivist.domain.record.model.repository import Repository
from archivist.domain.record.port.repository import RepositoryRegistry
from archivist.domain.shared.error import NotFoundError, ValidationError
from archivist.domain.shared.service import Service

logger = logging.getLogger(__name__)

_REPO_CODE_RE = re.compile(r"^[A-Za-z0-9_\-]{1,64}$")


class RepositoryService(Service):
    repositories: RepositoryRegistry

    async def create(self, repo_code: str, name: str) -> Repository:
        if not _REPO_CODE_RE.match(repo_code):
            raise ValidationError(
                "repo_code may only contain letters, digits, '-' and '_'", field="repo_code"
            )
        if not name.strip():
            raise ValidationError("name is required", field="name")
        repository = await self.repositories.create(repo_code, name.strip())
        logger.info("Created repository %s (%s)", repository.uri, repo_code)
        return repository

    async def get(self, repository_id: int) -> Repository:
        repository = await self.repositories.get(repository_id)
        if repository is None:
            raise NotFoundError(f"Repository not found: {repository_id}")
        return repository

    async def list(self) -> list[Repository]:
        return await self.repositories.list()
