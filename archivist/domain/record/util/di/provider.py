from dishka import from_context, provide

from archivist.domain.auth.model.identity import Identity
from archivist.domain.record.command.create_record import CreateRecordHandler
from archivist.domain.record.command.create_repository import CreateRepositoryHandler
from archivist.domain.record.command.delete_record import DeleteRecordHandler
from archivist.domain.record.command.suppress_record import SuppressRecordHandler
from archivist.domain.record.command.update_record import UpdateRecordHandler
from archivist.domain.record.port.repository import RecordRepository, RepositoryRegistry
from archivist.domain.record.query.get_record import GetRecordHandler
from archivist.domain.record.query.list_records import ListRecordsHandler
from archivist.domain.record.service.record import RecordService
from archivist.domain.record.service.repository import RepositoryService
from archivist.domain.record.service.scope import RepositoryScope
from archivist.domain.schema.model.value import ValidationSettings
from archivist.domain.schema.service.validator import SchemaValidator
from archivist.util.di.base import Provider
from archivist.util.di.scope import Scope


class RecordProvider(Provider):
    """Record services and handlers.

    The caller enters each unit of work with the acting identity and the
    session's repository scope in context.
    """

    identity = from_context(provides=Identity, scope=Scope.UOW)
    scope_guard = from_context(provides=RepositoryScope, scope=Scope.UOW)

    @provide(scope=Scope.UOW)
    def get_record_service(
        self,
        record_repo: RecordRepository,
        repositories: RepositoryRegistry,
        validator: SchemaValidator,
        settings: ValidationSettings,
    ) -> RecordService:
        return RecordService(
            record_repo=record_repo,
            repositories=repositories,
            validator=validator,
            settings=settings,
        )

    repository_service = provide(RepositoryService, scope=Scope.UOW)

    # Command Handlers
    create_record_handler = provide(CreateRecordHandler, scope=Scope.UOW)
    update_record_handler = provide(UpdateRecordHandler, scope=Scope.UOW)
    suppress_record_handler = provide(SuppressRecordHandler, scope=Scope.UOW)
    delete_record_handler = provide(DeleteRecordHandler, scope=Scope.UOW)
    create_repository_handler = provide(CreateRepositoryHandler, scope=Scope.UOW)

    # Query Handlers
    get_record_handler = provide(GetRecordHandler, scope=Scope.UOW)
    list_records_handler = provide(ListRecordsHandler, scope=Scope.UOW)
