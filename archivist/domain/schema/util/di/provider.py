from dishka import provide

from archivist.config import Config
from archivist.domain.schema.model.value import ValidationSettings
from archivist.domain.schema.port.catalog import SchemaCatalog
from archivist.domain.schema.service.validator import SchemaValidator
from archivist.util.di.base import Provider
from archivist.util.di.scope import Scope


class SchemaProvider(Provider):
    @provide(scope=Scope.APP)
    def get_validator(self, catalog: SchemaCatalog) -> SchemaValidator:
        return SchemaValidator(catalog=catalog)

    @provide(scope=Scope.UOW)
    def get_validation_settings(self, config: Config) -> ValidationSettings:
        """Severity is read per unit of work and passed explicitly to the validator."""
        return config.validation.settings()
