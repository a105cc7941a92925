from dishka import provide

from archivist.config import Config
from archivist.domain.schema.port.catalog import SchemaCatalog
from archivist.infrastructure.schema.catalog import BUNDLED_SCHEMA_DIR, YamlSchemaCatalog
from archivist.util.di.base import Provider
from archivist.util.di.scope import Scope


class SchemaCatalogProvider(Provider):
    @provide(scope=Scope.APP)
    def get_schema_catalog(self, config: Config) -> SchemaCatalog:
        """Schemas are loaded once per process from the configured directory."""
        return YamlSchemaCatalog(config.schemas.directory or BUNDLED_SCHEMA_DIR)
