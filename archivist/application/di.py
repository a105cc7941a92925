from dishka import AsyncContainer, make_async_container

from archivist.config import Config
from archivist.domain.record.util.di import RecordProvider
from archivist.domain.schema.util.di import SchemaProvider
from archivist.infrastructure.persistence.di import PersistenceProvider
from archivist.infrastructure.schema.di import SchemaCatalogProvider
from archivist.util.di.scope import Scope


def create_container(config: Config | None = None) -> AsyncContainer:
    # Pydantic Settings populates from env vars at runtime
    config = config or Config()  # type: ignore[call-arg]

    return make_async_container(
        PersistenceProvider(),
        SchemaCatalogProvider(),
        SchemaProvider(),
        RecordProvider(),
        context={Config: config},
        scopes=Scope,  # type: ignore[arg-type]  # Custom scope class
    )
