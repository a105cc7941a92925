from archivist.domain.schema.util.di.provider import SchemaProvider

__all__ = ["SchemaProvider"]
