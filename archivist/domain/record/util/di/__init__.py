from archivist.domain.record.util.di.provider import RecordProvider

__all__ = ["RecordProvider"]
