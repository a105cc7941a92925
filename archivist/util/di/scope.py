"""Custom Dishka scopes for archivist."""

from dishka import BaseScope, new_scope


class Scope(BaseScope):  # type: ignore[misc]  # BaseScope is designed to be subclassed
    """Dependency injection scopes.

    Hierarchy: APP -> UOW

    - APP: Process lifetime (engine, schema catalog, configuration)
    - UOW: Unit of work (one request or CLI operation, one session)
    """

    APP = new_scope("APP")
    UOW = new_scope("UOW")
