from dishka import Provider as DishkaProvider

from archivist.util.di.scope import Scope


class Provider(DishkaProvider):
    """Base for archivist DI providers. Unscoped provides default to UOW."""

    scope = Scope.UOW
