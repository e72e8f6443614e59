from dishka import Provider as DishkaProvider

from metad.util.di.scope import Scope


class Provider(DishkaProvider):
    """Base for all metad DI providers; defaults to the APP scope."""

    scope = Scope.APP
