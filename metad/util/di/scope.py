"""Custom Dishka scopes for metad."""

from dishka import BaseScope, new_scope


class Scope(BaseScope):  # type: ignore[misc]  # BaseScope is designed to be subclassed
    """metad dependency injection scopes.

    Hierarchy: APP -> UOW

    - APP: Daemon lifetime (engine, HTTP client, stages, driver)
    - UOW: Unit of Work (one store read or status write)
    """

    APP = new_scope("APP")
    UOW = new_scope("UOW")
