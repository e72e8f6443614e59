from dishka import AsyncContainer, from_context, make_async_container

from metad.config import Config
from metad.infrastructure.http import HttpProvider
from metad.infrastructure.persistence import PersistenceProvider
from metad.infrastructure.pipeline.di import PipelineProvider
from metad.infrastructure.tool import ToolProvider
from metad.util.di.base import Provider
from metad.util.di.scope import Scope


class ConfigProvider(Provider):
    config = from_context(provides=Config, scope=Scope.APP)


def create_container(config: Config | None = None) -> AsyncContainer:
    # Pydantic Settings populates from env vars at runtime
    config = config or Config()  # type: ignore[call-arg]

    return make_async_container(
        ConfigProvider(),
        PersistenceProvider(),
        ToolProvider(),
        HttpProvider(),
        PipelineProvider(),
        context={Config: config},
        scopes=Scope,  # type: ignore[arg-type]  # Custom scope class
    )
