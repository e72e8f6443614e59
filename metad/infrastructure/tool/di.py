from dishka import provide

from metad.config import Config
from metad.domain.metadata.port.tool_runner import ToolRunner
from metad.infrastructure.tool.runner import SubprocessToolRunner
from metad.util.di.base import Provider
from metad.util.di.scope import Scope


class ToolProvider(Provider):
    @provide(scope=Scope.APP)
    def get_tool_runner(self, config: Config) -> ToolRunner:
        return SubprocessToolRunner(timeout=config.seiscomp.timeout)
