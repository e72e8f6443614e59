"""Dependency injection provider for the pipeline stages and driver."""

import logging

from dishka import AsyncContainer, provide

from metad.config import Config
from metad.domain.metadata.port.tool_runner import ToolRunner
from metad.domain.metadata.port.verifier import PublicationVerifier
from metad.domain.metadata.stage import CheckStage, ConvertStage, MergeStage, StageDispatcher
from metad.infrastructure.pipeline.driver import PipelineDriver
from metad.util.di.base import Provider
from metad.util.di.scope import Scope

logger = logging.getLogger(__name__)


class PipelineProvider(Provider):
    """Provides stages, dispatcher and driver.

    All APP-scoped: stages keep per-record timeout and backoff bookkeeping for
    the lifetime of the daemon.
    """

    @provide(scope=Scope.APP)
    def get_convert_stage(self, runner: ToolRunner, config: Config) -> ConvertStage:
        return ConvertStage(runner, config.seiscomp)

    @provide(scope=Scope.APP)
    def get_merge_stage(self, runner: ToolRunner, config: Config) -> MergeStage:
        return MergeStage(runner, config.seiscomp)

    @provide(scope=Scope.APP)
    def get_check_stage(self, verifier: PublicationVerifier, config: Config) -> CheckStage:
        return CheckStage(verifier, config.catalog)

    dispatcher = provide(StageDispatcher, scope=Scope.APP)

    @provide(scope=Scope.APP)
    def get_driver(
        self,
        container: AsyncContainer,
        dispatcher: StageDispatcher,
        config: Config,
    ) -> PipelineDriver:
        driver = PipelineDriver(dispatcher, config.daemon)
        driver.set_container(container)
        logger.info(
            f"Pipeline driver created (sleep_interval={config.daemon.sleep_interval}s, "
            f"queue_order={config.daemon.queue_order})"
        )
        return driver
