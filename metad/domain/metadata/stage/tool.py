"""Stages backed by an external SeisComP command line tool."""

import logging
from abc import abstractmethod
from collections import Counter
from typing import AbstractSet

from metad.config import SeisCompConfig
from metad.domain.metadata.model.aggregate import MetadataRecord
from metad.domain.metadata.model.value import (
    UNCHANGED,
    MetadataStatus,
    RecordId,
    StageResult,
)
from metad.domain.metadata.port.tool_runner import ToolResult, ToolRunner
from metad.domain.metadata.stage.base import Stage

logger = logging.getLogger(__name__)

# Characters of tool output kept in log lines
_OUTPUT_LIMIT = 2000


class ToolStage(Stage):
    """Runs one tool invocation per record and maps its exit code to a status.

    Exit code 0 advances the record to ``__success_status__``; any other exit
    code rejects it. A timed-out run is retried on later cycles until it has
    timed out ``max_timeouts`` times, then the record is rejected. A tool that
    cannot be started at all is a deployment problem, not a bad record, so the
    record is left unchanged.
    """

    __success_status__: MetadataStatus

    def __init__(self, runner: ToolRunner, config: SeisCompConfig) -> None:
        self._runner = runner
        self._config = config
        self._timeouts: Counter[RecordId] = Counter()

    @abstractmethod
    def command(self, record: MetadataRecord) -> list[str]:
        """Full argument vector for the tool, program first."""
        ...

    def retain(self, active: AbstractSet[RecordId]) -> None:
        for record_id in self._timeouts.keys() - active:
            del self._timeouts[record_id]

    def _exec(self, tool: str, *args: str) -> list[str]:
        return [self._config.process, "exec", tool, *args]

    async def run(self, record: MetadataRecord) -> StageResult:
        logger.info(f"{self.name} is requested for {record.key}")
        result = await self._runner.run(self.command(record))
        return self._interpret(record, result)

    def _interpret(self, record: MetadataRecord, result: ToolResult) -> StageResult:
        if result.timed_out:
            self._timeouts[record.id] += 1
            attempts = self._timeouts[record.id]
            if attempts >= self._config.max_timeouts:
                del self._timeouts[record.id]
                logger.error(
                    f"{self.name} for {record.key} timed out {attempts} times, rejecting"
                )
                return MetadataStatus.REJECTED
            logger.warning(
                f"{self.name} for {record.key} timed out "
                f"({attempts}/{self._config.max_timeouts}), will retry"
            )
            return UNCHANGED

        if result.spawn_error is not None:
            logger.error(f"{self.name} could not start tool: {result.spawn_error}")
            return UNCHANGED

        self._timeouts.pop(record.id, None)

        if result.failed:
            logger.warning(
                f"{self.name} for {record.key} failed with exit code {result.exit_code}: "
                f"{result.output[:_OUTPUT_LIMIT]}"
            )
            return MetadataStatus.REJECTED

        return self.__success_status__
