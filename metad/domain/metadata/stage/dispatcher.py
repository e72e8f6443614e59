from typing import AbstractSet

import logfire

from metad.domain.metadata.model.aggregate import MetadataRecord
from metad.domain.metadata.model.value import MetadataStatus, RecordId, StageResult
from metad.domain.metadata.stage.base import Stage
from metad.domain.metadata.stage.check import CheckStage
from metad.domain.metadata.stage.convert import ConvertStage
from metad.domain.metadata.stage.merge import MergeStage
from metad.domain.shared.error import InvalidStateError


class StageDispatcher:
    """Maps a record's status to the stage that moves it forward.

    PENDING -> convert, CONVERTED -> merge, MERGED -> check. Any other status
    has no stage; receiving one means the snapshot filter is broken.
    """

    def __init__(self, convert: ConvertStage, merge: MergeStage, check: CheckStage) -> None:
        self._stages: dict[MetadataStatus, Stage] = {
            MetadataStatus.PENDING: convert,
            MetadataStatus.CONVERTED: merge,
            MetadataStatus.MERGED: check,
        }

    def select(self, record: MetadataRecord) -> Stage:
        try:
            return self._stages[record.status]
        except KeyError:
            raise InvalidStateError(
                f"No stage for {record.key} in status {record.status}"
            ) from None

    def retain(self, active: AbstractSet[RecordId]) -> None:
        """Drop stage bookkeeping for every record not in ``active``."""
        for stage in self._stages.values():
            stage.retain(active)

    async def dispatch(self, record: MetadataRecord) -> StageResult:
        stage = self.select(record)
        with logfire.span(
            "Stage {stage} {network}.{station}",
            stage=stage.name,
            network=record.network,
            station=record.station,
        ):
            return await stage.run(record)
