"""Pipeline stage contract."""

from abc import ABC, abstractmethod
from typing import AbstractSet, ClassVar

from metad.domain.metadata.model.aggregate import MetadataRecord
from metad.domain.metadata.model.value import RecordId, StageResult


class Stage(ABC):
    """One pipeline step.

    A stage never writes to the record store. It inspects the record, talks to
    its collaborator and returns exactly one result: REJECTED, UNCHANGED, or
    the next status in the lifecycle.
    """

    __stage_name__: ClassVar[str]

    @property
    def name(self) -> str:
        return self.__stage_name__

    @abstractmethod
    async def run(self, record: MetadataRecord) -> StageResult: ...

    def retain(self, active: AbstractSet[RecordId]) -> None:
        """Forget per-record bookkeeping for records that left the pipeline."""
