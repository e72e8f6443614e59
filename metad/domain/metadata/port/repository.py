"""MetadataRepository port - persistence interface for metadata records."""

from abc import abstractmethod
from typing import Protocol

from metad.domain.metadata.model.aggregate import MetadataRecord
from metad.domain.metadata.model.value import MetadataStatus, RecordId, StationKey
from metad.domain.shared.port import Port


class MetadataRepository(Port, Protocol):
    """Record store.

    Implementations raise StorageUnavailableError when the backend fails.
    """

    @abstractmethod
    async def find_active_snapshot(self) -> list[MetadataRecord]:
        """Most recent record per (network, station), limited to active statuses.

        Grouping happens before filtering: if the newest submission for a key is
        terminal, older active submissions for that key are not returned.
        """
        ...

    @abstractmethod
    async def update_status(self, record_id: RecordId, status: MetadataStatus) -> bool:
        """Atomically set the status of one record. Returns False if no row matched."""
        ...

    @abstractmethod
    async def add(self, record: MetadataRecord) -> None: ...

    @abstractmethod
    async def get(self, record_id: RecordId) -> MetadataRecord | None: ...

    @abstractmethod
    async def list_by_key(self, key: StationKey) -> list[MetadataRecord]: ...
