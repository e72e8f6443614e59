from datetime import UTC, datetime

from pydantic import Field

from metad.domain.metadata.model.value import MetadataStatus, RecordId, StationKey
from metad.domain.shared.error import InvalidStateError
from metad.domain.shared.model.aggregate import Aggregate


def _utc_now() -> datetime:
    return datetime.now(UTC)


class MetadataRecord(Aggregate):
    """One submitted StationXML document tracked through the pipeline."""

    id: RecordId
    key: StationKey
    status: MetadataStatus = MetadataStatus.PENDING
    filepath: str  # Base path, suffixes are appended per stage
    sha256: str  # Fingerprint of the submitted network element
    created_at: datetime = Field(default_factory=_utc_now)

    @property
    def network(self) -> str:
        return self.key.network

    @property
    def station(self) -> str:
        return self.key.station

    def artifact(self, suffix: str) -> str:
        """Path of the staged sibling file with the given suffix (e.g. ``.sc3ml``)."""
        return self.filepath + suffix

    def transition_to(self, status: MetadataStatus) -> None:
        if not self.status.can_transition_to(status):
            raise InvalidStateError(
                f"Illegal transition for {self.key}: {self.status} -> {status}"
            )
        self.status = status
