from enum import Enum, StrEnum
from typing import NewType

from pydantic import field_validator

from metad.domain.shared.model.value import ValueObject

RecordId = NewType("RecordId", str)


class MetadataStatus(StrEnum):
    """Persisted lifecycle status of a metadata record."""

    REJECTED = "rejected"
    PENDING = "pending"
    CONVERTED = "converted"
    MERGED = "merged"
    COMPLETED = "completed"

    @property
    def is_terminal(self) -> bool:
        return self in (MetadataStatus.REJECTED, MetadataStatus.COMPLETED)

    @property
    def label(self) -> str:
        """Short human description shown on the operator dashboard."""
        return _LABELS[self]

    def can_transition_to(self, target: "MetadataStatus") -> bool:
        """Whether moving from this status to ``target`` is a legal transition.

        Non-terminal statuses may divert to REJECTED or advance exactly one step
        along PENDING -> CONVERTED -> MERGED -> COMPLETED.
        """
        if self.is_terminal:
            return False
        if target == MetadataStatus.REJECTED:
            return True
        return _NEXT.get(self) == target


_NEXT: dict[MetadataStatus, MetadataStatus] = {
    MetadataStatus.PENDING: MetadataStatus.CONVERTED,
    MetadataStatus.CONVERTED: MetadataStatus.MERGED,
    MetadataStatus.MERGED: MetadataStatus.COMPLETED,
}

_LABELS: dict[MetadataStatus, str] = {
    MetadataStatus.REJECTED: "Metadata processing failed and was rejected",
    MetadataStatus.PENDING: "Metadata is awaiting conversion",
    MetadataStatus.CONVERTED: "Metadata is converted to SC3ML",
    MetadataStatus.MERGED: "Metadata is merged into the network inventory",
    MetadataStatus.COMPLETED: "Metadata is available through FDSNWS",
}

# Statuses the daemon still has work to do for
ACTIVE_STATUSES: tuple[MetadataStatus, ...] = (
    MetadataStatus.PENDING,
    MetadataStatus.CONVERTED,
    MetadataStatus.MERGED,
)


class Unchanged(Enum):
    """Stage result meaning "retry later, do not write a status".

    Kept out of MetadataStatus so it can never be handed to the store.
    """

    UNCHANGED = "unchanged"


UNCHANGED = Unchanged.UNCHANGED

StageResult = MetadataStatus | Unchanged


class StationKey(ValueObject):
    """(network, station) pair identifying the logical entity being processed."""

    network: str
    station: str

    @field_validator("network", "station")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("network and station codes must not be empty")
        return v

    def __str__(self) -> str:
        return f"{self.network}.{self.station}"
