from metad.domain.metadata.model.aggregate import MetadataRecord
from metad.domain.metadata.model.value import (
    ACTIVE_STATUSES,
    UNCHANGED,
    MetadataStatus,
    RecordId,
    StageResult,
    StationKey,
    Unchanged,
)

__all__ = [
    "ACTIVE_STATUSES",
    "UNCHANGED",
    "MetadataRecord",
    "MetadataStatus",
    "RecordId",
    "StageResult",
    "StationKey",
    "Unchanged",
]
