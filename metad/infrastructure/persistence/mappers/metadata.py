from typing import Any

from metad.domain.metadata.model.aggregate import MetadataRecord
from metad.domain.metadata.model.value import MetadataStatus, RecordId, StationKey


def row_to_record(row: dict[str, Any]) -> MetadataRecord:
    return MetadataRecord(
        id=RecordId(row["id"]),
        key=StationKey(network=row["network"], station=row["station"]),
        status=MetadataStatus(row["status"]),
        filepath=row["filepath"],
        sha256=row["sha256"],
        created_at=row["created_at"],
    )


def record_to_dict(record: MetadataRecord) -> dict[str, Any]:
    return {
        "id": str(record.id),
        "network": record.network,
        "station": record.station,
        "status": record.status.value,
        "filepath": record.filepath,
        "sha256": record.sha256,
        "created_at": record.created_at,
    }
