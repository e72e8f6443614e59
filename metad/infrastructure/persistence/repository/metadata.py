from __future__ import annotations

from sqlalchemy import func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from metad.domain.metadata.model.aggregate import MetadataRecord
from metad.domain.metadata.model.value import (
    ACTIVE_STATUSES,
    MetadataStatus,
    RecordId,
    StationKey,
)
from metad.domain.metadata.port.repository import MetadataRepository
from metad.domain.shared.error import StorageUnavailableError
from metad.infrastructure.persistence.mappers.metadata import record_to_dict, row_to_record
from metad.infrastructure.persistence.tables import metadata_records_table


class SQLAlchemyMetadataRepository(MetadataRepository):
    """SQL implementation of MetadataRepository (SQLite and PostgreSQL)."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_active_snapshot(self) -> list[MetadataRecord]:
        t = metadata_records_table
        ranked = select(
            t,
            func.row_number()
            .over(
                partition_by=(t.c.network, t.c.station),
                order_by=(t.c.created_at.desc(), t.c.id.desc()),
            )
            .label("recency"),
        ).subquery()

        stmt = (
            select(*(ranked.c[column.name] for column in t.columns))
            .where(ranked.c.recency == 1)
            .where(ranked.c.status.in_([s.value for s in ACTIVE_STATUSES]))
            .order_by(ranked.c.created_at, ranked.c.id)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise StorageUnavailableError(f"Snapshot query failed: {e}") from e
        return [row_to_record(dict(r)) for r in result.mappings().all()]

    async def update_status(self, record_id: RecordId, status: MetadataStatus) -> bool:
        stmt = (
            update(metadata_records_table)
            .where(metadata_records_table.c.id == str(record_id))
            .values(status=status.value)
        )
        try:
            result = await self.session.execute(stmt)
            await self.session.flush()
        except SQLAlchemyError as e:
            raise StorageUnavailableError(f"Status update of {record_id} failed: {e}") from e
        return result.rowcount == 1

    async def add(self, record: MetadataRecord) -> None:
        stmt = insert(metadata_records_table).values(**record_to_dict(record))
        try:
            await self.session.execute(stmt)
            await self.session.flush()
        except SQLAlchemyError as e:
            raise StorageUnavailableError(f"Insert of {record.id} failed: {e}") from e

    async def get(self, record_id: RecordId) -> MetadataRecord | None:
        stmt = select(metadata_records_table).where(
            metadata_records_table.c.id == str(record_id)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise StorageUnavailableError(f"Lookup of {record_id} failed: {e}") from e
        row = result.mappings().first()
        return row_to_record(dict(row)) if row else None

    async def list_by_key(self, key: StationKey) -> list[MetadataRecord]:
        stmt = (
            select(metadata_records_table)
            .where(metadata_records_table.c.network == key.network)
            .where(metadata_records_table.c.station == key.station)
            .order_by(metadata_records_table.c.created_at.desc())
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise StorageUnavailableError(f"Listing records of {key} failed: {e}") from e
        return [row_to_record(dict(r)) for r in result.mappings().all()]
