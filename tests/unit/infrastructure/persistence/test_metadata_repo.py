"""Tests for SQLAlchemyMetadataRepository against in-memory SQLite."""

from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine

from metad.config import DatabaseConfig
from metad.domain.metadata.model.value import MetadataStatus, RecordId, StationKey
from metad.domain.shared.error import StorageUnavailableError
from metad.infrastructure.persistence.database import create_db_engine, create_session_factory
from metad.infrastructure.persistence.repository.metadata import SQLAlchemyMetadataRepository
from metad.infrastructure.persistence.tables import metadata

T0 = datetime(2026, 10, 1, tzinfo=UTC)


@pytest_asyncio.fixture
async def session():
    engine = create_db_engine(DatabaseConfig(url="sqlite+aiosqlite://"))
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    factory = create_session_factory(engine)
    async with factory() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def repo(session) -> SQLAlchemyMetadataRepository:
    return SQLAlchemyMetadataRepository(session)


async def seed(repo, make_record, rows):
    records = []
    for minutes, network, station, status in rows:
        record = make_record(
            network=network,
            station=station,
            status=status,
            created_at=T0 + timedelta(minutes=minutes),
            record_id=f"{network}.{station}.{minutes}",
        )
        await repo.add(record)
        records.append(record)
    return records


class TestFindActiveSnapshot:
    @pytest.mark.asyncio
    async def test_empty_store(self, repo):
        assert await repo.find_active_snapshot() == []

    @pytest.mark.asyncio
    async def test_latest_record_per_station(self, repo, make_record):
        await seed(
            repo,
            make_record,
            [
                (0, "NL", "HGN", MetadataStatus.COMPLETED),
                (5, "NL", "HGN", MetadataStatus.PENDING),
                (1, "NL", "WIT", MetadataStatus.MERGED),
            ],
        )

        snapshot = await repo.find_active_snapshot()

        assert [r.id for r in snapshot] == ["NL.WIT.1", "NL.HGN.5"]
        assert snapshot[1].status == MetadataStatus.PENDING

    @pytest.mark.asyncio
    async def test_terminal_latest_hides_older_active(self, repo, make_record):
        # Group first, then filter: an older PENDING under a newer REJECTED is not eligible
        await seed(
            repo,
            make_record,
            [
                (0, "NL", "HGN", MetadataStatus.PENDING),
                (5, "NL", "HGN", MetadataStatus.REJECTED),
                (0, "KN", "KRIS", MetadataStatus.CONVERTED),
                (3, "KN", "KRIS", MetadataStatus.COMPLETED),
            ],
        )

        assert await repo.find_active_snapshot() == []

    @pytest.mark.asyncio
    async def test_only_active_statuses(self, repo, make_record):
        await seed(
            repo,
            make_record,
            [
                (0, "NL", "A", MetadataStatus.PENDING),
                (1, "NL", "B", MetadataStatus.CONVERTED),
                (2, "NL", "C", MetadataStatus.MERGED),
                (3, "NL", "D", MetadataStatus.COMPLETED),
                (4, "NL", "E", MetadataStatus.REJECTED),
            ],
        )

        snapshot = await repo.find_active_snapshot()

        assert [r.station for r in snapshot] == ["A", "B", "C"]

    @pytest.mark.asyncio
    async def test_same_station_code_in_different_networks(self, repo, make_record):
        await seed(
            repo,
            make_record,
            [
                (0, "NL", "HGN", MetadataStatus.PENDING),
                (1, "KN", "HGN", MetadataStatus.MERGED),
            ],
        )

        snapshot = await repo.find_active_snapshot()

        assert {str(r.key) for r in snapshot} == {"NL.HGN", "KN.HGN"}

    @pytest.mark.asyncio
    async def test_is_repeatable(self, repo, make_record):
        await seed(
            repo,
            make_record,
            [
                (0, "NL", "HGN", MetadataStatus.PENDING),
                (1, "NL", "WIT", MetadataStatus.CONVERTED),
            ],
        )

        first = await repo.find_active_snapshot()
        second = await repo.find_active_snapshot()

        assert first == second


class TestUpdateStatus:
    @pytest.mark.asyncio
    async def test_updates_single_record(self, repo, make_record):
        older, newer = await seed(
            repo,
            make_record,
            [
                (0, "NL", "HGN", MetadataStatus.MERGED),
                (5, "NL", "HGN", MetadataStatus.PENDING),
            ],
        )

        assert await repo.update_status(newer.id, MetadataStatus.CONVERTED) is True

        assert (await repo.get(newer.id)).status == MetadataStatus.CONVERTED
        assert (await repo.get(older.id)).status == MetadataStatus.MERGED

    @pytest.mark.asyncio
    async def test_missing_record(self, repo):
        assert await repo.update_status(RecordId("nope"), MetadataStatus.REJECTED) is False

    @pytest.mark.asyncio
    async def test_rejected_record_leaves_snapshot(self, repo, make_record):
        (record,) = await seed(repo, make_record, [(0, "NL", "HGN", MetadataStatus.PENDING)])

        await repo.update_status(record.id, MetadataStatus.REJECTED)

        assert await repo.find_active_snapshot() == []


class TestLookups:
    @pytest.mark.asyncio
    async def test_get_round_trips_fields(self, repo, make_record):
        record = make_record(record_id="abc", status=MetadataStatus.CONVERTED)
        await repo.add(record)

        loaded = await repo.get(RecordId("abc"))

        assert loaded is not None
        assert loaded.key == record.key
        assert loaded.status == record.status
        assert loaded.filepath == record.filepath
        assert loaded.sha256 == record.sha256

    @pytest.mark.asyncio
    async def test_get_missing(self, repo):
        assert await repo.get(RecordId("missing")) is None

    @pytest.mark.asyncio
    async def test_list_by_key_newest_first(self, repo, make_record):
        await seed(
            repo,
            make_record,
            [
                (0, "NL", "HGN", MetadataStatus.REJECTED),
                (9, "NL", "HGN", MetadataStatus.PENDING),
                (4, "NL", "HGN", MetadataStatus.COMPLETED),
                (2, "NL", "WIT", MetadataStatus.PENDING),
            ],
        )

        history = await repo.list_by_key(StationKey(network="NL", station="HGN"))

        assert [r.id for r in history] == ["NL.HGN.9", "NL.HGN.4", "NL.HGN.0"]

    @pytest.mark.asyncio
    async def test_duplicate_id_is_storage_error(self, repo, make_record):
        await repo.add(make_record(record_id="dup"))

        with pytest.raises(StorageUnavailableError):
            await repo.add(make_record(record_id="dup"))


class TestStoreUnavailable:
    @pytest.mark.asyncio
    async def test_missing_table_raises_storage_error(self):
        engine = create_async_engine("sqlite+aiosqlite://")
        factory = create_session_factory(engine)
        async with factory() as session:
            repo = SQLAlchemyMetadataRepository(session)
            with pytest.raises(StorageUnavailableError):
                await repo.find_active_snapshot()
        await engine.dispose()
