"""Read-only inspection of the record store."""

import asyncio
import sys

from metad.application.di import create_container
from metad.cli.console import get_console
from metad.config import Config
from metad.domain.metadata.model.aggregate import MetadataRecord
from metad.domain.metadata.model.value import StationKey
from metad.domain.metadata.port.repository import MetadataRepository
from metad.domain.shared.error import InfrastructureError
from metad.util.di.scope import Scope


async def _query(config: Config, key: StationKey | None) -> list[MetadataRecord]:
    container = create_container(config)
    try:
        async with container(scope=Scope.UOW) as scope:
            repo = await scope.get(MetadataRepository)
            if key is None:
                return await repo.find_active_snapshot()
            return await repo.list_by_key(key)
    finally:
        await container.close()


def _load(key: StationKey | None) -> list[MetadataRecord]:
    console = get_console()
    config = Config()  # type: ignore[call-arg]
    try:
        return asyncio.run(_query(config, key))
    except InfrastructureError as e:
        console.error(
            e.message,
            hint="Run `metad run` once to create the schema, or check METAD_DATABASE__URL",
        )
        sys.exit(1)


def snapshot() -> None:
    """Show the records the daemon will work on in its next cycle."""
    console = get_console()
    records = _load(None)
    if not records:
        console.info("No metadata awaiting processing")
        return
    console.records(records, title=f"{len(records)} active record(s)")


def records(network: str, station: str) -> None:
    """Show every stored submission for one station, newest first.

    Args:
        network: Network code, e.g. NL.
        station: Station code, e.g. HGN.
    """
    console = get_console()
    key = StationKey(network=network, station=station)
    found = _load(key)
    if not found:
        console.warning(f"No records for {key}")
        return
    console.records(found, title=str(key))
