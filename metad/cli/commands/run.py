"""Daemon command: drive records through the pipeline."""

import asyncio
import logging
import signal

import logfire

from metad.application.di import create_container
from metad.config import Config, configure_logging
from metad.infrastructure.persistence.migrate import run_migrations
from metad.infrastructure.pipeline.driver import PipelineDriver

logger = logging.getLogger(__name__)


def prepare(config: Config) -> None:
    """Bring the database schema up to date when auto-migration is enabled."""
    if config.database.auto_migrate:
        run_migrations(config.database.url)


def run(*, once: bool = False) -> None:
    """Run the metadata daemon in the foreground.

    Args:
        once: Process a single snapshot and exit instead of polling forever.
    """
    config = Config()  # type: ignore[call-arg]
    configure_logging(config.logging)
    prepare(config)
    asyncio.run(_run(config, once=once))


async def _run(config: Config, *, once: bool) -> None:
    # Trace catalog requests alongside the stage spans
    logfire.instrument_httpx()
    container = create_container(config)
    try:
        driver = await container.get(PipelineDriver)
        if once:
            await driver.run_once()
            return

        task = driver.start()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, driver.stop)
        await task
    finally:
        await container.close()
