"""Tests for the run command wiring."""

from unittest.mock import patch

import pytest

from metad.cli.commands.run import _run, prepare
from metad.config import Config, DatabaseConfig


class TestRunCommand:
    @pytest.mark.asyncio
    async def test_single_pass_survives_missing_schema(self):
        """An unmigrated store is logged as unavailable and the pass ends cleanly."""
        config = Config(database=DatabaseConfig(url="sqlite+aiosqlite://", auto_migrate=False))

        with patch("metad.cli.commands.run.logfire.instrument_httpx") as instrument:
            await _run(config, once=True)

        instrument.assert_called_once_with()

    def test_prepare_migrates_when_enabled(self):
        config = Config(database=DatabaseConfig(url="sqlite+aiosqlite:////tmp/metad.db"))

        with patch("metad.cli.commands.run.run_migrations") as migrate:
            prepare(config)

        migrate.assert_called_once_with("sqlite+aiosqlite:////tmp/metad.db")

    def test_prepare_skips_when_disabled(self):
        config = Config(database=DatabaseConfig(url="sqlite+aiosqlite://", auto_migrate=False))

        with patch("metad.cli.commands.run.run_migrations") as migrate:
            prepare(config)

        migrate.assert_not_called()

    def test_migrations_create_schema(self, tmp_path):
        db = tmp_path / "metad.db"
        config = Config(database=DatabaseConfig(url=f"sqlite+aiosqlite:///{db}"))

        prepare(config)

        assert db.exists()
