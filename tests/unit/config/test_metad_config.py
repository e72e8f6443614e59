"""Tests for metad Config (Pydantic Settings)."""

import logging

import pytest
from pydantic import ValidationError

from metad.config import (
    DEFAULT_DATABASE_FILE,
    CatalogConfig,
    Config,
    LoggingConfig,
    QueueOrder,
    SeisCompConfig,
    configure_logging,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Isolate tests from the developer's environment and .env file."""
    for name in ("METAD_CONFIG_FILE", "METAD_DATABASE__URL", "METAD_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestDefaults:
    def test_database_url_defaults_to_sqlite_file(self) -> None:
        """An unset database URL should derive the default SQLite location."""
        config = Config()
        assert config.database.url == f"sqlite+aiosqlite:///{DEFAULT_DATABASE_FILE}"

    def test_daemon_defaults(self) -> None:
        config = Config()
        assert config.daemon.sleep_interval == 60.0
        assert config.daemon.queue_order == QueueOrder.LIFO

    def test_catalog_defaults(self) -> None:
        config = CatalogConfig()
        assert config.url == "http://www.orfeus-eu.org/fdsnws/station/1/query"
        assert config.backoff_base == 0

    def test_prototype_path(self) -> None:
        config = SeisCompConfig(prototype_dir="/srv/prototypes")
        assert config.prototype("NL") == "/srv/prototypes/NL.sc3ml"

    def test_env_prefix_is_metad(self) -> None:
        assert Config.model_config.get("env_prefix") == "METAD_"


class TestEnvironment:
    def test_nested_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("METAD_DATABASE__URL", "postgresql+asyncpg://db/metad")
        monkeypatch.setenv("METAD_DAEMON__SLEEP_INTERVAL", "5")
        monkeypatch.setenv("METAD_DAEMON__QUEUE_ORDER", "fifo")

        config = Config()

        assert config.database.url == "postgresql+asyncpg://db/metad"
        assert config.daemon.sleep_interval == 5
        assert config.daemon.queue_order == QueueOrder.FIFO

    def test_rejects_non_positive_sleep(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("METAD_DAEMON__SLEEP_INTERVAL", "0")
        with pytest.raises(ValidationError):
            Config()

    def test_rejects_unknown_queue_order(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("METAD_DAEMON__QUEUE_ORDER", "random")
        with pytest.raises(ValidationError):
            Config()


class TestYamlConfig:
    def test_values_from_yaml(self, monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
        config_file = tmp_path / "metad.yaml"
        config_file.write_text(
            "seiscomp:\n"
            "  process: /opt/seiscomp/bin/seiscomp\n"
            "  max_timeouts: 5\n"
            "catalog:\n"
            "  backoff_base: 30\n"
        )
        monkeypatch.setenv("METAD_CONFIG_FILE", str(config_file))

        config = Config()

        assert config.seiscomp.process == "/opt/seiscomp/bin/seiscomp"
        assert config.seiscomp.max_timeouts == 5
        assert config.catalog.backoff_base == 30

    def test_env_beats_yaml(self, monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
        config_file = tmp_path / "metad.yaml"
        config_file.write_text("daemon:\n  sleep_interval: 120\n")
        monkeypatch.setenv("METAD_CONFIG_FILE", str(config_file))
        monkeypatch.setenv("METAD_DAEMON__SLEEP_INTERVAL", "10")

        assert Config().daemon.sleep_interval == 10

    def test_missing_yaml_file_is_ignored(self, monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
        monkeypatch.setenv("METAD_CONFIG_FILE", str(tmp_path / "absent.yaml"))
        assert Config().daemon.sleep_interval == 60.0


class TestConfigureLogging:
    def test_logs_to_file(self, monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
        log_file = tmp_path / "logs" / "metad.log"
        monkeypatch.setenv("METAD_LOG_FILE", str(log_file))
        root = logging.getLogger()
        saved = root.handlers[:], root.level
        try:
            configure_logging(LoggingConfig(level="DEBUG"))
            logging.getLogger("metad.test").info("metad initialized with 0 metadata")
            for handler in root.handlers:
                handler.flush()
            assert "metad initialized with 0 metadata" in log_file.read_text()
        finally:
            for handler in root.handlers[:]:
                root.removeHandler(handler)
                handler.close()
            for handler in saved[0]:
                root.addHandler(handler)
            root.setLevel(saved[1])
