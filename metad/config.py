import logging
import os
import sys
from enum import StrEnum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource
from typing_extensions import Self

DEFAULT_DATABASE_FILE = Path("~/.local/share/metad/metad.db")


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Load settings from YAML file specified by METAD_CONFIG_FILE env var."""

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Get the value for a field from the YAML config."""
        yaml_data = self._load_yaml_config()
        field_value = yaml_data.get(field_name)
        return field_value, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return all settings from YAML file."""
        return self._load_yaml_config()

    def _load_yaml_config(self) -> dict[str, Any]:
        """Load config from YAML file if specified."""
        config_file = os.environ.get("METAD_CONFIG_FILE")
        if config_file:
            path = Path(config_file)
            if path.exists():
                return yaml.safe_load(path.read_text()) or {}
        return {}


class DatabaseConfig(BaseModel):
    """Database configuration (nested in Config, uses env_nested_delimiter).

    Empty url is a sentinel meaning "use the default SQLite file".
    """

    url: str = ""
    echo: bool = False
    auto_migrate: bool = True  # Run alembic upgrade on daemon start


class LoggingConfig(BaseModel):
    """Logging configuration (nested in Config, uses env_nested_delimiter)."""

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @property
    def file(self) -> str | None:
        """Get log file path from METAD_LOG_FILE env var."""
        return os.environ.get("METAD_LOG_FILE")


class QueueOrder(StrEnum):
    LIFO = "lifo"  # Last fetched record is processed first
    FIFO = "fifo"


class DaemonConfig(BaseModel):
    """Pipeline driver configuration."""

    sleep_interval: float = Field(default=60.0, gt=0)  # Seconds between snapshots
    queue_order: QueueOrder = QueueOrder.LIFO


class SeisCompConfig(BaseModel):
    """External SeisComP tools used by the convert and merge stages.

    Tools are started as ``<process> exec <tool> ...``.
    """

    process: str = "seiscomp"
    converter: str = "fdsnxml2inv"
    merger: str = "scinv"
    prototype_dir: str = "prototypes"  # Holds one <NETWORK>.sc3ml per network
    raw_suffix: str = ".stationXML"
    converted_suffix: str = ".sc3ml"
    timeout: float = Field(default=600.0, gt=0)  # Seconds per tool invocation
    max_timeouts: int = Field(default=3, ge=1)  # Timeouts tolerated before rejecting

    def prototype(self, network: str) -> str:
        """Path of the network-level prototype inventory."""
        return str(Path(self.prototype_dir) / f"{network}{self.converted_suffix}")


class CatalogConfig(BaseModel):
    """FDSNWS station webservice used to verify publication."""

    url: str = "http://www.orfeus-eu.org/fdsnws/station/1/query"
    timeout: float = Field(default=30.0, gt=0)
    backoff_base: float = Field(default=0.0, ge=0)  # 0 disables per-record backoff
    backoff_max: float = Field(default=3600.0, gt=0)


class Config(BaseSettings):
    database: DatabaseConfig = DatabaseConfig()
    logging: LoggingConfig = LoggingConfig()
    daemon: DaemonConfig = DaemonConfig()
    seiscomp: SeisCompConfig = SeisCompConfig()
    catalog: CatalogConfig = CatalogConfig()

    model_config = {
        "env_prefix": "METAD_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",  # Allows METAD_DATABASE__URL override
    }

    @model_validator(mode="after")
    def derive_database_url(self) -> Self:
        """Fill in the default SQLite location when no database URL is set."""
        if not self.database.url:
            self.database = DatabaseConfig(
                url=f"sqlite+aiosqlite:///{DEFAULT_DATABASE_FILE}",
                echo=self.database.echo,
                auto_migrate=self.database.auto_migrate,
            )
        return self

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include YAML config.

        Priority (highest to lowest):
        1. init_settings - values passed to Config()
        2. env_settings - environment variables
        3. dotenv_settings - .env file
        4. yaml_settings - METAD_CONFIG_FILE yaml
        5. file_secret_settings - secrets from files
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def configure_logging(config: LoggingConfig) -> None:
    """Configure Python logging based on config.

    Should be called early in daemon startup so all loggers pick up the
    configuration.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(config.level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(config.format, datefmt=config.date_format)

    if config.file:
        log_path = Path(config.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(config.level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(config.level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("alembic").setLevel(logging.WARNING)

    logging.debug("Logging configured: level=%s, file=%s", config.level, config.file)
