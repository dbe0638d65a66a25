"""
Pydantic-based configuration system for Quran Bookmarks.

Configuration is read from a TOML or JSON file, overridden by environment
variables and command line arguments, and validated in one place.
"""

import json
import os
import sys
from pathlib import Path
from typing import Dict, Literal, Optional

import toml
from pydantic import BaseModel, Field, ValidationError, field_validator

from ..core.data_sources.protocol import SORT_DATE_ADDED, SORT_LOCATION
from ..utils.error_handler import ConfigurationError

SORT_ORDERS = {
    "date_added": SORT_DATE_ADDED,
    "location": SORT_LOCATION,
}


class StorageConfig(BaseModel):
    """Where bookmarks and reader settings are kept."""

    database_path: Path = Field(
        default=Path("quran_bookmarks.db"),
        description="SQLite database holding bookmarks and tags",
        json_schema_extra={
            "error_msg": "Database path must be a valid file path. "
            "The file is created if it doesn't exist."
        },
    )
    settings_path: Path = Field(
        default=Path("quran_settings.json"),
        description="JSON file holding the last visited page",
        json_schema_extra={
            "error_msg": "Settings path must be a valid file path. "
            "The file is created when the last page is first saved."
        },
    )

    @field_validator("database_path", "settings_path", mode="before")
    @classmethod
    def validate_path(cls, v):
        """Ensure paths are Path objects."""
        if isinstance(v, str):
            if not v.strip():
                raise ValueError("Path must not be empty")
            return Path(v)
        return v


class DisplayConfig(BaseModel):
    """How the bookmark list is laid out."""

    sort_order: Literal["date_added", "location"] = Field(
        default="date_added",
        description="Bookmark ordering",
        json_schema_extra={
            "error_msg": "Sort order must be 'date_added' or 'location'."
        },
    )
    group_by_tags: bool = Field(
        default=False,
        description="Group bookmarks under their tags",
        json_schema_extra={
            "error_msg": "Group by tags must be true or false."
        },
    )

    @property
    def sort_order_value(self) -> int:
        """Sort order as understood by the bookmark store."""
        return SORT_ORDERS[self.sort_order]


class BookmarksConfig(BaseModel):
    """Main configuration model."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level",
        json_schema_extra={
            "error_msg": "Log level must be DEBUG, INFO, WARNING or ERROR."
        },
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.upper()
        return v


def format_config_error(error: Exception) -> str:
    """
    Turn a validation failure into a readable message.

    Uses the ``error_msg`` hint attached to the failing field when there
    is one.
    """
    if not isinstance(error, ValidationError):
        return f"Configuration error: {error}"

    lines = ["Configuration validation failed:"]
    for err in error.errors():
        location = ".".join(str(part) for part in err["loc"])
        hint = _find_error_hint(err["loc"])
        lines.append(f"  - {location}: {hint or err['msg']}")
    return "\n".join(lines)


def _find_error_hint(loc) -> Optional[str]:
    model = BookmarksConfig
    field_info = None
    for part in loc:
        fields = getattr(model, "model_fields", None)
        if not fields or part not in fields:
            return None
        field_info = fields[part]
        model = field_info.annotation
    if field_info is None or not field_info.json_schema_extra:
        return None
    return field_info.json_schema_extra.get("error_msg")


class ConfigurationManager:
    """Manages loading and validation of configuration from multiple sources."""

    ENV_OVERRIDES = {
        "QURAN_BOOKMARKS_DB": "database_path",
        "QURAN_BOOKMARKS_SETTINGS": "settings_path",
    }

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Optional path to configuration file (TOML or JSON)
        """
        self._config: Optional[BookmarksConfig] = None
        self._load_configuration(config_path)

    def _get_default_config_paths(self) -> list[Path]:
        """Get list of default configuration file paths to try."""
        if getattr(sys, "frozen", False):
            app_dir = Path(sys.executable).parent
        else:
            app_dir = Path.cwd()

        return [
            app_dir / "quran_bookmarks.toml",
            app_dir / "quran_bookmarks.json",
        ]

    def _load_configuration(self, config_path: Optional[Path] = None) -> None:
        """Load configuration from file or use defaults."""
        config_data = {}

        if config_path:
            config_data = self._load_config_file(Path(config_path))
        else:
            for path in self._get_default_config_paths():
                if path.exists():
                    config_data = self._load_config_file(path)
                    break

        self._load_paths_from_env(config_data)
        self._config = self._validate(config_data)

    def _validate(self, config_data: Dict) -> BookmarksConfig:
        try:
            return BookmarksConfig(**config_data)
        except ValidationError as e:
            raise ConfigurationError(format_config_error(e))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(format_config_error(e))

    def _load_config_file(self, config_path: Path) -> Dict:
        """Load configuration from TOML or JSON file."""
        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        suffix = config_path.suffix.lower()
        if suffix not in (".toml", ".json"):
            raise ConfigurationError(
                f"Unsupported configuration file format: {config_path.suffix}"
            )

        try:
            if suffix == ".toml":
                data = toml.load(config_path)
            else:
                with open(config_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
        except (OSError, toml.TomlDecodeError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Failed to load configuration from {config_path}: {e}"
            )

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration in {config_path} must be a table of sections"
            )
        return data

    def _load_paths_from_env(self, config_data: Dict) -> None:
        """Environment variables take precedence over the file."""
        for env_var, key in self.ENV_OVERRIDES.items():
            value = os.getenv(env_var)
            if not value:
                continue
            storage = config_data.setdefault("storage", {})
            # A malformed section is reported by validation
            if isinstance(storage, dict):
                storage[key] = value

    def update_from_cli_args(self, args: Dict) -> None:
        """Update configuration from command-line arguments."""
        if not self._config:
            raise RuntimeError("Configuration not loaded")

        config_dict = self._config.model_dump()

        if args.get("sort_order"):
            config_dict["display"]["sort_order"] = args["sort_order"]

        if args.get("group_by_tags") is not None:
            config_dict["display"]["group_by_tags"] = args["group_by_tags"]

        if args.get("database"):
            config_dict["storage"]["database_path"] = args["database"]

        if args.get("verbose"):
            config_dict["log_level"] = "DEBUG"

        self._config = self._validate(config_dict)

    @property
    def config(self) -> BookmarksConfig:
        """Get the current configuration."""
        if not self._config:
            raise RuntimeError("Configuration not loaded")
        return self._config

    @staticmethod
    def create_sample_config(output_path: Path) -> None:
        """
        Write a TOML configuration template with default values.

        Needs no loaded configuration, so a broken file can be replaced.
        """
        sample = BookmarksConfig().model_dump(mode="json")
        with open(output_path, "w", encoding="utf-8") as f:
            f.write("# Quran Bookmarks configuration\n")
            toml.dump(sample, f)
