"""
Configuration file support for Recipe Store.

Provides:
- Config dataclass for holding configuration values
- TOML config file loading (recipe_store.toml)
- Recipes file resolution: CLI > environment > config file > default
"""

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

# Default config file name
DEFAULT_CONFIG_NAME = "recipe_store.toml"

# Default recipes file, relative to the working directory
DEFAULT_RECIPES_FILE = "recipes.json"

# Environment variable overriding the recipes file
RECIPES_FILE_ENV = "RECIPE_STORE_FILE"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class PathsConfig:
    """Path configuration."""

    recipes_file: Optional[str] = None


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "WARNING"
    log_file: Optional[str] = None


@dataclass
class Config:
    """Complete configuration for Recipe Store."""

    paths: PathsConfig = field(default_factory=PathsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    config_path: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], config_path: Optional[Path] = None) -> "Config":
        """
        Create Config from a dictionary (parsed TOML).

        Raises:
            ConfigurationError: If a known setting has the wrong type or value.
        """
        paths_data = _table(data, "paths")
        logging_data = _table(data, "logging")

        level = _optional_str(logging_data, "logging.level") or "WARNING"
        if level.upper() not in LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid logging.level '{level}' (expected one of {', '.join(LOG_LEVELS)})"
            )

        return cls(
            paths=PathsConfig(
                recipes_file=_optional_str(paths_data, "paths.recipes_file"),
            ),
            logging=LoggingConfig(
                level=level.upper(),
                log_file=_optional_str(logging_data, "logging.log_file"),
            ),
            config_path=config_path,
        )

    @property
    def base_dir(self) -> Path:
        """Directory relative config paths are resolved against."""
        if self.config_path is not None:
            return self.config_path.parent
        return Path.cwd()

    def resolve(self, value: str) -> Path:
        path = Path(value).expanduser()
        if not path.is_absolute():
            path = self.base_dir / path
        return path


def _table(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    table = data.get(name, {})
    if not isinstance(table, dict):
        raise ConfigurationError(f"[{name}] must be a table")
    return table


def _optional_str(table: Dict[str, Any], key: str) -> Optional[str]:
    value = table.get(key.split(".")[-1])
    if value is not None and not isinstance(value, str):
        raise ConfigurationError(f"{key} must be a string")
    return value


def find_config_file(config_path: Optional[Path] = None) -> Optional[Path]:
    """
    Find the configuration file.

    Search order:
    1. Explicit path if provided
    2. recipe_store.toml in current directory

    Args:
        config_path: Explicit path to config file.

    Returns:
        Path to config file, or None if not found.

    Raises:
        ConfigurationError: If an explicit path does not exist.
    """
    if config_path is not None:
        if config_path.exists():
            return config_path
        raise ConfigurationError(f"Config file not found: {config_path}")

    cwd_config = Path.cwd() / DEFAULT_CONFIG_NAME
    if cwd_config.exists():
        return cwd_config

    return None


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from a TOML file.

    If no config file is found, returns default configuration.

    Args:
        config_path: Optional explicit path to config file.

    Returns:
        Config object with loaded or default values.

    Raises:
        ConfigurationError: If config file exists but cannot be parsed.
    """
    config_file = find_config_file(config_path)

    if config_file is None:
        logger.debug("No config file found, using defaults")
        return Config()

    logger.debug(f"Loading config from: {config_file}")

    try:
        with open(config_file, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {config_file}: {e}")
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {config_file}: {e}")

    config = Config.from_dict(data, config_path=config_file)
    logger.info(f"Loaded config from: {config_file}")
    return config


def resolve_recipes_file(config: Config, cli_value: Optional[str] = None) -> Path:
    """
    Decide which recipes file to use.

    Precedence:
    1. ``--file`` on the command line
    2. RECIPE_STORE_FILE environment variable
    3. ``[paths] recipes_file`` in the config file (relative to that file)
    4. recipes.json in the current directory
    """
    if cli_value:
        logger.debug(f"Using recipes file from --file: {cli_value}")
        return Path(cli_value).expanduser()

    env_value = os.getenv(RECIPES_FILE_ENV)
    if env_value:
        logger.debug(f"Using {RECIPES_FILE_ENV}: {env_value}")
        return Path(env_value).expanduser()

    if config.paths.recipes_file:
        path = config.resolve(config.paths.recipes_file)
        logger.debug(f"Using config file recipes_file: {path}")
        return path

    return Path.cwd() / DEFAULT_RECIPES_FILE
