"""groupstats Configuration System.

Loads and validates configuration from ~/.groupstats/config.json.
Uses Pydantic for schema validation with sensible defaults.

Supports migration from older config versions while preserving existing values.

Usage:
    from groupstats.config import get_config, save_config

    config = get_config()
    print(config.stores.contact_db_path)
    print(config.word_cloud.default_top_n)

    config.logging.level = "DEBUG"
    save_config(config)
"""

from __future__ import annotations

import json
import logging
import os
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

CONFIG_PATH = Path.home() / ".groupstats" / "config.json"

# Current config schema version for migration tracking
CONFIG_VERSION = 2


class StoreConfig(BaseModel):
    """Locations of the message archive and the contact/roster database.

    Attributes:
        message_db_path: Path to the message database (None = not configured).
        contact_db_path: Path to the contact database (None = no roster data).
        timeout_seconds: SQLite busy timeout passed to each connection.
    """

    message_db_path: Path | None = None
    contact_db_path: Path | None = None
    timeout_seconds: float = Field(default=5.0, gt=0, le=60)


class WordCloudConfig(BaseModel):
    """Word-frequency defaults.

    Attributes:
        default_top_n: Number of words kept when callers don't pass top_n.
        min_count: Minimum occurrences for a word to be reported.
        min_length: Minimum word length in characters.
        extra_stopwords: Additional words excluded from analysis.
    """

    default_top_n: int = Field(default=100, ge=1, le=1000)
    min_count: int = Field(default=1, ge=1)
    min_length: int = Field(default=2, ge=1)
    extra_stopwords: list[str] = Field(default_factory=list)


class LoggingConfig(BaseModel):
    """Logging preferences."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


class GroupStatsConfig(BaseModel):
    """groupstats configuration schema.

    Attributes:
        config_version: Schema version for migration tracking.
        stores: Database locations and connection settings.
        word_cloud: Word-frequency defaults.
        logging: Logging preferences.
    """

    config_version: int = CONFIG_VERSION
    stores: StoreConfig = Field(default_factory=StoreConfig)
    word_cloud: WordCloudConfig = Field(default_factory=WordCloudConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# Module-level singleton with thread safety
_config: GroupStatsConfig | None = None
_config_lock = threading.Lock()


def _migrate_v1_to_v2(data: dict[str, Any]) -> dict[str, Any]:
    """Migrate from v1 to v2: top-level db paths move under "stores"."""
    stores = data.setdefault("stores", {})
    for key in ("message_db_path", "contact_db_path"):
        if key in data:
            stores.setdefault(key, data.pop(key))
    if "top_n" in data:
        data.setdefault("word_cloud", {}).setdefault("default_top_n", data.pop("top_n"))
    return data


_MIGRATIONS: dict[int, Callable[[dict[str, Any]], dict[str, Any]]] = {
    2: _migrate_v1_to_v2,
}


def _migrate_config(data: dict[str, Any]) -> dict[str, Any]:
    """Migrate config data from older versions to current schema.

    Args:
        data: Raw config data loaded from file.

    Returns:
        Migrated config data compatible with current schema.
    """
    version = data.get("config_version", 1)

    for target_version in sorted(_MIGRATIONS.keys()):
        if version < target_version:
            logger.info("Migrating config from version %s to %s", version, target_version)
            data = _MIGRATIONS[target_version](data)
            version = target_version

    data["config_version"] = CONFIG_VERSION
    return data


def load_config(config_path: Path | None = None) -> GroupStatsConfig:
    """Load configuration from file, return defaults if missing/invalid.

    Args:
        config_path: Optional path to config file. Defaults to ~/.groupstats/config.json.

    Returns:
        GroupStatsConfig instance with loaded or default values.
    """
    path = config_path or CONFIG_PATH

    if not path.exists():
        logger.debug("Config file not found at %s, using defaults", path)
        return GroupStatsConfig()

    try:
        with path.open() as f:
            data: dict[str, Any] = json.load(f)
    except json.JSONDecodeError as e:
        logger.warning("Invalid JSON in config file %s: %s, using defaults", path, e)
        return GroupStatsConfig()
    except OSError as e:
        logger.warning("Cannot read config file %s: %s, using defaults", path, e)
        return GroupStatsConfig()

    if not isinstance(data, dict):
        logger.warning("Config file %s does not contain an object, using defaults", path)
        return GroupStatsConfig()

    data = _migrate_config(data)

    try:
        return GroupStatsConfig.model_validate(data)
    except ValidationError as e:
        logger.warning("Config validation failed: %s, using defaults", e)
        return GroupStatsConfig()


def save_config(config: GroupStatsConfig, config_path: Path | None = None) -> bool:
    """Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Optional path to config file. Defaults to ~/.groupstats/config.json.

    Returns:
        True if saved successfully, False otherwise.
    """
    path = config_path or CONFIG_PATH

    try:
        path.parent.mkdir(parents=True, exist_ok=True)

        with path.open("w") as f:
            json.dump(config.model_dump(mode="json"), f, indent=2)

        # Owner-only: config holds paths to personal chat databases
        os.chmod(path, 0o600)

        logger.debug("Configuration saved to %s", path)
        return True

    except OSError as e:
        logger.error("Failed to save config to %s: %s", path, e)
        return False


def get_config() -> GroupStatsConfig:
    """Get singleton configuration instance.

    Uses double-check locking for thread safety.

    Returns:
        Shared GroupStatsConfig instance.
    """
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:
                _config = load_config()
    return _config


def reset_config() -> None:
    """Reset singleton configuration for testing."""
    global _config
    with _config_lock:
        _config = None
