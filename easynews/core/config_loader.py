"""Configuration loader for the pipeline YAML files.

This module loads and validates:
- Global defaults (clustering, allocation, digest) from config/defaults.yaml
- The feed catalogue from config/feeds.yaml
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from easynews.config import PipelineConfig
from easynews.core.exceptions import ConfigError, ConfigNotFoundError, ConfigValidationError
from easynews.core.logging import get_logger

logger = get_logger(__name__)

# Base config directory (project root/config)
_CONFIG_BASE_DIR = Path(__file__).parent.parent.parent / "config"


@lru_cache(maxsize=4)
def load_defaults(config_dir: Path = _CONFIG_BASE_DIR) -> dict[str, Any]:
    """Load global defaults from defaults.yaml.

    A missing defaults file is not an error; every section has model defaults.

    Args:
        config_dir: Directory holding the YAML files

    Returns:
        Dictionary with the clustering, allocation and digest sections

    Raises:
        ConfigError: If the file exists but is invalid YAML
    """
    defaults_path = config_dir / "defaults.yaml"
    if not defaults_path.exists():
        logger.debug("No defaults file, using model defaults", path=str(defaults_path))
        return {}
    return _load_yaml_file(defaults_path, "defaults")


@lru_cache(maxsize=4)
def load_feeds(config_dir: Path = _CONFIG_BASE_DIR) -> list[dict[str, Any]]:
    """Load the feed catalogue from feeds.yaml.

    Args:
        config_dir: Directory holding the YAML files

    Returns:
        List of raw feed dictionaries

    Raises:
        ConfigNotFoundError: If feeds.yaml does not exist
        ConfigError: If the file is invalid YAML or has no feed list
    """
    feeds_path = config_dir / "feeds.yaml"
    if not feeds_path.exists():
        logger.error("Feed catalogue not found", path=str(feeds_path))
        raise ConfigNotFoundError("feeds", config_path=str(feeds_path))

    content = _load_yaml_file(feeds_path, "feeds")
    feeds = content.get("feeds")
    if not isinstance(feeds, list):
        raise ConfigError("feeds.yaml must contain a 'feeds' list", config_path=str(feeds_path))
    return feeds


def load_pipeline_config(config_dir: Path | str | None = None) -> PipelineConfig:
    """Load and validate the complete pipeline configuration.

    Args:
        config_dir: Directory holding defaults.yaml and feeds.yaml
                    (defaults to <project root>/config)

    Returns:
        Validated PipelineConfig

    Raises:
        ConfigNotFoundError: If the feed catalogue is missing
        ConfigValidationError: If validation fails
    """
    base_dir = Path(config_dir) if config_dir is not None else _CONFIG_BASE_DIR
    raw_config = dict(load_defaults(base_dir))
    raw_config["feeds"] = load_feeds(base_dir)

    try:
        config = PipelineConfig(**raw_config)
    except ValidationError as e:
        error_messages = []
        for error in e.errors():
            loc = ".".join(str(loc_part) for loc_part in error["loc"])
            error_messages.append(f"{loc}: {error['msg']}")

        logger.error("Config validation failed", errors=error_messages)
        raise ConfigValidationError(
            "Invalid pipeline configuration:\n" + "\n".join(error_messages),
            config_path=str(base_dir),
        ) from e

    logger.info(
        "Pipeline config loaded",
        feeds=len(config.feeds),
        quota_categories=config.allocation.categories,
    )
    return config


def _load_yaml_file(path: Path, name: str) -> dict[str, Any]:
    """Load a YAML file from disk.

    Args:
        path: Path to the YAML file.
        name: Human-readable name for error messages.

    Returns:
        Parsed YAML content as dictionary.

    Raises:
        ConfigError: If file doesn't exist or parsing fails.
    """
    if not path.exists():
        logger.error("Config file not found", name=name, path=str(path))
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            content = yaml.safe_load(f)

        if not isinstance(content, dict):
            raise ConfigError(f"Config file must contain a YAML object: {path}")

        logger.debug("Loaded config file", name=name, path=str(path))
        return content

    except yaml.YAMLError as e:
        logger.error("YAML parsing failed", name=name, path=str(path), error=str(e))
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        logger.error("Failed to read config file", name=name, path=str(path), error=str(e))
        raise ConfigError(f"Cannot read {path}: {e}") from e


def clear_global_config_cache() -> None:
    """Clear all cached global configurations.

    Call this if config files are modified at runtime and need to be reloaded.
    """
    load_defaults.cache_clear()
    load_feeds.cache_clear()
    logger.info("Global config cache cleared")
