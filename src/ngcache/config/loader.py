"""Configuration file loading and merging."""

import logging
from pathlib import Path

import yaml

from ngcache.config.schema import DEFAULT_CONFIG, NgCacheConfig

logger = logging.getLogger(__name__)

CONFIG_DIRNAME = ".ngcache"
CONFIG_FILENAME = "config.yaml"


def get_home_config_path() -> Path:
    """Get path to global config: ~/.ngcache/config.yaml."""
    return Path.home() / CONFIG_DIRNAME / CONFIG_FILENAME


def get_local_config_path(root: Path | None = None) -> Path:
    """Get path to project config: <root>/.ngcache/config.yaml."""
    return (root or Path.cwd()) / CONFIG_DIRNAME / CONFIG_FILENAME


def home_config_exists() -> bool:
    """Check if the global home config exists."""
    return get_home_config_path().exists()


def local_config_exists(root: Path | None = None) -> bool:
    """Check if the project config exists."""
    return get_local_config_path(root).exists()


def load_yaml_config(path: Path) -> dict[str, object] | None:
    """Load a YAML config file, return None if not found, empty or invalid."""
    if not path.exists():
        return None
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.warning("Ignoring invalid config file %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        return None
    result: dict[str, object] = data
    return result


def load_config(root: Path | None = None) -> NgCacheConfig:
    """Load merged configuration.

    Precedence (lowest to highest):
    1. Built-in defaults
    2. Global config (~/.ngcache/config.yaml)
    3. Project config (<root>/.ngcache/config.yaml)

    Returns merged NgCacheConfig.
    """
    config = DEFAULT_CONFIG

    for path in (get_home_config_path(), get_local_config_path(root)):
        data = load_yaml_config(path)
        if data:
            logger.debug("Loaded config from %s", path)
            config = config.merge(NgCacheConfig.from_dict(data))

    return config


def save_config(config: NgCacheConfig, path: Path) -> None:
    """Save config to a YAML file.

    Creates parent directories if needed.
    Only saves non-None values.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.to_dict()
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
