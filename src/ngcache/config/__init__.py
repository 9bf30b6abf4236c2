"""Configuration loading."""

from ngcache.config.loader import (
    get_home_config_path,
    get_local_config_path,
    home_config_exists,
    load_config,
    local_config_exists,
    save_config,
)
from ngcache.config.schema import DEFAULT_CONFIG, NgCacheConfig

__all__ = [
    "DEFAULT_CONFIG",
    "NgCacheConfig",
    "get_home_config_path",
    "get_local_config_path",
    "home_config_exists",
    "load_config",
    "local_config_exists",
    "save_config",
]
