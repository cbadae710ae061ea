# MirrorSync Configuration Module
# Handles YAML-based configuration loading, validation, and defaults

from mirrorsync.config.defaults import DEFAULT_CONFIG, default_config, generate_default_config
from mirrorsync.config.loader import (
    ensure_config_exists,
    get_config_path,
    load_config,
    load_config_or_default,
    save_config,
    validate_config_file,
)
from mirrorsync.config.schema import MirrorConfig, OutputConfig, SyncSettings, TumblrConfig

__all__ = [
    # Schema
    "MirrorConfig",
    "SyncSettings",
    "TumblrConfig",
    "OutputConfig",
    # Loader
    "load_config",
    "load_config_or_default",
    "save_config",
    "get_config_path",
    "ensure_config_exists",
    "validate_config_file",
    # Defaults
    "DEFAULT_CONFIG",
    "default_config",
    "generate_default_config",
]
