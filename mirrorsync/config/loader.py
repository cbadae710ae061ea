# MirrorSync Configuration Loader
# Locate, read, validate and write the YAML configuration file

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from mirrorsync.config.defaults import default_config, generate_default_config
from mirrorsync.config.schema import MirrorConfig
from mirrorsync.errors import ConfigError

CONFIG_ENV_VAR = "MIRRORSYNC_CONFIG"


def get_config_dir() -> Path:
    """Directory holding the user's mirrorsync configuration."""
    return Path.home() / ".config" / "mirrorsync"


def get_config_path() -> Path:
    """
    Path of the configuration file.

    MIRRORSYNC_CONFIG, when set, replaces the default location.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return get_config_dir() / "config.yaml"


def load_config(config_path: Optional[Path] = None) -> MirrorConfig:
    """
    Read and validate a configuration file.

    Keys missing from the file keep their default values.

    Args:
        config_path: File to read (default: get_config_path()).

    Returns:
        Validated MirrorConfig.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigError: If the file is not a YAML mapping or fails validation.
    """
    path = config_path or get_config_path()
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}\nRun 'mirrorsync config init' to create one.")

    data = _read_yaml(path) or {}
    try:
        return MirrorConfig.model_validate(_deep_merge(default_config(), data))
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}:\n{e}") from e


def load_config_or_default(config_path: Optional[Path] = None) -> MirrorConfig:
    """Like load_config, but a missing file yields the built-in defaults."""
    try:
        return load_config(config_path)
    except FileNotFoundError:
        return MirrorConfig.model_validate(default_config())


def save_config(config: MirrorConfig, config_path: Optional[Path] = None) -> Path:
    """
    Write a configuration to disk as YAML.

    Returns:
        The path written.
    """
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(config.model_dump(mode="json"), f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    return path


def ensure_config_exists(config_path: Optional[Path] = None) -> tuple[Path, bool]:
    """
    Write the commented default configuration unless a file is already there.

    Returns:
        (path, created) where created tells whether the file was new.
    """
    path = config_path or get_config_path()
    if path.exists():
        return path, False

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(generate_default_config(), encoding="utf-8")
    return path, True


def validate_config_file(config_path: Optional[Path] = None) -> tuple[bool, list[str]]:
    """
    Check a configuration file and collect every problem found.

    Beyond schema validation this flags settings that load fine but
    cannot work together.

    Returns:
        (valid, problems)
    """
    path = config_path or get_config_path()
    if not path.exists():
        return False, [f"Configuration file not found: {path}"]

    try:
        data = _read_yaml(path)
    except ConfigError as e:
        return False, [e.message]
    if data is None:
        return False, ["Configuration file is empty"]

    try:
        config = MirrorConfig.model_validate(_deep_merge(default_config(), data))
    except ValidationError as e:
        return False, [f"{' -> '.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]

    problems = _conflicts(config)
    return not problems, problems


def _read_yaml(path: Path) -> Optional[dict[str, Any]]:
    """Parse a YAML file whose root must be a mapping; an empty file gives None."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {path}: {e}") from e

    if data is not None and not isinstance(data, dict):
        raise ConfigError(f"Configuration root must be a mapping: {path}")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Overlay override onto base, merging nested sections key by key."""
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _conflicts(config: MirrorConfig) -> list[str]:
    problems = []
    if config.tumblr.blogs and not config.tumblr.api_key:
        problems.append("tumblr.blogs is set but tumblr.api_key is empty")
    return problems
