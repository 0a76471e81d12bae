# Musync Configuration Loader
# Load, save, and manage YAML configuration files

import copy
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from musync.config.defaults import DEFAULT_CONFIG, generate_default_config
from musync.config.schema import MusyncConfig


def get_config_dir() -> Path:
    """Get the musync configuration directory."""
    return Path.home() / ".config" / "musync"


def get_config_path() -> Path:
    """Get the path to the configuration file."""
    env_path = os.environ.get("MUSYNC_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return get_config_dir() / "config.yaml"


def load_config(config_path: Optional[Path] = None) -> MusyncConfig:
    """
    Load configuration from YAML file.

    A missing file at the default location yields the defaults; a missing
    file that was asked for explicitly is an error.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        MusyncConfig: Validated configuration object.

    Raises:
        FileNotFoundError: If an explicit config file doesn't exist.
        ValueError: If the file is not a mapping or fails validation.
        yaml.YAMLError: If the file is not valid YAML.
    """
    explicit = config_path is not None
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        if explicit:
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        return MusyncConfig.model_validate(copy.deepcopy(DEFAULT_CONFIG))

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ValueError(f"Configuration must be a mapping: {config_path}")

    return MusyncConfig.model_validate(_merge_with_defaults(data))


def ensure_config_exists(config_path: Optional[Path] = None) -> tuple[Path, bool]:
    """
    Ensure configuration file exists, creating default if needed.

    Returns:
        Tuple of (config_path, was_created).
    """
    if config_path is None:
        config_path = get_config_path()

    if config_path.exists():
        return config_path, False

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(generate_default_config(), encoding="utf-8")
    return config_path, True


def validate_config_file(config_path: Optional[Path] = None) -> tuple[bool, list[str]]:
    """
    Validate a configuration file.

    Args:
        config_path: Path to config file to validate.

    Returns:
        Tuple of (is_valid, error_messages).
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        return False, [f"Configuration file not found: {config_path}"]

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return False, [f"Invalid YAML syntax: {e}"]

    if data is None:
        return False, ["Configuration file is empty"]

    if not isinstance(data, dict):
        return False, ["Configuration must be a mapping"]

    try:
        MusyncConfig.model_validate(_merge_with_defaults(data))
    except ValidationError as e:
        errors = []
        for error in e.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")
        return False, errors

    return True, []


def _merge_with_defaults(data: dict) -> dict:
    """Merge loaded data with default values for missing keys."""
    result = copy.deepcopy(DEFAULT_CONFIG)

    for key, value in data.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = {**result[key], **value}
        else:
            result[key] = value

    return result
