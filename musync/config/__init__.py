# Musync Configuration Module
# Handles YAML-based configuration loading, validation, and defaults

from musync.config.defaults import DEFAULT_CONFIG, generate_default_config
from musync.config.loader import (
    ensure_config_exists,
    get_config_path,
    load_config,
    validate_config_file,
)
from musync.config.schema import (
    CollisionPolicy,
    ConversionErrorPolicy,
    MusyncConfig,
    OutputConfig,
    TranscoderConfig,
)

__all__ = [
    # Schema
    "MusyncConfig",
    "TranscoderConfig",
    "OutputConfig",
    "ConversionErrorPolicy",
    "CollisionPolicy",
    # Loader
    "load_config",
    "get_config_path",
    "ensure_config_exists",
    "validate_config_file",
    # Defaults
    "DEFAULT_CONFIG",
    "generate_default_config",
]
