# Musync Default Configuration
# Full default configuration as Python dict and YAML generator

from typing import Any

import yaml

DEFAULT_CONFIG: dict[str, Any] = {
    "jobs": 16,
    "bitrate": 256,
    "state_file": ".musync",
    "hash_prefix_bytes": 1048576,
    "target_extension": "mp3",
    "convert_extensions": ["aiff", "flac", "ogg", "mod", "xm", "m4a"],
    "on_conversion_error": "skip",
    "on_hash_collision": "keep_first",
    "transcoder": {
        "executable": "ffmpeg",
    },
    "output": {
        "verbose": False,
        "colored": True,
    },
}


def generate_default_config() -> str:
    """
    Generate default configuration as YAML string with comments.

    Returns:
        YAML configuration string.
    """
    header = """# Musync Configuration
# One-way incremental sync of an audio library into transcoded files
#
# Location: ~/.config/musync/config.yaml (override with MUSYNC_CONFIG)
# Command line flags take precedence over these values.
#
# on_conversion_error: skip (warn, retry next run) | abort (fail the run)
# on_hash_collision:   keep_first (smallest destination path wins) | fail

"""
    yaml_content = yaml.dump(DEFAULT_CONFIG, default_flow_style=False, sort_keys=False, allow_unicode=True)
    return header + yaml_content
