# Musync Utilities Module
# Helper functions for path handling and content hashing

from musync.utils.hashing import (
    DEFAULT_PREFIX_BYTES,
    digest_width,
    prefix_hash,
)
from musync.utils.paths import (
    atomic_write,
    ensure_dir,
    expand_path,
    flatten,
    get_extension,
    move_file,
    relative_posix,
    remove_empty_dirs,
    remove_file,
    replace_extension,
    safe_copy,
    walk_files,
)

__all__ = [
    # Paths
    "expand_path",
    "ensure_dir",
    "flatten",
    "replace_extension",
    "get_extension",
    "relative_posix",
    "walk_files",
    "safe_copy",
    "move_file",
    "remove_file",
    "remove_empty_dirs",
    "atomic_write",
    # Hashing
    "DEFAULT_PREFIX_BYTES",
    "digest_width",
    "prefix_hash",
]
