# Musync Hashing Utilities
# Bounded content fingerprints for change and rename detection

import hashlib
from pathlib import Path

from musync.errors import FileSystemError

# Only the leading bytes are hashed; full-file hashing is too slow over large libraries.
DEFAULT_PREFIX_BYTES = 1024 * 1024
DEFAULT_ALGORITHM = "sha512"


def digest_width(algorithm: str = DEFAULT_ALGORITHM) -> int:
    """Return the length of a hex digest for the given algorithm."""
    return hashlib.new(algorithm).digest_size * 2


def prefix_hash(
    path: Path,
    *,
    limit: int = DEFAULT_PREFIX_BYTES,
    algorithm: str = DEFAULT_ALGORITHM,
    chunk_size: int = 65536,
) -> str:
    """
    Calculate the fingerprint of a file from its leading bytes.

    Two files with identical leading bytes within the limit get the same
    fingerprint.

    Args:
        path: Path to file.
        limit: Maximum number of bytes to read (default 1 MiB).
        algorithm: Hash algorithm (default sha512).
        chunk_size: Chunk size for reading.

    Returns:
        Hex digest of the hash.

    Raises:
        FileSystemError: If the file cannot be opened or read.
    """
    hasher = hashlib.new(algorithm)
    remaining = limit

    try:
        with open(path, "rb") as f:
            while remaining > 0 and (chunk := f.read(min(chunk_size, remaining))):
                hasher.update(chunk)
                remaining -= len(chunk)
    except OSError as e:
        raise FileSystemError(f"Cannot hash {path}: {e.strerror or e}", path) from e

    return hasher.hexdigest()
