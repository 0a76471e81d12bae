# Musync Sync State
# Persisted mapping of content hash to destination-relative path

from pathlib import Path
from typing import Optional

from musync.errors import DataCorruptionError, FileSystemError
from musync.utils.hashing import digest_width
from musync.utils.paths import atomic_write

STATE_HEADER = "# musync-state v2"
DELIMITER = "\t"


def load_state(path: Path, key_width: int) -> dict[str, str]:
    """
    Load the hash -> relative path mapping.

    Two formats are read. Current files start with ``STATE_HEADER`` and hold
    ``<hash>\\t<path>`` lines. Legacy files have no header and hold
    ``<hash><path>`` lines, where the hash is the first ``key_width``
    characters.

    Args:
        path: State file path.
        key_width: Width of every hash key.

    Returns:
        Mapping of hash to relative path. Empty if the file doesn't exist.

    Raises:
        DataCorruptionError: If a line is malformed.
        FileSystemError: If the file exists but cannot be read.
    """
    try:
        with open(path, encoding="utf-8", newline="") as f:
            lines = f.read().split("\n")
    except FileNotFoundError:
        return {}
    except (OSError, UnicodeDecodeError) as e:
        raise FileSystemError(f"Cannot read state file {path}: {e}", path) from e

    # The final newline leaves one empty element behind
    if lines and lines[-1] == "":
        lines.pop()

    if lines and lines[0] == STATE_HEADER:
        return _parse_delimited(path, lines[1:], key_width)
    return _parse_fixed_width(path, lines, key_width)


def _parse_delimited(path: Path, lines: list[str], key_width: int) -> dict[str, str]:
    table: dict[str, str] = {}
    for number, line in enumerate(lines, start=2):
        key, sep, value = line.partition(DELIMITER)
        if not sep or len(key) != key_width:
            raise DataCorruptionError(f"Malformed state line {number} in {path}", path, number)
        table[key] = value
    return table


def _parse_fixed_width(path: Path, lines: list[str], key_width: int) -> dict[str, str]:
    table: dict[str, str] = {}
    for number, line in enumerate(lines, start=1):
        if len(line) < key_width:
            raise DataCorruptionError(f"State line {number} in {path} is too short", path, number)
        table[line[:key_width]] = line[key_width:]
    return table


def save_state(path: Path, table: dict[str, str]) -> None:
    """
    Write the mapping, replacing any existing file atomically.

    Entries are sorted by path so unchanged state produces identical bytes.

    Raises:
        FileSystemError: If the file cannot be written.
    """
    lines = [STATE_HEADER]
    lines.extend(f"{key}{DELIMITER}{value}" for key, value in sorted(table.items(), key=lambda kv: (kv[1], kv[0])))
    atomic_write(path, "\n".join(lines) + "\n")


class StateStore:
    """
    State file owned by a destination root.

    Read once at the start of a run and written once at the end.
    """

    def __init__(self, dest_root: Path, file_name: str = ".musync", key_width: Optional[int] = None):
        """
        Initialize state store.

        Args:
            dest_root: Destination root directory.
            file_name: State file name in the destination root.
            key_width: Hash width. Defaults to the SHA-512 hex digest length.
        """
        self.path = dest_root / file_name
        self.key_width = key_width if key_width is not None else digest_width()

    def load(self) -> dict[str, str]:
        """Load the prior state."""
        return load_state(self.path, self.key_width)

    def save(self, table: dict[str, str]) -> None:
        """Persist a new state."""
        save_state(self.path, table)
