# Musync Path Utilities
# Path flattening, directory walking and safe file operations

import os
import shutil
import tempfile
from collections.abc import Iterator
from pathlib import Path, PurePath, PurePosixPath

from musync.errors import FileSystemError


def expand_path(path: str | Path) -> Path:
    """
    Expand ~ and environment variables in path.

    Args:
        path: Path string or Path object.

    Returns:
        Expanded Path object.
    """
    path_str = str(path)
    path_str = os.path.expanduser(path_str)
    path_str = os.path.expandvars(path_str)
    return Path(path_str).resolve()


def ensure_dir(path: Path) -> Path:
    """
    Ensure directory exists, creating if necessary.

    Args:
        path: Directory path.

    Returns:
        The path that was ensured.

    Raises:
        FileSystemError: If the directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FileSystemError(f"Cannot create directory {path}: {e.strerror or e}", path) from e
    return path


def flatten(relative: str | PurePath) -> PurePosixPath:
    """
    Reduce a nested relative path to its first directory and its file name.

    ``a/b/c/d.flac`` becomes ``a/d.flac``; paths with at most one directory
    component are returned unchanged.

    Args:
        relative: Relative path.

    Returns:
        Flattened path with POSIX separators.
    """
    parts = PurePath(relative).parts
    if len(parts) <= 2:
        return PurePosixPath(*parts)
    return PurePosixPath(parts[0], parts[-1])


def replace_extension(path: PurePosixPath, extension: str) -> PurePosixPath:
    """Replace the extension of path (given without the leading dot)."""
    return path.with_suffix(f".{extension}")


def get_extension(path: PurePath) -> str | None:
    """Return the extension without the dot, as found, or None if there is none."""
    suffix = path.suffix
    return suffix[1:] if suffix else None


def relative_posix(path: Path, base: Path) -> str:
    """Get path relative to base as a POSIX string."""
    return path.relative_to(base).as_posix()


def _raise_walk_error(error: OSError) -> None:
    path = Path(error.filename) if error.filename else None
    raise FileSystemError(f"Cannot read directory {error.filename}: {error.strerror or error}", path) from error


def walk_files(root: Path) -> Iterator[Path]:
    """
    Recursively yield regular files under root in sorted order.

    Symbolic links are skipped, to files and directories alike.

    Args:
        root: Directory to walk.

    Yields:
        Absolute file paths.

    Raises:
        FileSystemError: If a directory cannot be listed.
    """
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        dirnames.sort()
        for name in sorted(filenames):
            path = Path(dirpath) / name
            if path.is_file() and not path.is_symlink():
                yield path


def safe_copy(source: Path, dest: Path) -> None:
    """
    Atomically copy a file.

    Uses a temporary file and atomic rename to prevent partial copies
    in case of failure.

    Args:
        source: Source file.
        dest: Destination file.

    Raises:
        FileSystemError: If the copy fails.
    """
    ensure_dir(dest.parent)

    temp_dest = dest.with_suffix(dest.suffix + f".tmp.{os.getpid()}")
    try:
        shutil.copy2(source, temp_dest)
        os.replace(temp_dest, dest)
    except OSError as e:
        if temp_dest.exists():
            temp_dest.unlink()
        raise FileSystemError(f"Cannot copy {source} to {dest}: {e.strerror or e}", source) from e


def move_file(source: Path, dest: Path) -> None:
    """
    Move a file, creating the destination's parent directories.

    Raises:
        FileSystemError: If the move fails.
    """
    ensure_dir(dest.parent)
    try:
        os.replace(source, dest)
    except OSError as e:
        raise FileSystemError(f"Cannot move {source} to {dest}: {e.strerror or e}", source) from e


def remove_file(path: Path) -> None:
    """Delete a file, raising FileSystemError on failure."""
    try:
        path.unlink()
    except OSError as e:
        raise FileSystemError(f"Cannot remove {path}: {e.strerror or e}", path) from e


def remove_empty_dirs(root: Path) -> list[Path]:
    """
    Remove every empty directory below root, bottom-up.

    Directories emptied by removing their children are removed too.
    The root itself is kept.

    Args:
        root: Directory to clean.

    Returns:
        List of removed directories.

    Raises:
        FileSystemError: If a directory cannot be listed or removed.
    """
    removed: list[Path] = []

    for dirpath, _dirnames, _filenames in os.walk(root, topdown=False, onerror=_raise_walk_error):
        path = Path(dirpath)
        if path == root:
            continue
        try:
            if any(path.iterdir()):
                continue
            path.rmdir()
        except OSError as e:
            raise FileSystemError(f"Cannot remove directory {path}: {e.strerror or e}", path) from e
        removed.append(path)

    return removed


def atomic_write(path: Path, content: str | bytes, *, encoding: str = "utf-8") -> None:
    """
    Atomically write content to file.

    Uses a temporary file and atomic rename.

    Args:
        path: Target file path.
        content: Content to write (str or bytes).
        encoding: Encoding for string content (default utf-8).

    Raises:
        FileSystemError: If the file cannot be written.
    """
    ensure_dir(path.parent)

    try:
        fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    except OSError as e:
        raise FileSystemError(f"Cannot write {path}: {e.strerror or e}", path) from e

    try:
        if isinstance(content, str):
            with os.fdopen(fd, "w", encoding=encoding, newline="\n") as f:
                f.write(content)
        else:
            with os.fdopen(fd, "wb") as f:
                f.write(content)
        os.replace(temp_path, path)
    except OSError as e:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise FileSystemError(f"Cannot write {path}: {e.strerror or e}", path) from e
