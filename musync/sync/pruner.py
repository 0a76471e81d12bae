# Musync Pruner
# Removal of destination files no longer represented in the state

from pathlib import Path
from typing import Optional

from musync.sync.actions import ActionType, EventSink, SyncEvent, discard_event
from musync.utils.paths import relative_posix, remove_empty_dirs, remove_file, walk_files


def find_stale_files(dest_root: Path, expected_files: set[str], state_file_name: str) -> list[str]:
    """
    List destination files that are not expected.

    Args:
        dest_root: Destination root directory.
        expected_files: Relative paths that should exist after the run.
        state_file_name: State file name, never reported.

    Returns:
        Sorted relative paths of stale files.
    """
    if not dest_root.is_dir():
        return []

    stale: list[str] = []
    for path in walk_files(dest_root):
        relative = relative_posix(path, dest_root)
        if relative == state_file_name or relative in expected_files:
            continue
        stale.append(relative)
    return stale


def prune(
    dest_root: Path,
    expected_files: set[str],
    state_file_name: str = ".musync",
    *,
    on_event: Optional[EventSink] = None,
    dry_run: bool = False,
) -> list[str]:
    """
    Delete stale destination files, then every directory left empty.

    Must run after all copies, renames and conversions have finished.

    Args:
        dest_root: Destination root directory.
        expected_files: Relative paths that should exist after the run.
        state_file_name: State file name, never removed.
        on_event: Event sink, one remove event per file.
        dry_run: If True, only report.

    Returns:
        Relative paths of removed files.

    Raises:
        FileSystemError: If a file or directory cannot be removed.
    """
    on_event = on_event or discard_event
    stale = find_stale_files(dest_root, expected_files, state_file_name)

    for relative in stale:
        if not dry_run:
            remove_file(dest_root / relative)
        on_event(SyncEvent(ActionType.REMOVE, relative))

    if not dry_run and dest_root.is_dir():
        remove_empty_dirs(dest_root)

    return stale
