# Musync Sync Actions
# Action types, events and conversion jobs

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ActionType(str, Enum):
    """Types of sync actions."""

    # No action needed
    UNCHANGED = "unchanged"

    # Destination writes
    COPY = "copy"
    CONVERT = "convert"
    RENAME = "rename"

    # Stale destination file deleted
    REMOVE = "remove"

    # Source files skipped
    HASH_COLLISION = "hash_collision"
    PATH_COLLISION = "path_collision"

    # Transcoder exited non-zero
    CONVERT_FAILED = "convert_failed"


@dataclass(frozen=True)
class SyncEvent:
    """
    A single action reported to the event sink.

    ``path`` is relative to the destination root, except for collisions
    where it names the skipped source file.
    """

    action: ActionType
    path: str
    detail: str = ""

    @property
    def is_problem(self) -> bool:
        """Check if this event reports a skipped or failed file."""
        return self.action in (
            ActionType.HASH_COLLISION,
            ActionType.PATH_COLLISION,
            ActionType.CONVERT_FAILED,
        )


EventSink = Callable[[SyncEvent], None]


def discard_event(event: SyncEvent) -> None:
    """Event sink that ignores everything."""


@dataclass(frozen=True)
class ConversionJob:
    """A source file to transcode into its destination path."""

    source: Path
    destination: Path
    relative_path: str = ""


@dataclass(frozen=True)
class ConversionFailure:
    """A conversion whose transcoder exited non-zero."""

    job: ConversionJob
    returncode: int
    stderr: str = ""
