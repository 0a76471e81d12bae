# Musync Errors
# Exception hierarchy for sync runs

from pathlib import Path
from typing import Optional


class MusyncError(Exception):
    """Base exception for all musync errors. Any of them aborts a sync run."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class FileSystemError(MusyncError):
    """Exception raised when a path cannot be read, written, moved or removed."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        super().__init__(message)


class DataCorruptionError(MusyncError):
    """Exception raised for a malformed state file."""

    def __init__(self, message: str, path: Optional[Path] = None, line_number: int = 0):
        self.path = path
        self.line_number = line_number
        super().__init__(message)


class ProcessSpawnError(MusyncError):
    """Exception raised when the transcoder cannot be launched."""

    def __init__(self, message: str, executable: str = ""):
        self.executable = executable
        super().__init__(message)


class ProcessExecutionError(MusyncError):
    """Exception raised when conversions exit non-zero under the abort policy."""

    def __init__(self, message: str, failures: Optional[list] = None):
        self.failures = failures or []
        super().__init__(message)


class HashCollisionError(MusyncError):
    """Exception raised when distinct files share a fingerprint under the fail policy."""

    def __init__(self, message: str, paths: Optional[list[str]] = None):
        self.paths = paths or []
        super().__init__(message)
