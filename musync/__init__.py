"""musync - one-way incremental sync of an audio library into transcoded files.

Source files are fingerprinted from their leading bytes, so unchanged files
are skipped, moved files are renamed at the destination instead of being
converted again, and files whose source is gone are pruned.
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "SyncEngine",
    "SyncResult",
    "SyncEvent",
    "ActionType",
    "MusyncConfig",
    "load_config",
    "MusyncError",
]


def __getattr__(name: str):
    """Lazy import to avoid loading dependencies during setup."""
    if name in ("SyncEngine", "SyncResult"):
        from musync.sync import engine

        return getattr(engine, name)
    if name in ("SyncEvent", "ActionType"):
        from musync.sync import actions

        return getattr(actions, name)
    if name in ("MusyncConfig", "load_config"):
        from musync import config

        return getattr(config, name)
    if name == "MusyncError":
        from musync.errors import MusyncError

        return MusyncError
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
