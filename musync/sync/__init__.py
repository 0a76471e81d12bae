# Musync Sync Module
# Core synchronization engine and components

from musync.sync.actions import ActionType, ConversionFailure, ConversionJob, SyncEvent
from musync.sync.engine import SyncEngine, SyncResult
from musync.sync.pruner import find_stale_files, prune
from musync.sync.scanner import ScanResult, Scanner
from musync.sync.scheduler import ConversionScheduler, build_command, run_transcoder
from musync.sync.state import StateStore, load_state, save_state

__all__ = [
    # Actions
    "ActionType",
    "SyncEvent",
    "ConversionJob",
    "ConversionFailure",
    # State
    "StateStore",
    "load_state",
    "save_state",
    # Scanner
    "Scanner",
    "ScanResult",
    # Scheduler
    "ConversionScheduler",
    "build_command",
    "run_transcoder",
    # Pruner
    "prune",
    "find_stale_files",
    # Engine
    "SyncEngine",
    "SyncResult",
]
