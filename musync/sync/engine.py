# Musync Sync Engine
# Orchestrates one run: load state, scan, convert, prune, save

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from musync.config.schema import ConversionErrorPolicy, MusyncConfig
from musync.errors import FileSystemError, ProcessExecutionError
from musync.sync.actions import ActionType, ConversionFailure, EventSink, SyncEvent
from musync.sync.pruner import prune
from musync.sync.scanner import ScanResult, Scanner
from musync.sync.scheduler import ConversionScheduler, Runner
from musync.sync.state import StateStore
from musync.utils.paths import ensure_dir


@dataclass
class SyncResult:
    """Result of a complete sync run."""

    success: bool = True
    dry_run: bool = False
    copied: int = 0
    converted: int = 0
    renamed: int = 0
    unchanged: int = 0
    removed: int = 0
    collisions: int = 0
    failures: list[ConversionFailure] = field(default_factory=list)
    events: list[SyncEvent] = field(default_factory=list)
    duration: float = 0.0

    @property
    def total_changes(self) -> int:
        """Number of destination files written, moved or deleted."""
        return self.copied + self.converted + self.renamed + self.removed

    @property
    def has_issues(self) -> bool:
        """Check if any file was skipped or failed."""
        return self.collisions > 0 or bool(self.failures)


class SyncEngine:
    """
    Main synchronization engine.

    Each run reads the state file once, and writes it once after every
    phase has succeeded. An aborted run leaves the previous state in place,
    so the next run derives the same work again.
    """

    def __init__(
        self,
        config: MusyncConfig,
        source_root: Path,
        dest_root: Path,
        *,
        on_event: Optional[EventSink] = None,
        runner: Optional[Runner] = None,
    ):
        """
        Initialize sync engine.

        Args:
            config: Musync configuration.
            source_root: Directory to sync from.
            dest_root: Directory to sync to.
            on_event: Optional event sink, called once per action.
            runner: Optional transcoder runner (for tests or alternative launchers).
        """
        self.config = config
        self.source_root = source_root
        self.dest_root = dest_root
        self.on_event = on_event
        self.runner = runner
        self.state_store = StateStore(dest_root, config.state_file)

    def plan(self) -> SyncResult:
        """Classify everything without touching the destination."""
        return self.sync(dry_run=True)

    def sync(self, *, dry_run: bool = False) -> SyncResult:
        """
        Run one sync.

        Args:
            dry_run: If True, report what would happen without writing.

        Returns:
            SyncResult with counts and events.

        Raises:
            MusyncError: Any filesystem, state, spawn or policy error aborts the run.
        """
        started = time.monotonic()
        result = SyncResult(dry_run=dry_run)

        def emit(event: SyncEvent) -> None:
            result.events.append(event)
            if self.on_event is not None:
                self.on_event(event)

        if not self.source_root.is_dir():
            raise FileSystemError(f"Source directory does not exist: {self.source_root}", self.source_root)
        if not dry_run:
            ensure_dir(self.dest_root)

        prior_state = self.state_store.load()

        scanner = Scanner(
            self.source_root,
            self.dest_root,
            convert_extensions=self.config.convert_extensions,
            target_extension=self.config.target_extension,
            hash_prefix_bytes=self.config.hash_prefix_bytes,
            collision_policy=self.config.on_hash_collision,
            on_event=emit,
            dry_run=dry_run,
        )
        scan = scanner.diff(prior_state)

        if dry_run:
            for job in scan.jobs:
                emit(SyncEvent(ActionType.CONVERT, job.relative_path))
        else:
            scheduler = ConversionScheduler(
                jobs=self.config.jobs,
                bitrate=self.config.bitrate,
                executable=self.config.transcoder.executable,
                runner=self.runner,
                on_event=emit,
            )
            failures = scheduler.run(scan.jobs)
            self._handle_failures(failures, scan, result, emit)

        expected_files = scan.expected_files
        if dry_run:
            # Rename sources stay in place until a real run moves them
            expected_files = expected_files | {old for old, _ in scan.renamed}

        removed = prune(
            self.dest_root,
            expected_files,
            self.config.state_file,
            on_event=emit,
            dry_run=dry_run,
        )

        if not dry_run:
            self.state_store.save(scan.new_state)

        result.copied = len(scan.copied)
        result.converted = len(scan.jobs) - len(result.failures)
        result.renamed = len(scan.renamed)
        result.unchanged = len(scan.unchanged)
        result.removed = len(removed)
        result.collisions = len(scan.collisions)
        result.success = not result.failures
        result.duration = time.monotonic() - started
        return result

    def _handle_failures(
        self,
        failures: list[ConversionFailure],
        scan: ScanResult,
        result: SyncResult,
        emit: EventSink,
    ) -> None:
        """Report failed conversions and apply the configured policy."""
        for failure in failures:
            emit(SyncEvent(ActionType.CONVERT_FAILED, failure.job.relative_path, f"exit status {failure.returncode}"))

        if failures and self.config.on_conversion_error == ConversionErrorPolicy.ABORT:
            raise ProcessExecutionError(f"{len(failures)} conversion(s) failed", failures)

        # Dropped entries are pruned now and retried on the next run
        failed_paths = {failure.job.relative_path for failure in failures}
        for key in [key for key, value in scan.new_state.items() if value in failed_paths]:
            del scan.new_state[key]
        scan.expected_files -= failed_paths
        result.failures.extend(failures)
