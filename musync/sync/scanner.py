# Musync Scanner
# Source tree walk, change classification and rename/copy execution

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from musync.config.schema import CollisionPolicy
from musync.errors import HashCollisionError
from musync.sync.actions import ActionType, ConversionJob, EventSink, SyncEvent, discard_event
from musync.utils.hashing import DEFAULT_PREFIX_BYTES, prefix_hash
from musync.utils.paths import (
    flatten,
    get_extension,
    move_file,
    relative_posix,
    replace_extension,
    safe_copy,
    walk_files,
)

DEFAULT_CONVERT_EXTENSIONS = ("aiff", "flac", "ogg", "mod", "xm", "m4a")
DEFAULT_TARGET_EXTENSION = "mp3"
RENAME_STAGING_PREFIX = ".musync-rename-"


@dataclass
class SourceFile:
    """A source file eligible for sync."""

    path: Path
    relative_source: str
    relative_output: str
    content_hash: str
    convertible: bool


@dataclass
class ScanResult:
    """Outcome of diffing the source tree against the prior state."""

    new_state: dict[str, str] = field(default_factory=dict)
    expected_files: set[str] = field(default_factory=set)
    copied: list[str] = field(default_factory=list)
    renamed: list[tuple[str, str]] = field(default_factory=list)
    unchanged: list[str] = field(default_factory=list)
    jobs: list[ConversionJob] = field(default_factory=list)
    collisions: list[SyncEvent] = field(default_factory=list)


class Scanner:
    """
    Classifies source files against the prior state.

    Each eligible file is fingerprinted, mapped to its flattened destination
    path and classified as copy, convert, rename or unchanged. Copies and
    renames are executed right away; conversions are returned as jobs.
    """

    def __init__(
        self,
        source_root: Path,
        dest_root: Path,
        *,
        convert_extensions: tuple[str, ...] | list[str] = DEFAULT_CONVERT_EXTENSIONS,
        target_extension: str = DEFAULT_TARGET_EXTENSION,
        hash_prefix_bytes: int = DEFAULT_PREFIX_BYTES,
        collision_policy: CollisionPolicy = CollisionPolicy.KEEP_FIRST,
        on_event: Optional[EventSink] = None,
        dry_run: bool = False,
    ):
        """
        Initialize scanner.

        Args:
            source_root: Directory to sync from.
            dest_root: Directory to sync to.
            convert_extensions: Source extensions that need transcoding.
            target_extension: Extension of destination files; copied as-is.
            hash_prefix_bytes: Leading bytes hashed per file.
            collision_policy: Policy for files sharing a fingerprint.
            on_event: Event sink for copy, rename and collision events.
            dry_run: If True, classify without touching the filesystem.
        """
        self.source_root = source_root
        self.dest_root = dest_root
        self.convert_extensions = frozenset(convert_extensions)
        self.target_extension = target_extension
        self.hash_prefix_bytes = hash_prefix_bytes
        self.collision_policy = collision_policy
        self.on_event = on_event or discard_event
        self.dry_run = dry_run

    def scan_sources(self) -> list[SourceFile]:
        """
        Walk the source tree and fingerprint every eligible file.

        Files without an extension, or with one that is neither convertible
        nor the target extension, are skipped without being read.
        """
        files: list[SourceFile] = []

        for path in walk_files(self.source_root):
            ext = get_extension(path)
            if ext is None:
                continue
            convertible = ext in self.convert_extensions
            if not convertible and ext != self.target_extension:
                continue

            relative_source = relative_posix(path, self.source_root)
            relative_output = replace_extension(flatten(relative_source), self.target_extension).as_posix()

            files.append(
                SourceFile(
                    path=path,
                    relative_source=relative_source,
                    relative_output=relative_output,
                    content_hash=prefix_hash(path, limit=self.hash_prefix_bytes),
                    convertible=convertible,
                )
            )

        return files

    def resolve_collisions(self, files: list[SourceFile], result: ScanResult) -> list[SourceFile]:
        """
        Keep one source file per destination path and per fingerprint.

        For a shared destination path the first source in sorted order wins.
        For a shared fingerprint the smallest destination path wins. Every
        loser is reported and left out of the new state.

        Raises:
            HashCollisionError: On a shared fingerprint under the fail policy.
        """
        by_path: dict[str, SourceFile] = {}
        for source in sorted(files, key=lambda f: f.relative_source):
            winner = by_path.get(source.relative_output)
            if winner is not None:
                self._collision(
                    result,
                    SyncEvent(ActionType.PATH_COLLISION, source.relative_source, f"same destination as {winner.relative_source}"),
                )
                continue
            by_path[source.relative_output] = source

        by_hash: dict[str, SourceFile] = {}
        for source in sorted(by_path.values(), key=lambda f: (f.relative_output, f.relative_source)):
            winner = by_hash.get(source.content_hash)
            if winner is not None:
                if self.collision_policy == CollisionPolicy.FAIL:
                    raise HashCollisionError(
                        f"{source.relative_source} and {winner.relative_source} share a content hash",
                        [winner.relative_source, source.relative_source],
                    )
                self._collision(
                    result,
                    SyncEvent(ActionType.HASH_COLLISION, source.relative_source, f"same content as {winner.relative_source}"),
                )
                continue
            by_hash[source.content_hash] = source

        return list(by_hash.values())

    def diff(self, prior_state: dict[str, str]) -> ScanResult:
        """
        Diff the source tree against the prior state.

        Args:
            prior_state: Mapping of hash to relative path from the last run.

        Returns:
            ScanResult with the new state, expected files and queued jobs.
        """
        result = ScanResult()
        renames: list[tuple[str, str]] = []
        copies: list[SourceFile] = []

        for source in self.resolve_collisions(self.scan_sources(), result):
            relative_output = source.relative_output
            prior_path = prior_state.get(source.content_hash)
            prior_exists = prior_path is not None and (self.dest_root / prior_path).is_file()

            if prior_exists and prior_path == relative_output:
                result.unchanged.append(relative_output)
            elif prior_exists:
                renames.append((prior_path, relative_output))
            elif source.convertible:
                result.jobs.append(
                    ConversionJob(
                        source=source.path,
                        destination=self.dest_root / relative_output,
                        relative_path=relative_output,
                    )
                )
            else:
                copies.append(source)

            result.new_state[source.content_hash] = relative_output
            result.expected_files.add(relative_output)

        # Renames go first so copies and conversions never land on a file that is still moving away
        self._apply_renames(renames, result)
        for source in copies:
            if not self.dry_run:
                safe_copy(source.path, self.dest_root / source.relative_output)
            result.copied.append(source.relative_output)
            self.on_event(SyncEvent(ActionType.COPY, source.relative_output))

        return result

    def _apply_renames(self, renames: list[tuple[str, str]], result: ScanResult) -> None:
        """Move files in two phases so swapped or chained renames never overwrite each other."""
        staged: list[tuple[Path, str, str]] = []

        for index, (old, new) in enumerate(renames):
            staging = self.dest_root / f"{RENAME_STAGING_PREFIX}{index}"
            if not self.dry_run:
                move_file(self.dest_root / old, staging)
            staged.append((staging, old, new))

        for staging, old, new in staged:
            if not self.dry_run:
                move_file(staging, self.dest_root / new)
            result.renamed.append((old, new))
            self.on_event(SyncEvent(ActionType.RENAME, new, f"from {old}"))

    def _collision(self, result: ScanResult, event: SyncEvent) -> None:
        result.collisions.append(event)
        self.on_event(event)
