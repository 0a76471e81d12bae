# Musync Test Fixtures
# Pytest fixtures for musync tests

import shutil
import subprocess
import tempfile
import threading
from collections.abc import Generator
from pathlib import Path

import pytest

from musync.config.schema import MusyncConfig


class FakeTranscoder:
    """
    Stand-in for the transcoder executable.

    Writes ``CONVERTED:`` followed by the source bytes to the output path
    and records every command line. Tracks the highest number of
    simultaneous runs.
    """

    def __init__(self, fail_on: tuple[str, ...] = (), delay: float = 0.0):
        self.fail_on = fail_on
        self.delay = delay
        self.commands: list[list[str]] = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def __call__(self, cmd: list[str]) -> subprocess.CompletedProcess:
        with self._lock:
            self.commands.append(cmd)
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                threading.Event().wait(self.delay)
            source, dest = Path(cmd[3]), Path(cmd[-1])
            if any(source.name.endswith(name) for name in self.fail_on):
                dest.write_bytes(b"partial")
                return subprocess.CompletedProcess(cmd, 1, stdout="", stderr="Invalid data found\n")
            dest.write_bytes(b"CONVERTED:" + source.read_bytes())
            return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")
        finally:
            with self._lock:
                self.active -= 1

    @property
    def converted_sources(self) -> list[str]:
        return [cmd[3] for cmd in self.commands]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary home directory."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("MUSYNC_CONFIG", raising=False)
    return home


@pytest.fixture
def source_dir(temp_dir: Path) -> Path:
    """Create a small source library."""
    src = temp_dir / "src"
    write_file(src / "Artist" / "Album" / "01 Intro.flac", b"flac-intro")
    write_file(src / "Artist" / "Album" / "02 Song.ogg", b"ogg-song")
    write_file(src / "Artist" / "single.mp3", b"mp3-single")
    write_file(src / "loose.m4a", b"m4a-loose")
    write_file(src / "Artist" / "Album" / "cover.jpg", b"jpeg")
    write_file(src / "notes", b"no extension")
    return src


@pytest.fixture
def dest_dir(temp_dir: Path) -> Path:
    """Destination directory path (not created)."""
    return temp_dir / "dst"


@pytest.fixture
def fake_transcoder() -> FakeTranscoder:
    """Transcoder runner that copies its input."""
    return FakeTranscoder()


@pytest.fixture
def config() -> MusyncConfig:
    """Default configuration with a small job cap."""
    return MusyncConfig(jobs=2)


def write_file(path: Path, content: bytes) -> Path:
    """Write bytes to path, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


def move_file(src_root: Path, old: str, new: str) -> None:
    """Move a file inside a tree, creating parent directories."""
    target = src_root / new
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.move(src_root / old, target)


def tree_snapshot(root: Path) -> dict[str, bytes]:
    """Map every file under root to its content."""
    return {path.relative_to(root).as_posix(): path.read_bytes() for path in sorted(root.rglob("*")) if path.is_file()}
