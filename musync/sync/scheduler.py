# Musync Conversion Scheduler
# Bounded-concurrency transcoder dispatch

import subprocess
from collections.abc import Callable
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Optional

from musync.errors import ProcessSpawnError
from musync.sync.actions import ActionType, ConversionFailure, ConversionJob, EventSink, SyncEvent, discard_event
from musync.utils.paths import ensure_dir

Runner = Callable[[list[str]], subprocess.CompletedProcess]


def build_command(executable: str, job: ConversionJob, bitrate: int) -> list[str]:
    """
    Build the transcoder command line for a job.

    Args:
        executable: Transcoder executable.
        job: Conversion job.
        bitrate: Target bitrate in kbps.

    Returns:
        Argument list.
    """
    return [
        executable,
        "-y",
        "-i",
        str(job.source),
        "-ab",
        f"{bitrate}k",
        "-hide_banner",
        "-loglevel",
        "error",
        str(job.destination),
    ]


def run_transcoder(cmd: list[str]) -> subprocess.CompletedProcess:
    """
    Run one transcoder process to completion.

    Raises:
        ProcessSpawnError: If the executable cannot be launched.
    """
    try:
        return subprocess.run(
            cmd,
            check=False,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        )
    except OSError as e:
        raise ProcessSpawnError(f"Cannot start {cmd[0]}: {e.strerror or e}", cmd[0]) from e


class ConversionScheduler:
    """
    Runs conversion jobs with at most ``jobs`` transcoders at a time.

    A sliding window: a new job starts as soon as any running one finishes.
    ``run`` returns only after every started job has finished.
    """

    def __init__(
        self,
        *,
        jobs: int = 16,
        bitrate: int = 256,
        executable: str = "ffmpeg",
        runner: Optional[Runner] = None,
        on_event: Optional[EventSink] = None,
    ):
        """
        Initialize scheduler.

        Args:
            jobs: Concurrency cap.
            bitrate: Target bitrate in kbps.
            executable: Transcoder executable.
            runner: Callable that runs one command line. Defaults to run_transcoder.
            on_event: Event sink for convert events.
        """
        if jobs < 1:
            raise ValueError("jobs must be at least 1")
        self.jobs = jobs
        self.bitrate = bitrate
        self.executable = executable
        self.runner = runner or run_transcoder
        self.on_event = on_event or discard_event

    def run(self, jobs: list[ConversionJob]) -> list[ConversionFailure]:
        """
        Convert all jobs.

        Args:
            jobs: Jobs to run.

        Returns:
            Failures for jobs whose transcoder exited non-zero.

        Raises:
            ProcessSpawnError: If a transcoder cannot be launched. Jobs not yet
                started are cancelled; running ones are left to finish.
        """
        failures: list[ConversionFailure] = []
        if not jobs:
            return failures

        pending = iter(jobs)
        running: dict[Future, ConversionJob] = {}

        with ThreadPoolExecutor(max_workers=self.jobs, thread_name_prefix="musync-convert") as executor:
            try:
                self._fill(executor, pending, running)
                while running:
                    done, _ = wait(running, return_when=FIRST_COMPLETED)
                    for future in done:
                        job = running.pop(future)
                        completed = future.result()
                        if completed.returncode != 0:
                            failures.append(
                                ConversionFailure(job=job, returncode=completed.returncode, stderr=(completed.stderr or "").strip())
                            )
                    self._fill(executor, pending, running)
            except BaseException:
                executor.shutdown(wait=False, cancel_futures=True)
                raise

        return failures

    def _fill(self, executor: ThreadPoolExecutor, pending, running: dict[Future, ConversionJob]) -> None:
        """Start jobs until the window is full or none are left."""
        while len(running) < self.jobs:
            job = next(pending, None)
            if job is None:
                return
            ensure_dir(job.destination.parent)
            self.on_event(SyncEvent(ActionType.CONVERT, job.relative_path or str(job.destination)))
            running[executor.submit(self.runner, build_command(self.executable, job, self.bitrate))] = job
