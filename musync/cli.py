"""Click-based CLI for musync - incremental audio library transcoding sync."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click
import yaml

from musync import __version__
from musync.config import (
    MusyncConfig,
    ensure_config_exists,
    get_config_path,
    load_config,
    validate_config_file,
)
from musync.errors import MusyncError
from musync.output.console import Console
from musync.sync.engine import SyncEngine
from musync.utils.paths import expand_path

console = Console()


def _load_effective_config(
    config_path: Optional[Path],
    *,
    jobs: Optional[int] = None,
    bitrate: Optional[int] = None,
    verbose: bool = False,
) -> MusyncConfig:
    """Load config from file and apply command line overrides."""
    config = load_config(config_path)
    overrides: dict = {}
    if jobs is not None:
        overrides["jobs"] = jobs
    if bitrate is not None:
        overrides["bitrate"] = bitrate
    if overrides:
        config = MusyncConfig.model_validate({**config.model_dump(), **overrides})
    if verbose:
        config.output.verbose = True
    return config


def _configure_console(config: MusyncConfig) -> None:
    console.configure(verbose=config.output.verbose, colored=config.output.colored)


@click.group()
@click.version_option(version=__version__, prog_name="musync")
def cli() -> None:
    """musync - one-way incremental sync of an audio library.

    Mirrors a source tree into a destination tree of transcoded files.
    Content fingerprints let unchanged and moved files be skipped or renamed
    instead of converted again.

    \b
    Examples:
      musync sync -s ~/Music -d /media/player/Music
      musync sync -s ~/Music -d /media/player/Music -j 8 -b 192
      musync status -s ~/Music -d /media/player/Music
    """
    pass


@cli.command()
@click.option(
    "--src",
    "-s",
    required=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Directory to sync from",
)
@click.option("--dst", "-d", required=True, type=click.Path(file_okay=False, path_type=Path), help="Directory to sync to")
@click.option("--jobs", "-j", type=click.IntRange(min=1), default=None, help="Number of conversions to run in parallel")
@click.option("--bitrate", "-b", type=click.IntRange(min=8, max=512), default=None, help="Target bitrate in kbps")
@click.option("--dry-run", "-n", is_flag=True, help="Preview changes without applying")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=None, help="Path to config file")
def sync(
    src: Path,
    dst: Path,
    jobs: Optional[int],
    bitrate: Optional[int],
    dry_run: bool,
    verbose: bool,
    config_path: Optional[Path],
) -> None:
    """Synchronize SRC into DST, transcoding where needed.

    Copies target-format files, converts the others, moves renamed files
    and removes destination files whose source is gone. The state file in
    DST is only written after everything succeeded.
    """
    try:
        config = _load_effective_config(config_path, jobs=jobs, bitrate=bitrate, verbose=verbose)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        console.print_error(str(e))
        sys.exit(1)

    _configure_console(config)
    src, dst = expand_path(src), expand_path(dst)
    console.print_info(f"{src} -> {dst} ({config.jobs} jobs, {config.bitrate}k)")

    engine = SyncEngine(config, src, dst, on_event=console.print_event)

    try:
        result = engine.sync(dry_run=dry_run)
    except MusyncError as e:
        console.print_error(e.message)
        sys.exit(1)

    console.print_sync_result(result)
    if result.failures:
        console.print_warning(f"{len(result.failures)} conversion(s) failed and will be retried on the next run")
    if not dry_run:
        console.print_duration(result.duration)


@cli.command()
@click.option(
    "--src",
    "-s",
    required=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Directory to sync from",
)
@click.option("--dst", "-d", required=True, type=click.Path(file_okay=False, path_type=Path), help="Directory to sync to")
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=None, help="Path to config file")
def status(src: Path, dst: Path, config_path: Optional[Path]) -> None:
    """Show what a sync would do, without making changes."""
    try:
        config = _load_effective_config(config_path)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        console.print_error(str(e))
        sys.exit(1)

    _configure_console(config)

    try:
        result = SyncEngine(config, expand_path(src), expand_path(dst)).plan()
    except MusyncError as e:
        console.print_error(e.message)
        sys.exit(1)

    console.print_plan(result)
    console.print_sync_result(result)


@cli.group()
def config() -> None:
    """Manage the musync configuration file.

    \b
    Location: ~/.config/musync/config.yaml (override with MUSYNC_CONFIG)
    """
    pass


@config.command("init")
def config_init() -> None:
    """Create the default configuration file if it doesn't exist."""
    path, created = ensure_config_exists()
    if created:
        console.print_success(f"Created {path}")
    else:
        console.print_info(f"Config already exists: {path}")


@config.command("show")
def config_show() -> None:
    """Print the effective configuration."""
    try:
        config = load_config()
    except (ValueError, yaml.YAMLError) as e:
        console.print_error(str(e))
        sys.exit(1)

    console.print_info(f"Config: {get_config_path()}")
    console.print(
        yaml.dump(config.model_dump(mode="json"), default_flow_style=False, sort_keys=False),
        markup=False,
    )


@config.command("validate")
@click.argument("file", type=click.Path(path_type=Path), required=False)
def config_validate(file: Optional[Path]) -> None:
    """Validate a configuration file (default: the active one)."""
    valid, errors = validate_config_file(file)
    if valid:
        console.print_success("Configuration is valid")
        return

    for error in errors:
        console.print_error(error)
    sys.exit(1)


if __name__ == "__main__":
    cli()
