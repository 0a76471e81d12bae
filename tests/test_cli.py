# Tests for musync.cli
# CLI commands using Click testing

from unittest.mock import MagicMock, patch

import yaml
from click.testing import CliRunner

from conftest import FakeTranscoder, tree_snapshot
from musync.cli import cli
from musync.errors import DataCorruptionError
from musync.sync.engine import SyncResult


class TestCliGroup:
    """Tests for main CLI group."""

    def test_help(self):
        """Test main help output."""
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "musync" in result.output
        assert "Examples" in result.output

    def test_version(self):
        """Test version output."""
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "musync" in result.output
        assert "1.0.0" in result.output


class TestSyncCommand:
    """Tests for sync command."""

    def test_help(self):
        """Test sync help output."""
        runner = CliRunner()
        result = runner.invoke(cli, ["sync", "--help"])
        assert result.exit_code == 0
        assert "Synchronize SRC into DST" in result.output
        assert "--jobs" in result.output
        assert "--dry-run" in result.output

    def test_src_required(self):
        """Test that the source option is required."""
        runner = CliRunner()
        result = runner.invoke(cli, ["sync", "-d", "/tmp/out"])
        assert result.exit_code == 2

    def test_missing_src_rejected(self, temp_dir):
        """Test rejecting a missing source directory."""
        runner = CliRunner()
        result = runner.invoke(cli, ["sync", "-s", str(temp_dir / "nope"), "-d", str(temp_dir / "out")])
        assert result.exit_code == 2

    def test_invalid_jobs_rejected(self, source_dir, dest_dir):
        """Test rejecting a zero job cap."""
        runner = CliRunner()
        result = runner.invoke(cli, ["sync", "-s", str(source_dir), "-d", str(dest_dir), "-j", "0"])
        assert result.exit_code == 2

    def test_full_run(self, temp_home, source_dir, dest_dir):
        """Test a complete sync run."""
        fake = FakeTranscoder()
        runner = CliRunner()
        with patch("musync.sync.scheduler.run_transcoder", fake):
            result = runner.invoke(cli, ["sync", "-s", str(source_dir), "-d", str(dest_dir), "-j", "2"])

        assert result.exit_code == 0, result.output
        assert "Sync completed" in result.output
        assert "Finished in" in result.output
        assert "CONVERT" in result.output
        assert len(fake.commands) == 3
        assert "loose.mp3" in tree_snapshot(dest_dir)

    def test_bitrate_override(self, temp_home, source_dir, dest_dir):
        """Test overriding the bitrate."""
        fake = FakeTranscoder()
        runner = CliRunner()
        with patch("musync.sync.scheduler.run_transcoder", fake):
            result = runner.invoke(cli, ["sync", "-s", str(source_dir), "-d", str(dest_dir), "-b", "128"])

        assert result.exit_code == 0, result.output
        assert all("128k" in cmd for cmd in fake.commands)

    def test_dry_run(self, temp_home, source_dir, dest_dir):
        """Test sync with dry-run."""
        fake = FakeTranscoder()
        runner = CliRunner()
        with patch("musync.sync.scheduler.run_transcoder", fake):
            result = runner.invoke(cli, ["sync", "-s", str(source_dir), "-d", str(dest_dir), "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "Dry run completed" in result.output
        assert "Finished in" not in result.output
        assert fake.commands == []
        assert not dest_dir.exists()

    def test_conversion_failure_still_exits_zero(self, temp_home, source_dir, dest_dir):
        """Test exit status when a conversion is skipped."""
        fake = FakeTranscoder(fail_on=("02 Song.ogg",))
        runner = CliRunner()
        with patch("musync.sync.scheduler.run_transcoder", fake):
            result = runner.invoke(cli, ["sync", "-s", str(source_dir), "-d", str(dest_dir)])

        assert result.exit_code == 0, result.output
        assert "with errors" in result.output
        assert "Invalid data found" in result.output
        assert "Warning: 1 conversion(s) failed" in result.output

    def test_missing_explicit_config(self, temp_dir, source_dir, dest_dir):
        """Test a missing config file."""
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["sync", "-s", str(source_dir), "-d", str(dest_dir), "--config", str(temp_dir / "missing.yaml")],
        )
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_non_mapping_config(self, temp_dir, source_dir, dest_dir):
        """Test a config file that is not a mapping."""
        path = temp_dir / "list.yaml"
        path.write_text("- jobs\n- 4\n", encoding="utf-8")

        runner = CliRunner()
        result = runner.invoke(cli, ["sync", "-s", str(source_dir), "-d", str(dest_dir), "--config", str(path)])

        assert result.exit_code == 1
        assert "must be a mapping" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)

    @patch("musync.cli.SyncEngine")
    def test_engine_error(self, mock_engine_cls, temp_home, source_dir, dest_dir):
        """Test exit status on an engine error."""
        mock_engine = MagicMock()
        mock_engine.sync.side_effect = DataCorruptionError("State file is corrupt")
        mock_engine_cls.return_value = mock_engine

        runner = CliRunner()
        result = runner.invoke(cli, ["sync", "-s", str(source_dir), "-d", str(dest_dir)])

        assert result.exit_code == 1
        assert "State file is corrupt" in result.output


class TestStatusCommand:
    """Tests for status command."""

    def test_help(self):
        """Test status help output."""
        runner = CliRunner()
        result = runner.invoke(cli, ["status", "--help"])
        assert result.exit_code == 0
        assert "without making changes" in result.output

    def test_shows_plan(self, temp_home, source_dir, dest_dir):
        """Test the planned changes table."""
        runner = CliRunner()
        result = runner.invoke(cli, ["status", "-s", str(source_dir), "-d", str(dest_dir)])

        assert result.exit_code == 0, result.output
        assert "Planned Changes" in result.output
        assert "loose.mp3" in result.output
        assert not dest_dir.exists()

    @patch("musync.cli.SyncEngine")
    def test_in_sync(self, mock_engine_cls, temp_home, source_dir, dest_dir):
        """Test status with nothing to do."""
        mock_engine = MagicMock()
        mock_engine.plan.return_value = SyncResult(dry_run=True, unchanged=4)
        mock_engine_cls.return_value = mock_engine

        runner = CliRunner()
        result = runner.invoke(cli, ["status", "-s", str(source_dir), "-d", str(dest_dir)])

        assert result.exit_code == 0
        assert "Everything is in sync" in result.output


class TestConfigCommands:
    """Tests for config subcommands."""

    def test_config_help(self):
        """Test config help output."""
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "--help"])
        assert result.exit_code == 0
        assert "init" in result.output
        assert "show" in result.output
        assert "validate" in result.output

    def test_init_creates_file(self, temp_home):
        """Test creating the config file once."""
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "init"])
        assert result.exit_code == 0
        assert "Created" in result.output
        assert (temp_home / ".config" / "musync" / "config.yaml").exists()

        result = runner.invoke(cli, ["config", "init"])
        assert result.exit_code == 0
        assert "already exists" in result.output

    def test_show_defaults(self, temp_home):
        """Test showing the default config."""
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "show"])
        assert result.exit_code == 0
        assert "jobs: 16" in result.output
        assert "on_conversion_error: skip" in result.output

    def test_validate_valid(self, temp_home):
        """Test validating the generated config."""
        runner = CliRunner()
        runner.invoke(cli, ["config", "init"])
        result = runner.invoke(cli, ["config", "validate"])
        assert result.exit_code == 0
        assert "Configuration is valid" in result.output

    def test_validate_invalid(self, temp_dir):
        """Test validating an invalid config."""
        path = temp_dir / "bad.yaml"
        path.write_text(yaml.dump({"bitrate": 4}), encoding="utf-8")

        runner = CliRunner()
        result = runner.invoke(cli, ["config", "validate", str(path)])
        assert result.exit_code == 1
        assert "bitrate" in result.output
