"""Tests for the CLI dispatcher and commands."""

import json
import subprocess
from unittest.mock import patch

import pytest

from rsync_backup import __version__
from rsync_backup.cli.dispatcher import create_subcommand_parser, main


def _completed(returncode):
    return subprocess.CompletedProcess(args=[], returncode=returncode)


class TestParser:
    """Tests for create_subcommand_parser."""

    def test_run_dry_run(self):
        """Test parsing the run command."""
        args = create_subcommand_parser().parse_args(["-c", "x.toml", "run", "--dry-run"])
        assert args.command == "run"
        assert args.dry_run is True
        assert args.config == "x.toml"

    def test_plan_json(self):
        """Test parsing the plan command."""
        args = create_subcommand_parser().parse_args(["plan", "--json"])
        assert args.command == "plan"
        assert args.json is True

    def test_config_import(self):
        """Test parsing config import."""
        args = create_subcommand_parser().parse_args(
            ["config", "import", "old.txt", "-o", "new.toml"]
        )
        assert args.config_action == "import"
        assert args.legacy_config == "old.txt"
        assert args.output == "new.toml"

    def test_unknown_command(self):
        """Test that argparse rejects unknown commands."""
        with pytest.raises(SystemExit):
            create_subcommand_parser().parse_args(["snapshot"])

    def test_global_verbosity_flags(self):
        """Test that the shared output options are accepted before a command."""
        args = create_subcommand_parser().parse_args(["-q", "--debug", "plan"])
        assert args.quiet is True
        assert args.debug is True
        assert args.verbose is False


class TestMain:
    """Tests for main."""

    def test_version(self, capsys):
        """Test --version output."""
        assert main(["--version"]) == 0
        assert __version__ in capsys.readouterr().out

    def test_no_command(self, capsys):
        """Test that a missing command is an error."""
        assert main([]) == 1
        assert "No command specified" in capsys.readouterr().out


class TestPlanCommand:
    """Tests for the plan command."""

    def test_plan_json(self, config_file, backup_dirs, capsys):
        """Test JSON output of the planned items."""
        assert main(["-c", str(config_file), "plan", "--json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert set(data["items"]) == {
            str(backup_dirs["docs"]),
            str(backup_dirs["projects"] / "app"),
        }
        assert data["total_bytes"] == 30
        assert data["total_human"] == "30 B"

    def test_plan_table(self, config_file):
        """Test the human readable report."""
        assert main(["-q", "-c", str(config_file), "plan"]) == 0

    def test_plan_bad_config(self, tmp_path):
        """Test that a missing config file fails."""
        assert main(["-c", str(tmp_path / "nope.toml"), "plan"]) == 1


class TestRunCommand:
    """Tests for the run command."""

    @patch("rsync_backup.__util__.subprocess.run")
    def test_dry_run(self, mock_run, config_file, backup_dirs):
        """Test that a dry run transfers nothing and leaves dest untouched."""
        assert main(["-c", str(config_file), "run", "--dry-run"]) == 0

        mock_run.assert_not_called()
        assert list(backup_dirs["dest"].iterdir()) == []

    @patch("rsync_backup.__util__.subprocess.run")
    def test_run_sends_each_item(self, mock_run, config_file, backup_dirs):
        """Test one rsync invocation per item with the configured flags."""
        mock_run.return_value = _completed(0)

        assert main(["-c", str(config_file), "run"]) == 0

        assert mock_run.call_count == 2
        commands = [c.args[0] for c in mock_run.call_args_list]
        assert all(cmd[:3] == ["rsync", "-a", "--delete"] for cmd in commands)
        assert [cmd[-2] for cmd in commands] == [
            str(backup_dirs["docs"]),
            str(backup_dirs["projects"] / "app"),
        ]
        destinations = {cmd[-1] for cmd in commands}
        assert len(destinations) == 1
        assert destinations.pop().startswith(str(backup_dirs["dest"]) + "/")

    @patch("rsync_backup.__util__.subprocess.run")
    def test_run_failure(self, mock_run, config_file):
        """Test that a failing rsync makes the run fail."""
        mock_run.return_value = _completed(23)

        assert main(["-c", str(config_file), "run"]) == 1
        assert mock_run.call_count == 1

    def test_run_without_roots(self, tmp_config_dir, backup_dirs):
        """Test that a config without roots is rejected."""
        path = tmp_config_dir / "empty_roots.toml"
        path.write_text(f'[global]\ndest = "{backup_dirs["dest"]}"\n')

        assert main(["-c", str(path), "run"]) == 1


class TestConfigCommand:
    """Tests for the config command."""

    def test_validate(self, config_file, capsys):
        """Test validating a good config."""
        assert main(["-c", str(config_file), "config", "validate"]) == 0
        assert "Configuration is valid" in capsys.readouterr().out

    def test_validate_invalid(self, tmp_config_dir, capsys):
        """Test validating a broken config."""
        path = tmp_config_dir / "bad.toml"
        path.write_text("not [ toml")

        assert main(["-c", str(path), "config", "validate"]) == 1
        assert "Configuration error" in capsys.readouterr().out

    def test_init_to_file(self, tmp_path):
        """Test writing the example config."""
        output = tmp_path / "example.toml"
        assert main(["config", "init", "-o", str(output)]) == 0
        assert "[sources]" in output.read_text()

    def test_import(self, tmp_path, capsys):
        """Test converting a legacy config to stdout."""
        legacy = tmp_path / "config.txt"
        legacy.write_text("dest:\n/mnt/backup\ndirs:\n/home/user\n")

        assert main(["config", "import", str(legacy)]) == 0

        out = capsys.readouterr().out
        assert 'dest = "/mnt/backup"' in out
        assert '"/home/user",' in out

    def test_import_missing_file(self, tmp_path):
        """Test importing a file that does not exist."""
        assert main(["config", "import", str(tmp_path / "nope.txt")]) == 1

    def test_no_action(self):
        """Test that config needs a subcommand."""
        assert main(["config"]) == 1
