"""Unit tests for the install command."""

import shutil
from pathlib import Path
from unittest.mock import patch

import pytest
from polarway.backup.registry import LatestBackup
from polarway.cli.main import app
from polarway.core.errors import BlockEditFailedError
from polarway.core.paths import get_settings_path, make_layout
from polarway.core.settings import Settings, save_settings
from polarway.core.state import StateManager
from polarway.models.history import RunKind
from typer.testing import CliRunner

runner = CliRunner()


@pytest.mark.usefixtures("all_tools")
class TestInstallCommand:
    """Tests for polarway install."""

    def test_install_links_home(self, repo: Path, cli_home: Path) -> None:
        """install links the repository into HOME."""
        result = runner.invoke(app, ["--repo", str(repo), "install"])

        assert result.exit_code == 0, result.output
        assert (cli_home / ".config" / "hypr").is_symlink()
        assert (cli_home / ".local" / "bin" / "polarway-power-menu").is_symlink()
        assert "Done." in result.output
        assert "hyprctl reload" in result.output

    def test_install_records_history(self, repo: Path, cli_home: Path) -> None:
        """A finished run is appended to the history."""
        runner.invoke(app, ["--repo", str(repo), "install"])

        history = StateManager().get_history()
        assert len(history) == 1
        assert history[0].kind is RunKind.INSTALL
        assert history[0].repo == str(repo.resolve())

    def test_install_reports_backups(self, repo: Path, cli_home: Path) -> None:
        """Displaced entries are backed up and the registry is announced."""
        (cli_home / ".config" / "hypr").mkdir(parents=True)

        result = runner.invoke(app, ["--repo", str(repo), "install"])

        assert result.exit_code == 0, result.output
        assert "Backups:" in result.output
        assert LatestBackup(make_layout(repo).marker_path).read() is not None

    def test_second_install_has_nothing_to_do(self, repo: Path, cli_home: Path) -> None:
        """Re-running install reports no changes."""
        runner.invoke(app, ["--repo", str(repo), "install"])

        result = runner.invoke(app, ["--repo", str(repo), "install"])

        assert result.exit_code == 0
        assert "Nothing to do" in result.output

    def test_repo_from_settings(self, repo: Path, cli_home: Path) -> None:
        """Without --repo the repository comes from the settings file."""
        save_settings(Settings(repo_dir=repo, fetch_wallpaper=False))

        result = runner.invoke(app, ["install"])

        assert result.exit_code == 0, result.output
        assert (cli_home / ".config" / "hypr").is_symlink()

    def test_missing_repo(self, tmp_path: Path, cli_home: Path) -> None:
        """A repository path that does not exist exits 1."""
        result = runner.invoke(app, ["--repo", str(tmp_path / "nope"), "install"])

        assert result.exit_code == 1
        assert "Repository not found" in result.output

    def test_broken_checkout(self, repo: Path, cli_home: Path) -> None:
        """A missing required source exits 1 without touching HOME."""
        shutil.rmtree(repo / "configs" / "hypr")

        result = runner.invoke(app, ["--repo", str(repo), "install"])

        assert result.exit_code == 1
        assert "Required source missing" in result.output
        assert not (cli_home / ".config").exists()

    def test_engine_error_exits_1(self, repo: Path, cli_home: Path) -> None:
        """Any fatal engine error is printed and exits 1."""
        with patch(
            "polarway.cli.commands.install.Installer.run",
            side_effect=BlockEditFailedError(repo / "x.conf", "read-only"),
        ):
            result = runner.invoke(app, ["--repo", str(repo), "install"])

        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_invalid_settings(self, repo: Path, cli_home: Path) -> None:
        """A broken settings file exits 1 before anything happens."""
        get_settings_path().write_text("backup_dir = [")

        result = runner.invoke(app, ["--repo", str(repo), "install"])

        assert result.exit_code == 1
        assert not (cli_home / ".config").exists()

    def test_history_failure_is_a_warning(self, repo: Path, cli_home: Path) -> None:
        """Failing to record history does not fail the install."""
        with patch(
            "polarway.cli.types.record_report",
            side_effect=RuntimeError("Cannot create state directory"),
        ):
            result = runner.invoke(app, ["--repo", str(repo), "install"])

        assert result.exit_code == 0
        assert "Could not record run history" in result.output
