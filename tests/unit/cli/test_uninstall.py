"""Unit tests for the uninstall command."""

from pathlib import Path

import pytest
from polarway.cli.main import app
from polarway.core.state import StateManager
from polarway.models.history import RunKind
from typer.testing import CliRunner

runner = CliRunner()


@pytest.mark.usefixtures("all_tools")
class TestUninstallCommand:
    """Tests for polarway uninstall."""

    def test_restores_after_install(self, repo: Path, cli_home: Path) -> None:
        """uninstall reverses install and restores the displaced directory."""
        hypr = cli_home / ".config" / "hypr"
        hypr.mkdir(parents=True)
        (hypr / "foo.conf").write_text("mine\n")
        runner.invoke(app, ["--repo", str(repo), "install"])

        result = runner.invoke(app, ["--repo", str(repo), "uninstall"])

        assert result.exit_code == 0, result.output
        assert "Restoring from:" in result.output
        assert not hypr.is_symlink()
        assert (hypr / "foo.conf").read_text() == "mine\n"
        assert "backups are kept" in result.output

    def test_without_backup(self, repo: Path, cli_home: Path) -> None:
        """Without any install, uninstall says nothing will be restored."""
        result = runner.invoke(app, ["--repo", str(repo), "uninstall"])

        assert result.exit_code == 0
        assert "No backup registry found" in result.output
        assert "Nothing to do" in result.output

    def test_records_history(self, repo: Path, cli_home: Path) -> None:
        """Uninstall runs are recorded as well."""
        runner.invoke(app, ["--repo", str(repo), "install"])
        runner.invoke(app, ["--repo", str(repo), "uninstall"])

        kinds = [entry.kind for entry in StateManager().get_history()]
        assert kinds == [RunKind.UNINSTALL, RunKind.INSTALL]

    def test_unterminated_block_exits_1(self, repo: Path, cli_home: Path) -> None:
        """A damaged block aborts uninstall and leaves links in place."""
        runner.invoke(app, ["--repo", str(repo), "install"])
        conf = repo / "configs" / "hypr" / "hyprland.conf"
        conf.write_text("# --- POLARWAY BEGIN: wallpaper ---\nleft open\n")

        result = runner.invoke(app, ["--repo", str(repo), "uninstall"])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert (cli_home / ".config" / "hypr").is_symlink()
