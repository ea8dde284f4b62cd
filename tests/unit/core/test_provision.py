"""Unit tests for the install and uninstall orchestration."""

import shutil
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
from polarway.backup.registry import LatestBackup
from polarway.blocks.editor import begin_line, render_block
from polarway.core.errors import (
    ConfigurationMissingError,
    DisplacedMoveFailedError,
    ExternalToolMissingError,
)
from polarway.core.paths import Layout
from polarway.core.provision import Installer, RunReport, Uninstaller
from polarway.core.settings import Settings
from polarway.core.targets import LEGACY_LINE_TAG, managed_paths, wiring_block_names
from polarway.models.history import RunKind
from polarway.models.result import ItemResult, Outcome
from polarway.utils.fs import move_entry

NO_WALLPAPER = Settings(fetch_wallpaper=False)


def install(layout: Layout, settings: Settings = NO_WALLPAPER) -> RunReport:
    return Installer(layout, settings).run()


def uninstall(layout: Layout) -> RunReport:
    return Uninstaller(layout, LatestBackup(layout.marker_path)).run()


def outcomes(report: RunReport, outcome: Outcome) -> list[str]:
    return [r.path for r in report.results if r.outcome is outcome]


@pytest.fixture
def user_hypr(layout: Layout) -> Path:
    """Pre-existing ~/.config/hypr directory owned by the user."""
    path = layout.home / ".config" / "hypr"
    path.mkdir(parents=True)
    (path / "foo.conf").write_text("user setting\n")
    return path


class TestRunReport:
    """Tests for RunReport."""

    def test_count(self) -> None:
        """count tallies one outcome."""
        report = RunReport(
            kind=RunKind.INSTALL,
            results=(
                ItemResult(path="/a", outcome=Outcome.LINKED),
                ItemResult(path="/b", outcome=Outcome.LINKED),
                ItemResult(path="/c", outcome=Outcome.ALREADY_LINKED),
            ),
        )

        assert report.count(Outcome.LINKED) == 2
        assert report.count(Outcome.RESTORED) == 0


@pytest.mark.usefixtures("all_tools")
class TestInstaller:
    """Tests for Installer.run."""

    def test_fresh_home(self, layout: Layout) -> None:
        """Every managed path is linked and every block wired."""
        report = install(layout)

        assert report.kind is RunKind.INSTALL
        assert len(outcomes(report, Outcome.LINKED)) == len(managed_paths(layout))
        assert len(outcomes(report, Outcome.BLOCK_WRITTEN)) == len(wiring_block_names())
        for managed in managed_paths(layout):
            assert managed.destination.resolve() == managed.source

    def test_fresh_home_publishes_no_registry(self, layout: Layout) -> None:
        """With nothing displaced, no registry survives and no marker is written."""
        report = install(layout)

        assert report.backup_dir is None
        assert not layout.marker_path.exists()
        assert list(layout.backup_root.iterdir()) == []

    def test_displaced_directory_backed_up(self, layout: Layout, user_hypr: Path) -> None:
        """An existing directory is moved into a published registry."""
        report = install(layout)

        assert report.backup_dir is not None
        assert LatestBackup(layout.marker_path).read() == report.backup_dir
        assert (report.backup_dir / "HOME__.config__hypr" / "foo.conf").exists()
        assert user_hypr.is_symlink()

    def test_blocks_written_into_repo_config(self, layout: Layout) -> None:
        """Blocks land in the repository copy of the compositor config."""
        install(layout)

        text = layout.wiring_file.read_text()
        for name in wiring_block_names():
            assert text.count(begin_line(name)) == 1
        assert text.startswith("monitor = ,preferred,auto,1\n")

    def test_second_run_is_noop(self, layout: Layout, user_hypr: Path) -> None:
        """Re-running changes nothing and creates no new backup."""
        first = install(layout)
        wiring = layout.wiring_file.read_bytes()

        second = install(layout)

        assert second.backup_dir is None
        assert not any(r.outcome.changed for r in second.results)
        assert len(outcomes(second, Outcome.ALREADY_LINKED)) == len(managed_paths(layout))
        assert LatestBackup(layout.marker_path).read() == first.backup_dir
        assert list(layout.backup_root.iterdir()) == [first.backup_dir]
        assert layout.wiring_file.read_bytes() == wiring

    def test_missing_required_source_modifies_nothing(
        self, layout: Layout, user_hypr: Path
    ) -> None:
        """A broken checkout aborts before any entry is touched."""
        (layout.scripts_dir / "polarway-power-menu").unlink()

        with pytest.raises(ConfigurationMissingError):
            install(layout)

        assert user_hypr.is_dir()
        assert not user_hypr.is_symlink()
        assert not layout.backup_root.exists()

    def test_missing_optional_source_skipped(self, layout: Layout) -> None:
        """An absent optional config is reported and left alone."""
        shutil.rmtree(layout.configs_dir / "rofi")

        report = install(layout)

        assert outcomes(report, Outcome.SKIPPED_OPTIONAL) == [
            str(layout.home / ".config" / "rofi")
        ]
        assert not (layout.home / ".config" / "rofi").exists()

    def test_scripts_made_executable(self, layout: Layout) -> None:
        """Helper scripts are executable after install."""
        install(layout)

        assert (layout.scripts_dir / "polarway-wallpaper-random").stat().st_mode & 0o111

    def test_required_tool_missing(self, layout: Layout) -> None:
        """A missing required tool aborts before anything is touched."""
        with (
            patch("polarway.core.provision.missing_commands", return_value=["hyprctl"]),
            pytest.raises(ExternalToolMissingError, match="hyprctl"),
        ):
            install(layout, Settings(fetch_wallpaper=False, required_tools=["hyprctl"]))

        assert not (layout.home / ".config").exists()

    def test_failed_backup_publishes_partial_registry(self, layout: Layout, user_hypr: Path) -> None:
        """Entries displaced before a failure stay restorable."""
        waybar = layout.home / ".config" / "waybar"
        waybar.mkdir()

        def flaky_move(source: Path, target: Path) -> None:
            if source == waybar:
                raise OSError("disk full")
            move_entry(source, target)

        with (
            patch("polarway.backup.registry.move_entry", side_effect=flaky_move),
            pytest.raises(DisplacedMoveFailedError),
        ):
            install(layout)

        registry = LatestBackup(layout.marker_path).read()
        assert registry is not None
        assert (registry / "HOME__.config__hypr" / "foo.conf").exists()
        assert waybar.is_dir()
        assert not waybar.is_symlink()


class TestInstallerWiring:
    """Tests for block wiring with missing optional tools."""

    @pytest.fixture
    def no_wlogout(self) -> Iterator[None]:
        with patch(
            "polarway.core.provision.missing_commands",
            side_effect=lambda names: [n for n in names if n == "wlogout"],
        ):
            yield

    @pytest.mark.usefixtures("no_wlogout")
    def test_block_skipped_with_warning(self, layout: Layout) -> None:
        """A block whose tool is missing is skipped and reported."""
        report = install(layout)

        skipped = [r.detail for r in report.results if r.outcome is Outcome.BLOCK_SKIPPED]
        assert skipped == ["wlogout"]
        assert any("wlogout" in w for w in report.warnings)
        assert begin_line("wlogout") not in layout.wiring_file.read_text()

    @pytest.mark.usefixtures("no_wlogout")
    def test_stale_block_removed(self, layout: Layout) -> None:
        """A block wired earlier is removed once its tool disappears."""
        with layout.wiring_file.open("a") as f:
            f.write("".join(render_block("wlogout", "old")))

        install(layout)

        assert begin_line("wlogout") not in layout.wiring_file.read_text()


@pytest.mark.usefixtures("all_tools")
class TestInstallerWallpaper:
    """Tests for the wallpaper step."""

    def test_failure_is_a_warning(self, layout: Layout, tmp_path: Path) -> None:
        """A failed download does not fail the run."""
        with patch(
            "polarway.core.provision.ensure_wallpaper",
            return_value="wallpaper download failed: 404",
        ) as mock_fetch:
            report = Installer(layout, Settings(), wallpaper_store=tmp_path / "w.jpg").run()

        assert report.warnings == ("wallpaper download failed: 404",)
        mock_fetch.assert_called_once()
        assert mock_fetch.call_args.args[1] == layout.local_wallpaper
        assert mock_fetch.call_args.args[2] == tmp_path / "w.jpg"

    def test_disabled(self, layout: Layout) -> None:
        """fetch_wallpaper = false skips the step entirely."""
        with patch("polarway.core.provision.ensure_wallpaper") as mock_fetch:
            install(layout)

        mock_fetch.assert_not_called()


@pytest.mark.usefixtures("all_tools")
class TestUninstaller:
    """Tests for Uninstaller.run."""

    def test_restores_displaced_directory(self, layout: Layout, user_hypr: Path) -> None:
        """The displaced directory comes back with its content."""
        install(layout)

        report = uninstall(layout)

        assert report.kind is RunKind.UNINSTALL
        assert user_hypr.is_dir()
        assert not user_hypr.is_symlink()
        assert (user_hypr / "foo.conf").read_text() == "user setting\n"
        assert outcomes(report, Outcome.RESTORED) == [str(user_hypr)]

    def test_removes_links_and_blocks(self, layout: Layout) -> None:
        """Links into the repo and all blocks are removed."""
        install(layout)

        report = uninstall(layout)

        for managed in managed_paths(layout):
            assert not managed.destination.is_symlink()
        assert len(outcomes(report, Outcome.REMOVED)) == len(managed_paths(layout))
        text = layout.wiring_file.read_text()
        assert "POLARWAY BEGIN" not in text
        assert text.startswith("monitor = ,preferred,auto,1\n")

    def test_removes_legacy_lines(self, layout: Layout) -> None:
        """Lines from the pre-block wiring generation are cleaned up."""
        with layout.wiring_file.open("a") as f:
            f.write(f"exec-once = old-wallpaper {LEGACY_LINE_TAG}\n")

        report = uninstall(layout)

        assert LEGACY_LINE_TAG not in layout.wiring_file.read_text()
        assert any(r.outcome is Outcome.LINES_REMOVED for r in report.results)

    def test_leaves_user_entries_alone(self, layout: Layout, user_hypr: Path) -> None:
        """Real directories at destinations are neither removed nor modified."""
        report = uninstall(layout)

        assert (user_hypr / "foo.conf").read_text() == "user setting\n"
        assert str(user_hypr) in outcomes(report, Outcome.SKIPPED_NOT_MANAGED)

    def test_without_any_backup(self, layout: Layout) -> None:
        """Uninstall without a marker skips every restore."""
        report = uninstall(layout)

        assert len(outcomes(report, Outcome.SKIPPED)) == len(managed_paths(layout))
        assert len(outcomes(report, Outcome.ABSENT)) == len(managed_paths(layout))

    def test_second_uninstall_is_harmless(self, layout: Layout, user_hypr: Path) -> None:
        """Running uninstall twice changes nothing the second time."""
        install(layout)
        uninstall(layout)

        report = uninstall(layout)

        assert not any(r.outcome.changed for r in report.results)
        assert (user_hypr / "foo.conf").exists()

    def test_uses_injected_pointer(self, layout: Layout, user_hypr: Path, tmp_path: Path) -> None:
        """The registry to restore from comes from the injected LatestBackup."""
        first = install(layout)
        assert first.backup_dir is not None
        pointer = LatestBackup(tmp_path / "elsewhere-marker")

        report = Uninstaller(layout, pointer).run()

        assert outcomes(report, Outcome.RESTORED) == []
        assert not user_hypr.exists()
