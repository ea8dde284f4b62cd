"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules. Every test
runs with XDG directories redirected into its own temporary directory,
so nothing touches the real home directory.
"""

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
from polarway.core.paths import Layout, make_layout
from polarway.core.settings import Settings, save_settings
from polarway.core.targets import POWER_MENU_SCRIPT, WALLPAPER_SCRIPT

HYPRLAND_CONF = """\
monitor = ,preferred,auto,1
$mainMod = SUPER
bind = $mainMod, Return, exec, kitty
"""


def build_repo(root: Path) -> Path:
    """Create a dotfiles repository with every managed source present."""
    configs = root / "configs"
    for name in ("hypr", "waybar", "mako", "rofi"):
        (configs / name).mkdir(parents=True)
    (configs / "hypr" / "hyprland.conf").write_text(HYPRLAND_CONF)
    (configs / "waybar" / "config.jsonc").write_text("{}\n")
    (configs / "mako" / "config").write_text("font=monospace 10\n")
    (configs / "rofi" / "config.rasi").write_text("configuration {}\n")

    scripts = configs / "scripts"
    scripts.mkdir()
    for script in (WALLPAPER_SCRIPT, POWER_MENU_SCRIPT):
        path = scripts / script
        path.write_text("#!/bin/sh\nexit 0\n")
        path.chmod(0o644)

    return root


@pytest.fixture(autouse=True)
def isolated_xdg(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Redirect XDG config, state and data directories into tmp_path."""
    xdg = tmp_path / "xdg"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(xdg / "state"))
    monkeypatch.setenv("XDG_DATA_HOME", str(xdg / "data"))
    return xdg


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """Empty home directory."""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    """Dotfiles repository with every managed source present."""
    return build_repo(tmp_path / "repo")


@pytest.fixture
def layout(repo: Path, home: Path) -> Layout:
    """Layout binding the repo fixture to the home fixture."""
    return make_layout(repo, home)


@pytest.fixture
def all_tools() -> Iterator[None]:
    """Pretend every optional tool used by wiring blocks is installed."""
    with patch("polarway.core.provision.missing_commands", return_value=[]):
        yield


@pytest.fixture
def cli_home(home: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME at the home fixture and disable the wallpaper download."""
    monkeypatch.setenv("HOME", str(home))
    save_settings(Settings(fetch_wallpaper=False))
    return home
