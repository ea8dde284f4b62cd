"""Fixed tables of managed paths and wiring blocks.

The provisioning engine manages a small, known set of destinations and
one shared compositor config. Both tables are declared here and bound
to a concrete repository and home directory through a Layout.
"""

from dataclasses import dataclass
from pathlib import Path

from polarway.core.paths import Layout

# Tag carried by every line of the pre-block wiring generation
LEGACY_LINE_TAG = "# polarway-managed"

WALLPAPER_SCRIPT = "polarway-wallpaper-random"
POWER_MENU_SCRIPT = "polarway-power-menu"


@dataclass(frozen=True, slots=True)
class ManagedPath:
    """A (source, destination) pair under polarway's control.

    Attributes:
        source: Entry inside the repository.
        destination: Link location inside the home directory.
        required: Whether a missing source aborts the install run.
        executable: Whether the source is a helper script.
    """

    source: Path
    destination: Path
    required: bool = True
    executable: bool = False


@dataclass(frozen=True, slots=True)
class WiringBlock:
    """A named marker block inserted into the shared compositor config.

    Attributes:
        name: Block name used in the delimiter lines.
        body: Block contents.
        requires: Commands the block invokes; the block is only wired
            when all of them are on PATH.
    """

    name: str
    body: str
    requires: tuple[str, ...] = ()


# (repo-relative source, home-relative destination, required)
_CONFIG_DIRS: tuple[tuple[str, str, bool], ...] = (
    ("hypr", ".config/hypr", True),
    ("waybar", ".config/waybar", False),
    ("mako", ".config/mako", False),
    ("rofi", ".config/rofi", False),
)

_SCRIPTS: tuple[str, ...] = (WALLPAPER_SCRIPT, POWER_MENU_SCRIPT)


def managed_paths(layout: Layout) -> list[ManagedPath]:
    """Return the managed path table for a layout, in install order.

    Config directories for the compositor, status bar, notification
    daemon and launcher come first, then the helper scripts linked into
    ``~/.local/bin``.

    Args:
        layout: Repository and home directory of the run.

    Returns:
        List of ManagedPath.
    """
    paths = [
        ManagedPath(
            source=layout.configs_dir / name,
            destination=layout.home / dest,
            required=required,
        )
        for name, dest, required in _CONFIG_DIRS
    ]
    paths.extend(
        ManagedPath(
            source=layout.scripts_dir / script,
            destination=layout.home / ".local" / "bin" / script,
            required=True,
            executable=True,
        )
        for script in _SCRIPTS
    )
    return paths


WIRING_BLOCKS: tuple[WiringBlock, ...] = (
    WiringBlock(
        name="wallpaper",
        body=f"exec-once = ~/.local/bin/{WALLPAPER_SCRIPT}",
    ),
    WiringBlock(
        name="power-menu",
        body=f"bind = SUPER SHIFT, E, exec, ~/.local/bin/{POWER_MENU_SCRIPT}",
    ),
    WiringBlock(
        name="wlogout",
        body="bind = SUPER, Escape, exec, wlogout -b 4",
        requires=("wlogout",),
    ),
    WiringBlock(
        name="terminate-user",
        body='bind = CTRL ALT SHIFT, Delete, exec, loginctl terminate-user "$USER"',
    ),
    WiringBlock(
        name="screenshots",
        body="\n".join(
            [
                'bind = , Print, exec, grim -g "$(slurp)" - | wl-copy',
                "bind = SHIFT, Print, exec, grim - | wl-copy",
            ]
        ),
        requires=("grim", "slurp", "wl-copy"),
    ),
)


def wiring_block_names() -> list[str]:
    """Names of every block install may insert into the shared config."""
    return [block.name for block in WIRING_BLOCKS]
