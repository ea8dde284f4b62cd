"""Console styles for polarway output.

Each role the CLI prints with (table header, muted detail, one style per
run outcome) maps to a rich style definition such as ``"bold #69B9A1"``.
The full set ships in ``polarway/data/theme.toml``. A ``[styles]`` table
in ``~/.config/polarway/theme.toml`` may redefine any subset of them.
"""

import logging
import tomllib
from functools import cache
from importlib import resources
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator
from rich.errors import StyleSyntaxError
from rich.style import Style
from rich.theme import Theme

from polarway.core.paths import get_config_dir

logger = logging.getLogger(__name__)

THEME_FILENAME = "theme.toml"


class OutputStyles(BaseModel):
    """Rich style definition per output role.

    Every field is required; the bundled theme supplies the complete set.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    header: str
    border: str
    muted: str
    info: str
    success: str
    warning: str
    error: str
    linked: str
    restored: str
    removed: str
    skipped: str

    @field_validator("*")
    @classmethod
    def _check_style(cls, value: str) -> str:
        try:
            Style.parse(value)
        except StyleSyntaxError as e:
            raise ValueError(f"invalid style {value!r}: {e}") from None
        return value

    def overridden(self, overrides: dict[str, object]) -> "OutputStyles":
        """Return a validated copy with some styles replaced."""
        return OutputStyles(**{**self.model_dump(), **overrides})

    def to_rich(self) -> Theme:
        return Theme(self.model_dump())


def user_theme_path() -> Path:
    """Location of the user's style overrides."""
    return get_config_dir() / THEME_FILENAME


def _styles_table(text: str) -> dict[str, object]:
    table = tomllib.loads(text).get("styles", {})
    if not isinstance(table, dict):
        msg = "[styles] must be a table"
        raise ValueError(msg)
    return table


def bundled_styles() -> OutputStyles:
    """Styles shipped with the package."""
    text = resources.files("polarway.data").joinpath(THEME_FILENAME).read_text(encoding="utf-8")
    return OutputStyles(**_styles_table(text))


def load_styles(path: Path | None = None) -> OutputStyles:
    """Bundled styles with the user's overrides applied.

    An unreadable or invalid override file is logged and ignored as a
    whole, so output is never left half-styled.

    Args:
        path: Override file. If None, uses the default user theme path.

    Returns:
        The effective OutputStyles.
    """
    styles = bundled_styles()
    path = path or user_theme_path()
    try:
        overrides = _styles_table(path.read_text(encoding="utf-8"))
        return styles.overridden(overrides)
    except FileNotFoundError:
        return styles
    except (OSError, ValueError) as e:
        logger.warning("Ignoring theme overrides in %s: %s", path, e)
        return styles


@cache
def get_theme() -> Theme:
    """Rich theme for the shared consoles, loaded once per process."""
    return load_styles().to_rich()
