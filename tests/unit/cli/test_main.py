"""Unit tests for the main CLI application."""

import logging

from polarway import __version__
from polarway.cli.main import app, configure_logging
from typer.testing import CliRunner

runner = CliRunner()


class TestMainApp:
    """Tests for global options."""

    def test_version(self) -> None:
        """--version prints the version and exits."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"polarway version {__version__}" in result.output

    def test_help_lists_commands(self) -> None:
        """--help lists every subcommand."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("install", "uninstall", "history", "config"):
            assert command in result.output

    def test_no_args_shows_help(self) -> None:
        """Running without arguments prints usage."""
        result = runner.invoke(app, [])

        assert "Usage" in result.output


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_default_level_is_warning(self) -> None:
        """Only warnings reach stderr by default."""
        configure_logging(verbose=False)

        assert logging.getLogger().level == logging.WARNING

    def test_verbose_enables_debug(self) -> None:
        """--verbose shows every engine step."""
        configure_logging(verbose=True)

        assert logging.getLogger().level == logging.DEBUG
