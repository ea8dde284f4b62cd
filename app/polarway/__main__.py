"""Allow running polarway as ``python -m polarway``."""

from polarway.cli.main import app

app()
