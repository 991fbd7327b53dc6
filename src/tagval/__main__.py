"""Allow running tagval as ``python -m tagval``."""

from tagval.cli import app

app()
