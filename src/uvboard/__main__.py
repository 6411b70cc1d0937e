"""Allow running as ``python -m uvboard``."""

from uvboard.cli import app

app()
