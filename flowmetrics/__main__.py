"""Allow running as ``python -m flowmetrics``."""

from .cli import app

app(prog_name="flowmetrics")
