"""
CLI entry point using Typer.

Provides commands:
- recovery: Recompute muscle/CNS recovery from a status payload
- rest-status: Classify a rest duration
- timer: Show a rest timer state (optionally live)
- thresholds: Show the active threshold table
"""

from .app import app
from .commands import recovery, timer  # noqa: F401  (register commands)

if __name__ == "__main__":
    app()
