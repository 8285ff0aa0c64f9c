"""Shared Typer app object, shared option types, and time utilities."""

import logging
from datetime import datetime, timezone
from typing import Annotated, Optional

import typer

from ..core.normalize import to_timestamp

# Shared --now option used by every time-dependent command
NowOption = Annotated[
    Optional[str],
    typer.Option("--now", help="Evaluate at this ISO-8601 instant (default: current time)"),
]

JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="rest-recovery",
    help="Muscle/CNS recovery estimates and rest timing between sets.",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """
    Recovery and rest-timing engine.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def resolve_now(now: str | None) -> datetime:
    """Parse --now, or return the current UTC time when it is not given."""
    if now is None:
        return datetime.now(timezone.utc)
    parsed = to_timestamp(now)
    if parsed is None:
        raise typer.BadParameter(f"Invalid timestamp: {now!r}", param_hint="--now")
    return parsed
