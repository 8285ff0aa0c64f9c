"""
CLI view formatters using Rich for pretty console output.

All rounding of engine values happens here, at the presentation boundary.
"""

import math

from rich.console import Console
from rich.table import Table

from ..core.aggregator import group_by_region, summarize, top_recovering
from ..core.config import RECOVERY_BAND_COLORS, RECOVERY_READY_PCT, RECOVERY_RECOVERING_PCT, RestThresholds
from ..core.models import RecoverySnapshot, RecoveryStatus, RestStatus, RestTimerSnapshot
from ..core.recovery import recovery_band

console = Console()


def format_time_remaining(hours: float) -> str:
    """
    Human-readable time until recovery.

    0 -> "Ready", under an hour -> minutes, under a day -> hours,
    otherwise days and hours. Always rounds up.
    """
    if hours <= 0:
        return "Ready"
    if hours < 1:
        return f"{math.ceil(hours * 60)}m"
    whole_hours = math.ceil(hours)
    if whole_hours < 24:
        return f"{whole_hours}h"
    days, rem = divmod(whole_hours, 24)
    return f"{days}d {rem}h" if rem > 0 else f"{days}d"


def format_timer(seconds: float) -> str:
    """Format elapsed seconds as M:SS."""
    total = max(0, int(seconds))
    mins, secs = divmod(total, 60)
    return f"{mins}:{secs:02d}"


def _pct_cell(snapshot: RecoverySnapshot, ready_pct: float, recovering_pct: float) -> str:
    band = recovery_band(snapshot.recovery_percentage, ready_pct, recovering_pct)
    color = RECOVERY_BAND_COLORS[band]
    return f"[{color}]{round(snapshot.recovery_percentage)}%[/]"


def format_recovery_table(
    status: RecoveryStatus,
    ready_pct: float = RECOVERY_READY_PCT,
    recovering_pct: float = RECOVERY_RECOVERING_PCT,
) -> Table:
    """
    Create a Rich table of muscle groups, grouped by body region.

    Args:
        status: Aggregated recovery status
        ready_pct: Percentage shown as ready
        recovering_pct: Percentage shown as recovering

    Returns:
        Rich Table object
    """
    table = Table(title="Muscle Recovery")

    table.add_column("Region", style="dim")
    table.add_column("Muscle", style="bold")
    table.add_column("Recovered", justify="right")
    table.add_column("Time left", justify="right")

    for region, entries in group_by_region(status).items():
        for i, (muscle, snapshot) in enumerate(entries):
            table.add_row(
                region if i == 0 else "",
                muscle.replace("_", " ").title(),
                _pct_cell(snapshot, ready_pct, recovering_pct),
                format_time_remaining(snapshot.hours_until_recovery),
            )

    return table


def print_recovery_status(
    status: RecoveryStatus,
    ready_pct: float = RECOVERY_READY_PCT,
    recovering_pct: float = RECOVERY_RECOVERING_PCT,
) -> None:
    """Print summary line, CNS card (when present), muscle table and soonest-ready list."""
    summary = summarize(status, ready_pct)

    console.print()
    if summary.total == 0:
        console.print("[dim]No muscle groups tracked.[/dim]")
    else:
        console.print(
            f"[bold]Recovered:[/bold] {summary.recovered}/{summary.total}   "
            f"[bold]Recovering:[/bold] {summary.recovering}   "
            f"[bold]Ready to train:[/bold] {summary.ready}   "
            f"[bold]Average:[/bold] {round(summary.average_percentage)}%"
        )

    if status.cns is not None:
        cns = status.cns
        console.print(
            f"[bold]CNS:[/bold] {_pct_cell(cns, ready_pct, recovering_pct)}  "
            f"({format_time_remaining(cns.hours_until_recovery)})"
        )

    if summary.total == 0:
        return

    console.print()
    console.print(format_recovery_table(status, ready_pct, recovering_pct))

    soonest = top_recovering(status)
    if soonest:
        console.print()
        console.print("[bold]Next to recover:[/bold]")
        for muscle, snapshot in soonest:
            console.print(
                f"  {muscle.replace('_', ' ').title()}: "
                f"{format_time_remaining(snapshot.hours_until_recovery)} to 100%"
            )


def print_rest_status(elapsed: float, status: RestStatus) -> None:
    """Print one rest classification."""
    console.print(
        f"[bold]{format_timer(elapsed)}[/bold]  "
        f"[{status.color}]{status.text}[/]  "
        f"[dim](goal {format_timer(status.goal)}, max {format_timer(status.max_goal)})[/dim]"
    )


def format_timer_line(snapshot: RestTimerSnapshot) -> str:
    """One-line timer view used by both the static and --watch outputs."""
    if snapshot.last_set_timestamp is None:
        return "[dim]No rest timer running.[/dim]"
    status = snapshot.rest_status
    paused = " [yellow](paused)[/yellow]" if snapshot.is_paused else ""
    category = snapshot.last_exercise_category or "default"
    return (
        f"[bold]{format_timer(snapshot.elapsed_seconds)}[/bold]{paused}  "
        f"[{status.color}]{status.text}[/]  "
        f"[dim]{category}: goal {format_timer(status.goal)}, "
        f"max {format_timer(status.max_goal)}[/dim]"
    )


def print_timer(snapshot: RestTimerSnapshot) -> None:
    """Print the rest timer state."""
    console.print(format_timer_line(snapshot))


def format_thresholds_table(
    thresholds: dict[str, RestThresholds],
    styles: dict[str, tuple[str, str]],
) -> Table:
    """Rich table of the active rest thresholds and zone styles."""
    table = Table(title="Rest Thresholds")
    table.add_column("Category", style="bold")
    table.add_column("Goal", justify="right")
    table.add_column("Max", justify="right")
    for category, limits in thresholds.items():
        table.add_row(category, format_timer(limits.goal), format_timer(limits.max_goal))

    zones = Table(title="Zones")
    zones.add_column("Zone", style="bold")
    zones.add_column("Text")
    for zone, (text, color) in styles.items():
        zones.add_row(zone, f"[{color}]{text}[/]")

    outer = Table.grid(padding=(0, 4))
    outer.add_row(table, zones)
    return outer


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")
