"""Rest timing commands: rest-status, timer, thresholds."""

import json
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.live import Live

from ...core.config_loader import load_model_config, load_rest_thresholds, load_zone_styles
from ...core.normalize import parse_rest_time
from ...core.rest_timer import RestTimer, rest_status
from ...io.payload_reader import read_json_payload
from ...io.serializers import (
    ValidationError,
    parse_rest_timer_payload,
    rest_status_to_dict,
    rest_timer_snapshot_to_dict,
)
from .. import views
from ..app import JsonOption, NowOption, app, resolve_now

CategoryOption = Annotated[
    Optional[str],
    typer.Option("--category", "-c", help="Exercise category: compound (default) or isolation"),
]


@app.command("rest-status")
def rest_status_cmd(
    elapsed: Annotated[
        str,
        typer.Option("--elapsed", "-e", help="Rest so far: seconds (90), minutes (1.5) or M:SS (1:30)"),
    ],
    category: CategoryOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Classify a rest duration into a zone.
    """
    config = load_model_config()
    seconds = parse_rest_time(elapsed)
    status = rest_status(seconds, category, load_rest_thresholds(config), load_zone_styles(config))

    if json_out:
        print(json.dumps({"elapsed_seconds": seconds, "rest_status": rest_status_to_dict(status)}, indent=2))
        return

    views.print_rest_status(seconds, status)


@app.command()
def timer(
    payload: Annotated[
        Path,
        typer.Argument(help="Rest timer state JSON (server response); '-' reads stdin"),
    ],
    now: NowOption = None,
    json_out: JsonOption = False,
    watch: Annotated[
        bool,
        typer.Option("--watch", "-w", help="Keep refreshing once per second (Ctrl-C to stop)"),
    ] = False,
    ticks: Annotated[
        Optional[int],
        typer.Option("--ticks", help="Stop --watch after this many refreshes", min=1),
    ] = None,
) -> None:
    """
    Show elapsed rest and zone for a saved rest timer state.
    """
    at = resolve_now(now)

    try:
        data = read_json_payload(payload)
        last_set, elapsed, is_paused, category = parse_rest_timer_payload(data)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    config = load_model_config()
    rest_timer = RestTimer(load_rest_thresholds(config), load_zone_styles(config))
    rest_timer.reconcile(last_set, elapsed, is_paused, category, at)

    if json_out:
        print(json.dumps(rest_timer_snapshot_to_dict(rest_timer.snapshot(at)), indent=2))
        return

    if not watch:
        views.print_timer(rest_timer.snapshot(at))
        return

    # Ticks only re-render; elapsed always comes from the anchored timestamps.
    clock_offset = at - datetime.now(timezone.utc)
    count = 0
    try:
        with Live(views.format_timer_line(rest_timer.snapshot(at)), console=views.console) as live:
            while ticks is None or count < ticks:
                time.sleep(1)
                tick_now = datetime.now(timezone.utc) + clock_offset
                live.update(views.format_timer_line(rest_timer.snapshot(tick_now)))
                count += 1
    except KeyboardInterrupt:
        pass


@app.command()
def thresholds(json_out: JsonOption = False) -> None:
    """
    Show the active rest thresholds and zone styles.
    """
    config = load_model_config()
    table = load_rest_thresholds(config)
    styles = load_zone_styles(config)

    if json_out:
        print(json.dumps({
            "rest_thresholds": {
                category: {"goal": limits.goal, "max_goal": limits.max_goal}
                for category, limits in table.items()
            },
            "zone_styles": {
                zone: {"text": text, "color": color}
                for zone, (text, color) in styles.items()
            },
        }, indent=2))
        return

    views.console.print(views.format_thresholds_table(table, styles))
