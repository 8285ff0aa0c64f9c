"""Recovery commands: recovery."""

import json
from pathlib import Path
from typing import Annotated

import typer

from ...core.aggregator import aggregate, summarize
from ...core.config_loader import load_model_config, load_recovery_bands
from ...io.payload_reader import read_json_payload
from ...io.serializers import ValidationError, parse_recovery_response, recovery_status_to_dict
from .. import views
from ..app import JsonOption, NowOption, app, resolve_now


@app.command()
def recovery(
    payload: Annotated[
        Path,
        typer.Argument(help="Recovery status JSON (server response); '-' reads stdin"),
    ],
    now: NowOption = None,
    json_out: JsonOption = False,
    no_cns: Annotated[
        bool,
        typer.Option("--no-cns", help="Ignore CNS data even if the payload has it"),
    ] = False,
) -> None:
    """
    Recompute muscle and CNS recovery from a saved status payload.
    """
    at = resolve_now(now)

    try:
        data = read_json_payload(payload)
        sources, cns_source = parse_recovery_response(data)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if no_cns:
        cns_source = None

    status = aggregate(sources, cns_source, at)
    ready_pct, recovering_pct = load_recovery_bands(load_model_config())

    if json_out:
        out = recovery_status_to_dict(status, sources, cns_source, at)
        summary = summarize(status, ready_pct)
        out["summary"] = {
            "total": summary.total,
            "recovered": summary.recovered,
            "recovering": summary.recovering,
            "ready": summary.ready,
            "average_percentage": summary.average_percentage,
        }
        print(json.dumps(out, indent=2))
        return

    views.print_recovery_status(status, ready_pct, recovering_pct)
