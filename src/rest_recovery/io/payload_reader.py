"""
Reading server response snapshots from disk.

The engine never persists its own state; these helpers only load payloads
that an external client saved (e.g. a recovery status or rest timer
response) so the CLI can recompute them.
"""

import json
import sys
from pathlib import Path
from typing import Any

from .serializers import ValidationError


class PayloadError(ValidationError):
    """Raised when a payload file cannot be read or decoded."""

    pass


def read_json_payload(path: str | Path) -> dict[str, Any]:
    """
    Load a JSON object from path ("-" reads stdin).

    Args:
        path: Path to a .json file, or "-"

    Returns:
        Decoded JSON object

    Raises:
        PayloadError: If the file is missing, not JSON, or not an object
    """
    source = str(path)
    try:
        if source == "-":
            data = json.load(sys.stdin)
        else:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
    except FileNotFoundError as e:
        raise PayloadError(f"Payload file not found: {source}") from e
    except json.JSONDecodeError as e:
        raise PayloadError(f"Invalid JSON in {source}: {e}") from e
    except OSError as e:
        raise PayloadError(f"Cannot read {source}: {e}") from e

    if not isinstance(data, dict):
        raise PayloadError(f"{source} must contain a JSON object")
    return data
