"""
YAML → typed config loader.

Loads rest thresholds, zone styles and recovery bands from thresholds.yaml
(bundled with the package) and optionally merges user overrides from
~/.rest-recovery/thresholds.yaml, or from the file named by the
REST_RECOVERY_CONFIG environment variable.

Usage:
    from rest_recovery.core.config_loader import load_rest_thresholds
    thresholds = load_rest_thresholds()
    goal = thresholds["compound"].goal

Any key missing from YAML falls back to the Python defaults in config.py.
If an override file has parse errors, a warning is logged and the file is
ignored.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from .config import (
    RECOVERY_READY_PCT,
    RECOVERY_RECOVERING_PCT,
    REST_THRESHOLDS,
    ZONE_STYLES,
    RestThresholds,
)

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "REST_RECOVERY_CONFIG"

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; log and return {} if it cannot be used."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring config file %s: %s", path, e)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: top level is not a mapping", path)
        return {}
    return data


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_bundled_yaml_path() -> Path | None:
    """Return the path to the bundled thresholds.yaml, or None if not found."""
    # config_loader.py lives at src/rest_recovery/core/config_loader.py
    candidate = Path(__file__).parent.parent / "thresholds.yaml"
    return candidate if candidate.is_file() else None


def get_user_yaml_path() -> Path | None:
    """
    Return the user override file if it exists, else None.

    REST_RECOVERY_CONFIG takes precedence over ~/.rest-recovery/thresholds.yaml.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path).expanduser()
        if p.exists():
            return p
        logger.warning("%s points to a missing file: %s", CONFIG_ENV_VAR, p)
        return None

    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".rest-recovery" / "thresholds.yaml"
    return p if p.exists() else None


def load_model_config() -> dict[str, Any]:
    """
    Load and merge configuration from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/rest_recovery/thresholds.yaml
    2. User override file

    Returns:
        Merged dict of config sections. Empty dict if no YAML available.
    """
    config: dict[str, Any] = {}

    bundled = get_bundled_yaml_path()
    if bundled is not None:
        config = _deep_merge(config, _load_yaml_file(bundled))

    user = get_user_yaml_path()
    if user is not None:
        user_cfg = _load_yaml_file(user)
        if user_cfg:
            logger.debug("Merging user config from %s", user)
            config = _deep_merge(config, user_cfg)

    return config


def load_rest_thresholds(config: dict[str, Any] | None = None) -> dict[str, RestThresholds]:
    """
    Build the category -> RestThresholds table.

    Categories from YAML are added to (or override) the defaults. An entry
    with missing or invalid numbers keeps the default for that category
    (or is skipped if there is none).
    """
    if config is None:
        config = load_model_config()

    table = dict(REST_THRESHOLDS)
    section = config.get("rest_thresholds") or {}
    if not isinstance(section, dict):
        logger.warning("rest_thresholds must be a mapping; using defaults")
        return table

    for category, values in section.items():
        if not isinstance(values, dict):
            logger.warning("rest_thresholds.%s must be a mapping; skipped", category)
            continue
        default = table.get(category)
        goal = values.get("goal", default.goal if default else None)
        max_goal = values.get("max_goal", default.max_goal if default else None)
        try:
            table[str(category)] = RestThresholds(goal=float(goal), max_goal=float(max_goal))
        except (TypeError, ValueError) as e:
            logger.warning("Invalid rest_thresholds.%s (%s); skipped", category, e)

    return table


def load_zone_styles(config: dict[str, Any] | None = None) -> dict[str, tuple[str, str]]:
    """Build the zone -> (text, color) table, keeping defaults for unlisted zones."""
    if config is None:
        config = load_model_config()

    styles = dict(ZONE_STYLES)
    section = config.get("zone_styles") or {}
    if not isinstance(section, dict):
        logger.warning("zone_styles must be a mapping; using defaults")
        return styles

    for zone, values in section.items():
        if zone not in styles or not isinstance(values, dict):
            logger.warning("Unknown or malformed zone style %r; skipped", zone)
            continue
        text, color = styles[zone]
        styles[zone] = (str(values.get("text", text)), str(values.get("color", color)))

    return styles


def load_recovery_bands(config: dict[str, Any] | None = None) -> tuple[float, float]:
    """Return (ready_pct, recovering_pct) display thresholds."""
    if config is None:
        config = load_model_config()

    section = config.get("recovery_bands") or {}
    if not isinstance(section, dict):
        return RECOVERY_READY_PCT, RECOVERY_RECOVERING_PCT
    try:
        ready = float(section.get("ready_pct", RECOVERY_READY_PCT))
        recovering = float(section.get("recovering_pct", RECOVERY_RECOVERING_PCT))
    except (TypeError, ValueError):
        logger.warning("Invalid recovery_bands; using defaults")
        return RECOVERY_READY_PCT, RECOVERY_RECOVERING_PCT
    return ready, recovering
