"""hmtrace Configuration — project-level .hmtracerc.yml support.

Loads configuration from .hmtracerc.yml (or .hmtracerc.yaml, .hmtracerc.json)
found by walking up from the working directory. Only the CLI consults it;
the inference core takes an explicit config object or none.

Example .hmtracerc.yml:
    strict_lexing: true       # reject unknown characters instead of dropping them
    format: summary           # pretty | summary | json
    show_snapshots: false
    show_ast_events: true
    color: true
    log_level: DEBUG
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

FORMATS = ("pretty", "summary", "json")


@dataclass
class HMTraceConfig:
    """Settings for a run and for rendering its trace."""
    strict_lexing: bool = False
    format: str = "pretty"
    show_snapshots: bool = True
    show_ast_events: bool = True
    color: bool = True
    log_level: str = "WARNING"


# ---------------------------------------------------------------------------
# Config file names (in priority order)
# ---------------------------------------------------------------------------

_CONFIG_FILES = [
    ".hmtracerc.yml",
    ".hmtracerc.yaml",
    ".hmtracerc.json",
]


def find_config(start_dir: str = ".") -> Optional[str]:
    """Find the nearest config file by walking up from start_dir."""
    current = os.path.abspath(start_dir)
    while True:
        for name in _CONFIG_FILES:
            path = os.path.join(current, name)
            if os.path.isfile(path):
                return path
        parent = os.path.dirname(current)
        if parent == current:
            break
        current = parent
    return None


def load_config(path: Optional[str] = None, start_dir: str = ".") -> HMTraceConfig:
    """Load configuration from a file.

    If no path is given, searches for a config file starting from start_dir.
    If no config file is found, or it cannot be read, returns defaults.
    """
    if path is None:
        path = find_config(start_dir)

    if path is None:
        return HMTraceConfig()

    try:
        with open(path, "r") as f:
            content = f.read()
    except OSError as e:
        logger.warning("cannot read config %s: %s", path, e)
        return HMTraceConfig()

    try:
        if path.endswith(".json"):
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        logger.warning("invalid config %s: %s", path, e)
        return HMTraceConfig()

    if not isinstance(data, dict):
        return HMTraceConfig()
    return _dict_to_config(data)


def _dict_to_config(data: Dict[str, Any]) -> HMTraceConfig:
    """Convert a parsed dict to HMTraceConfig."""
    config = HMTraceConfig()

    if "strict_lexing" in data:
        config.strict_lexing = bool(data["strict_lexing"])
    if "format" in data:
        fmt = str(data["format"])
        if fmt in FORMATS:
            config.format = fmt
        else:
            logger.warning("unknown format %r, keeping %r", fmt, config.format)
    if "show_snapshots" in data:
        config.show_snapshots = bool(data["show_snapshots"])
    if "show_ast_events" in data:
        config.show_ast_events = bool(data["show_ast_events"])
    if "color" in data:
        config.color = bool(data["color"])
    if "log_level" in data:
        config.log_level = str(data["log_level"]).upper()

    return config
