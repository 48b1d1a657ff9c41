"""hmtrace Output Formatters — terminal and machine-readable renderings.

    pretty   — numbered trace with category icons and type snapshots (default)
    summary  — one line: the final type or the error
    json     — the full InferenceResult, for presentation layers
"""

from __future__ import annotations

import os
import sys
from typing import List, Optional

from hmtrace.config import HMTraceConfig
from hmtrace.pipeline import InferenceResult
from hmtrace.trace import TraceCategory, TraceEvent


# ── ANSI color helpers ───────────────────────────────────────────────────

def color_enabled(config: Optional[HMTraceConfig] = None) -> bool:
    if config is not None and not config.color:
        return False
    return os.environ.get("NO_COLOR") is None and sys.stdout.isatty()


def _c(code: str, text: str, enabled: bool) -> str:
    if not enabled:
        return text
    return f"\033[{code}m{text}\033[0m"


_CATEGORY_STYLE = {
    TraceCategory.INFO: ("37", "·"),
    TraceCategory.SUCCESS: ("32", "✔"),
    TraceCategory.WARN: ("33", "▲"),
    TraceCategory.ERROR: ("31", "✖"),
    TraceCategory.AST: ("35", "◆"),
}


# ── Pretty formatter (default) ──────────────────────────────────────────

def format_event(index: int, event: TraceEvent, show_snapshot: bool = True,
                 color: bool = False) -> List[str]:
    code, icon = _CATEGORY_STYLE[event.category]
    lines = [f" {index:3d}  {_c(code, icon, color)}  {_c(code, event.message, color)}"]
    if show_snapshot and event.type_snapshot:
        bindings = ", ".join(f"{name}={value}" for name, value in event.type_snapshot)
        lines.append(f"        {_c('2', bindings, color)}")
    return lines


def format_pretty(result: InferenceResult, config: Optional[HMTraceConfig] = None) -> str:
    config = config or HMTraceConfig()
    color = color_enabled(config)
    lines: List[str] = [f"\n {_c('1', result.source, color)}\n"]

    # Numbers are trace positions, so hidden AST events leave gaps.
    for index, event in enumerate(result.trace, start=1):
        if event.category == TraceCategory.AST and not config.show_ast_events:
            continue
        lines.extend(format_event(index, event, config.show_snapshots, color))

    lines.append("")
    if result.ok:
        lines.append(f" {_c('32', '✔', color)}  {_c('1', result.final_type or '', color)}")
    else:
        lines.append(f" {_c('31', '✖', color)}  {_c('31', str(result.error), color)}")
    lines.append("")
    return "\n".join(lines)


# ── Summary formatter ───────────────────────────────────────────────────

def format_summary(result: InferenceResult, config: Optional[HMTraceConfig] = None) -> str:
    if result.ok:
        return f"{result.source} : {result.final_type}"
    return f"{result.source} : {result.error.kind.value}: {result.error.message}"


# ── JSON formatter ──────────────────────────────────────────────────────

def format_json(result: InferenceResult, config: Optional[HMTraceConfig] = None) -> str:
    return result.to_json()


FORMATTERS = {
    "pretty": format_pretty,
    "summary": format_summary,
    "json": format_json,
}


def format_result(result: InferenceResult, fmt: str = "pretty",
                  config: Optional[HMTraceConfig] = None) -> str:
    try:
        formatter = FORMATTERS[fmt]
    except KeyError:
        raise ValueError(f"unknown output format {fmt!r}") from None
    return formatter(result, config)
