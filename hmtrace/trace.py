"""Inference trace — the ordered event log handed to presentation layers.

Each event records one decision of the analyzer or unifier together with a
snapshot of every type variable allocated so far, so a viewer can step
forward and backward through a run without re-running it.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Optional

from hmtrace.types import TypeRegistry


class TraceCategory(Enum):
    INFO = "info"
    SUCCESS = "success"
    WARN = "warn"
    ERROR = "error"
    AST = "ast"


@dataclass(frozen=True)
class TraceEvent:
    message: str
    category: TraceCategory
    type_snapshot: tuple[tuple[str, str], ...] = ()
    related_node_id: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "category": self.category.value,
            "type_snapshot": [
                {"name": name, "value": value} for name, value in self.type_snapshot
            ],
            "related_node_id": self.related_node_id,
        }


@dataclass
class TraceLog:
    """Append-only event sink scoped to one inference run."""
    registry: TypeRegistry
    events: list[TraceEvent] = field(default_factory=list)

    def record(self, message: str, category: TraceCategory,
               node_id: Optional[str] = None) -> TraceEvent:
        event = TraceEvent(
            message=message,
            category=category,
            type_snapshot=tuple(self.registry.snapshot()),
            related_node_id=node_id,
        )
        self.events.append(event)
        return event

    def info(self, message: str, node_id: Optional[str] = None) -> TraceEvent:
        return self.record(message, TraceCategory.INFO, node_id)

    def success(self, message: str, node_id: Optional[str] = None) -> TraceEvent:
        return self.record(message, TraceCategory.SUCCESS, node_id)

    def warn(self, message: str, node_id: Optional[str] = None) -> TraceEvent:
        return self.record(message, TraceCategory.WARN, node_id)

    def error(self, message: str, node_id: Optional[str] = None) -> TraceEvent:
        return self.record(message, TraceCategory.ERROR, node_id)

    def ast(self, message: str, node_id: Optional[str] = None) -> TraceEvent:
        return self.record(message, TraceCategory.AST, node_id)

    def by_category(self, category: TraceCategory) -> list[TraceEvent]:
        return [e for e in self.events if e.category == category]

    def to_list(self) -> list[dict[str, Any]]:
        return [e.to_dict() for e in self.events]

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_list(), indent=indent)

    def __iter__(self) -> Iterator[TraceEvent]:
        return iter(self.events)

    def __len__(self) -> int:
        return len(self.events)

    def __getitem__(self, index: int) -> TraceEvent:
        return self.events[index]
