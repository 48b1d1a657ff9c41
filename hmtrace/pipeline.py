"""hmtrace pipeline — source text to final type plus trace.

    lexer -> parser -> analyzer

Each call to run_inference builds a fresh InferenceRun, so type variable
names restart at T0 and no state survives from one run to the next.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from hmtrace.ast_nodes import Expr
from hmtrace.config import HMTraceConfig
from hmtrace.errors import HMError, InferenceError, NestingTooDeepError
from hmtrace.infer import Analyzer
from hmtrace.lexer import tokenize
from hmtrace.parser import parse_tokens
from hmtrace.trace import TraceEvent, TraceLog
from hmtrace.types import HMType, TypeEnv, TypeRegistry
from hmtrace.unify import prune

logger = logging.getLogger(__name__)


class InferenceRun:
    """Everything one inference run owns: its type variables and its trace."""

    def __init__(self, filename: str = "<input>", strict: bool = False) -> None:
        self.filename = filename
        self.strict = strict
        self.registry = TypeRegistry()
        self.trace = TraceLog(self.registry)

    def parse(self, source: str) -> Expr:
        return parse_tokens(tokenize(source, self.filename, strict=self.strict))

    def infer(self, expr: Expr, env: Optional[TypeEnv] = None) -> HMType:
        analyzer = Analyzer(self.registry, self.trace)
        return prune(analyzer.analyze(expr, env or TypeEnv()))


@dataclass
class InferenceResult:
    source: str
    ast: Optional[Expr] = None
    final_type: Optional[str] = None
    error: Optional[HMError] = None
    trace: list[TraceEvent] = field(default_factory=list)
    type_variables: list[tuple[str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "ok": self.ok,
            "type": self.final_type,
            "error": self.error.to_dict() if self.error else None,
            "ast": self.ast.to_dict() if self.ast else None,
            "trace": [e.to_dict() for e in self.trace],
            "type_variables": [
                {"name": name, "value": value} for name, value in self.type_variables
            ],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


def run_inference(source: str, config: Optional[HMTraceConfig] = None,
                  filename: str = "<input>") -> InferenceResult:
    """Infer the type of `source`, capturing the first error instead of raising."""
    config = config or HMTraceConfig()
    run = InferenceRun(filename, strict=config.strict_lexing)
    result = InferenceResult(source=source)
    logger.debug("inference run started for %r", source)

    try:
        try:
            result.ast = run.parse(source)
            final = run.infer(result.ast)
            result.final_type = str(final)
        except RecursionError:
            stage = "parse" if result.ast is None else "infer"
            node_id = result.ast.node_id if result.ast is not None else None
            raise NestingTooDeepError(stage, node_id) from None
    except InferenceError as e:
        result.error = e.error
        run.trace.error(f"failure: {e.error.message}", e.error.node_id)

    result.trace = list(run.trace.events)
    result.type_variables = run.registry.snapshot()
    logger.debug("inference run finished: %s (%d events)",
                 result.final_type or result.error, len(result.trace))
    return result
