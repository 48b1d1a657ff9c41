"""hmtrace CLI — Command-line interface for the inference tracer.

Commands:
  hmtrace infer "<expr>"          — Infer a type and print the trace
  hmtrace infer -f <file>         — Same, reading the expression from a file
  hmtrace tokens "<expr>"         — Print the token stream
  hmtrace ast "<expr>"            — Print the AST as JSON
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Optional

from hmtrace import __version__
from hmtrace.config import FORMATS, HMTraceConfig, load_config
from hmtrace.errors import InferenceError, NestingTooDeepError
from hmtrace.formatters import format_result
from hmtrace.lexer import tokenize
from hmtrace.parser import parse
from hmtrace.pipeline import run_inference


def _read_source(args: argparse.Namespace) -> Optional[str]:
    if getattr(args, "file", None):
        if not os.path.exists(args.file):
            print(json.dumps({"error": f"File not found: {args.file}"}))
            return None
        with open(args.file, "r", encoding="utf-8") as f:
            return f.read()
    if args.expr is None:
        print(json.dumps({"error": "No expression given"}))
        return None
    return args.expr


def cmd_infer(args: argparse.Namespace, config: HMTraceConfig) -> int:
    """Run inference and print the result in the chosen format."""
    source = _read_source(args)
    if source is None:
        return 1
    if args.strict:
        config.strict_lexing = True
    if args.no_snapshots:
        config.show_snapshots = False
    if args.no_color:
        config.color = False

    result = run_inference(source, config, filename=args.file or "<input>")
    print(format_result(result, args.output_format or config.format, config))
    return 0 if result.ok else 1


def cmd_tokens(args: argparse.Namespace, config: HMTraceConfig) -> int:
    """Print the token stream, one token per line."""
    source = _read_source(args)
    if source is None:
        return 1
    try:
        tokens = tokenize(source, strict=args.strict or config.strict_lexing)
    except InferenceError as e:
        print(e.to_json())
        return 1
    for tok in tokens:
        print(f"{tok.location.line}:{tok.location.column}\t{tok.type.name}\t{tok.text}")
    return 0


def cmd_ast(args: argparse.Namespace, config: HMTraceConfig) -> int:
    """Print the parsed AST as JSON."""
    source = _read_source(args)
    if source is None:
        return 1
    try:
        expr = parse(source, strict=args.strict or config.strict_lexing)
        tree = json.dumps(expr.to_dict(), indent=2)
    except RecursionError:
        print(NestingTooDeepError("parse").to_json())
        return 1
    except InferenceError as e:
        print(e.to_json())
        return 1
    print(tree)
    return 0


def _add_source_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("expr", nargs="?", help="Expression source text")
    p.add_argument("-f", "--file", help="Read the expression from a file")
    p.add_argument("--strict", action="store_true", help="Reject unrecognized characters")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hmtrace",
        description="hmtrace — step-by-step Hindley-Milner type inference tracer",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", help="Path to a .hmtracerc.yml/.json file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # infer
    p_infer = subparsers.add_parser("infer", help="Infer the type of an expression")
    _add_source_args(p_infer)
    p_infer.add_argument("--output-format", dest="output_format", choices=FORMATS,
                         help="Output format (default: from config, else pretty)")
    p_infer.add_argument("--no-snapshots", action="store_true", dest="no_snapshots",
                         help="Hide type variable snapshots in the trace")
    p_infer.add_argument("--no-color", action="store_true", dest="no_color",
                         help="Disable ANSI colors")
    p_infer.set_defaults(func=cmd_infer)

    # tokens
    p_tokens = subparsers.add_parser("tokens", help="Print the token stream")
    _add_source_args(p_tokens)
    p_tokens.set_defaults(func=cmd_tokens)

    # ast
    p_ast = subparsers.add_parser("ast", help="Print the AST as JSON")
    _add_source_args(p_ast)
    p_ast.set_defaults(func=cmd_ast)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)
    level = getattr(logging, str(config.log_level).upper(), None)
    if not isinstance(level, int):
        level = logging.WARNING
    if args.verbose:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(name)s - %(levelname)s - %(message)s")

    if not args.command:
        parser.print_help()
        return 1
    return args.func(args, config)


if __name__ == "__main__":
    sys.exit(main())
