"""CLI tests — exit codes and output formats."""

import json

from hmtrace.cli import main
from hmtrace.config import HMTraceConfig
from hmtrace.formatters import format_pretty, format_summary
from hmtrace.pipeline import run_inference
from hmtrace.trace import TraceCategory


class TestInferCommand:

    def test_success_exit_code(self, capsys):
        assert main(["infer", "10 + 5", "--output-format", "summary"]) == 0
        assert capsys.readouterr().out.strip() == "10 + 5 : Int"

    def test_failure_exit_code(self, capsys):
        assert main(["infer", "true + 1", "--output-format", "summary"]) == 1
        out = capsys.readouterr().out
        assert "TypeMismatchError" in out

    def test_json_output(self, capsys):
        main(["infer", "fun x -> x", "--output-format", "json"])
        data = json.loads(capsys.readouterr().out)
        assert data["type"] == "T0 -> T0"
        assert data["ast"]["label"] == "Fun(x)"

    def test_reads_file(self, tmp_path, capsys):
        src = tmp_path / "expr.ml"
        src.write_text("[1, 2]")
        assert main(["infer", "-f", str(src), "--output-format", "summary"]) == 0
        assert capsys.readouterr().out.strip() == "[1, 2] : [Int]"

    def test_missing_file(self, tmp_path, capsys):
        assert main(["infer", "-f", str(tmp_path / "missing.ml")]) == 1
        assert "File not found" in capsys.readouterr().out

    def test_pretty_output(self, capsys):
        assert main(["infer", "fun x -> x + 1", "--no-color"]) == 0
        out = capsys.readouterr().out
        assert "scope: x : T0" in out
        assert "T0=Int" in out
        assert "Int -> Int" in out

    def test_strict_flag(self, capsys):
        assert main(["infer", "1 @ 2", "--strict", "--output-format", "summary"]) == 1
        assert "LexError" in capsys.readouterr().out


class TestOtherCommands:

    def test_tokens(self, capsys):
        assert main(["tokens", "let x = 1 in x"]) == 0
        lines = capsys.readouterr().out.strip().splitlines()
        assert lines[0] == "1:1\tKEYWORD\tlet"
        assert lines[-1].endswith("EOF\tend of input")

    def test_ast(self, capsys):
        assert main(["ast", "f 1"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["kind"] == "App"
        assert [c["kind"] for c in data["children"]] == ["Var", "IntLit"]

    def test_ast_syntax_error(self, capsys):
        assert main(["ast", "(1"]) == 1
        data = json.loads(capsys.readouterr().out)
        assert data["kind"] == "SyntaxError"

    def test_ast_too_deep(self, capsys):
        assert main(["ast", "(" * 3000 + "1" + ")" * 3000]) == 1
        data = json.loads(capsys.readouterr().out)
        assert data["kind"] == "NestingTooDeepError"

    def test_unknown_log_level_in_config(self, tmp_path, capsys):
        path = tmp_path / ".hmtracerc.yml"
        path.write_text("log_level: BASIC_FORMAT\n")
        assert main(["--config", str(path), "infer", "1", "--output-format", "summary"]) == 0
        assert capsys.readouterr().out.strip() == "1 : Int"

    def test_no_command(self, capsys):
        assert main([]) == 1


class TestFormatters:

    def test_summary(self):
        assert format_summary(run_inference("1 < 2")) == "1 < 2 : Bool"

    def test_pretty_can_hide_ast_events_and_snapshots(self):
        config = HMTraceConfig(show_ast_events=False, show_snapshots=False, color=False)
        out = format_pretty(run_inference("fun x -> x + 1"), config)
        assert "AST: analyzing" not in out
        assert "T0=" not in out
        assert "unify: T0 := Int" in out

    def test_hidden_ast_events_keep_trace_numbers(self):
        config = HMTraceConfig(show_ast_events=False, color=False)
        result = run_inference("fun x -> x + 1")
        out = format_pretty(result, config).splitlines()
        scope = result.trace.index(
            next(e for e in result.trace if e.category == TraceCategory.WARN))
        assert f" {scope + 1:3d}  ▲  scope: x : T0" in out
