# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import json
from pathlib import Path

from panichints.driver import main
from panichints.test_support import BOUNDS_MIR, DIVIDE_MIR, PANIC_MIR, UNSUPPORTED_MIR


def _write(tmp_path: Path, content: str) -> Path:
	path = tmp_path / "input.mir"
	path.write_text(content)
	return path


def test_cli_prints_hints_per_module(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, DIVIDE_MIR + PANIC_MIR)

	assert main([str(src)]) == 0
	out = capsys.readouterr().out
	assert "<root>:\n  divide: [DivisionByZero] b == 0\n" in out
	assert "checks:\n  checks::fail: [ExplicitPanic] Explicit Panic\n" in out


def test_cli_json_payload(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, BOUNDS_MIR + UNSUPPORTED_MIR)

	assert main([str(src), "--json"]) == 0
	payload = json.loads(capsys.readouterr().out)
	assert payload["exit_code"] == 0
	[hint] = payload["hints"]["<root>"]
	assert hint["assertion"] == "i < arr.len()"
	assert hint["kind"] == "BoundsCheck"
	assert hint["file"] == str(src)
	warnings = [d for d in payload["diagnostics"] if d["severity"] == "warning"]
	assert [d["code"] for d in warnings] == ["unsupported-operator"]


def test_cli_warnings_go_to_stderr(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, UNSUPPORTED_MIR)

	assert main([str(src)]) == 0
	captured = capsys.readouterr()
	assert captured.out == ""
	assert "warning: shapes::scaled: dropped DivisionByZero hint" in captured.err
	assert "note: slot: _3" in captured.err
	assert "total fault sites" not in captured.err

	assert main([str(src), "--verbose"]) == 0
	assert "total fault sites found: 1 (0 rendered, 1 dropped)" in capsys.readouterr().err


def test_cli_only_filter(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, DIVIDE_MIR + BOUNDS_MIR)

	assert main([str(src), "--json", "--only", "get"]) == 0
	payload = json.loads(capsys.readouterr().out)
	assert [h["function"] for h in payload["hints"]["<root>"]] == ["get"]


def test_cli_extra_panic_primitive(tmp_path: Path, capsys) -> None:
	src = _write(
		tmp_path,
		"""
fn app::stop() -> ! {
    let mut _0: !;

    bb0: {
        _0 = app::fatal(const "boom") -> unwind continue;
    }
}
""",
	)

	assert main([str(src), "--json"]) == 0
	assert json.loads(capsys.readouterr().out)["hints"] == {}

	assert main([str(src), "--json", "--panic-primitive", "app::fatal"]) == 0
	[hint] = json.loads(capsys.readouterr().out)["hints"]["app"]
	assert hint["assertion"] == "Explicit Panic"


def test_cli_parse_error_exits_nonzero(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, "fn broken( {\n")

	assert main([str(src), "--json"]) == 1
	payload = json.loads(capsys.readouterr().out)
	assert payload["exit_code"] == 1
	assert payload["hints"] == {}
	[diag] = payload["diagnostics"]
	assert diag["phase"] == "parser"
	assert diag["file"] == str(src)
	assert diag["line"] == 1


def test_cli_missing_file(tmp_path: Path, capsys) -> None:
	assert main([str(tmp_path / "nope.mir")]) == 1
	assert "error: cannot read input" in capsys.readouterr().err


def test_cli_dump_mir(tmp_path: Path, capsys) -> None:
	src = _write(tmp_path, DIVIDE_MIR)

	assert main([str(src), "--dump-mir"]) == 0
	out = capsys.readouterr().out
	assert out.startswith("fn divide(_1: i32, _2: i32) -> i32 {")
	assert "<root>:" in out
