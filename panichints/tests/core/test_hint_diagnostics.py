# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from types import SimpleNamespace

from panichints.core.diagnostics import Diagnostic, has_errors, report
from panichints.core.span import Span


def test_report_without_sink_is_a_no_op() -> None:
	report(None, "ignored", severity="note", phase="hints")


def test_report_appends_structured_diagnostic() -> None:
	diagnostics: list[Diagnostic] = []
	report(
		diagnostics,
		"dropped hint",
		severity="warning",
		phase="hints",
		code="no-definition",
		span=Span(file="a.mir", line=3, column=9),
		notes=["slot: _3"],
	)

	assert len(diagnostics) == 1
	diag = diagnostics[0]
	assert diag.render() == "a.mir:3:9: warning: dropped hint"
	assert diag.to_json() == {
		"phase": "hints",
		"code": "no-definition",
		"message": "dropped hint",
		"severity": "warning",
		"file": "a.mir",
		"line": 3,
		"column": 9,
		"notes": ["slot: _3"],
	}
	assert not has_errors(diagnostics)


def test_unknown_span_renders_placeholders() -> None:
	diag = Diagnostic(message="boom")
	assert diag.render() == "<unknown>:?:?: error: boom"
	assert has_errors([diag])


def test_span_from_lark_like_meta() -> None:
	meta = SimpleNamespace(line=4, column=2, end_line=4, end_column=10, empty=False)
	span = Span.from_loc(meta, file="f.mir")
	assert (span.file, span.line, span.column, span.end_column) == ("f.mir", 4, 2, 10)
	assert span.raw is meta
	assert span.is_known()

	empty = Span.from_loc(SimpleNamespace(empty=True), file="f.mir")
	assert empty == Span(file="f.mir")
	assert not empty.is_known()
	assert Span.from_loc(span) is span
