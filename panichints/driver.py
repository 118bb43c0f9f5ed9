# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Command-line driver: parse a textual MIR dump and print its panic hints.

Human-readable mode prints hints grouped by module on stdout and diagnostics
as `file:line:col: severity: message` on stderr. With --json a single object
`{"exit_code", "hints", "diagnostics"}` is printed on stdout instead.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List

from panichints.analysis.errors import ProgramContractError
from panichints.analysis.fault_scan import DEFAULT_ABORT_PATHS
from panichints.core.diagnostics import Diagnostic, has_errors
from panichints.core.span import Span
from panichints.hint import HintsPerModule
from panichints.hint_generation import HintOptions, generate_hints
from panichints.mir.parser import MirParseError, parse_mir_file
from panichints.mir.pretty import write_mir_pretty
from panichints.types_query_impl import DEFAULT_PANIC_PRIMITIVES


def _hints_to_json(hints: HintsPerModule) -> dict:
	return {module: [h.to_json() for h in module_hints] for module, module_hints in hints.items()}


def _emit(args: argparse.Namespace, exit_code: int, hints: HintsPerModule, diagnostics: List[Diagnostic]) -> int:
	if args.json:
		payload = {
			"exit_code": exit_code,
			"hints": _hints_to_json(hints),
			"diagnostics": [d.to_json() for d in diagnostics],
		}
		print(json.dumps(payload))
		return exit_code
	for module in sorted(hints):
		print(f"{module}:")
		for hint in hints[module]:
			print(f"  {hint.function}: [{hint.kind.value}] {hint.assertion}")
	for diag in diagnostics:
		if diag.severity == "note" and not args.verbose:
			continue
		print(diag.render(), file=sys.stderr)
		for note in diag.notes:
			print(f"  note: {note}", file=sys.stderr)
	return exit_code


def main(argv: list[str] | None = None) -> int:
	"""
	Parse the MIR file, generate hints and print them.

	Exit code is 0 when hints were generated (even if some fault sites were
	dropped with a warning) and 1 on malformed input or a broken program.
	"""
	parser = argparse.ArgumentParser(description="panic hint generator for MIR dumps")
	parser.add_argument("source", type=Path, help="Path to a textual MIR file")
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit hints and diagnostics as one JSON object",
	)
	parser.add_argument(
		"--only",
		dest="only",
		action="append",
		metavar="NAME",
		help="Analyze only functions with this short name (repeatable)",
	)
	parser.add_argument(
		"--abort-path",
		dest="abort_paths",
		action="append",
		metavar="PATH",
		help="Extra callee path treated as a process abort (repeatable)",
	)
	parser.add_argument(
		"--panic-primitive",
		dest="panic_primitives",
		action="append",
		metavar="PATH",
		help="Extra callee path treated as a panic primitive (repeatable)",
	)
	parser.add_argument("--dump-mir", action="store_true", help="Print the parsed MIR before the hints")
	parser.add_argument("-v", "--verbose", action="store_true", help="Also print note diagnostics")
	args = parser.parse_args(argv)

	source_path: Path = args.source
	diagnostics: List[Diagnostic] = []
	primitives = DEFAULT_PANIC_PRIMITIVES | frozenset(args.panic_primitives or [])
	try:
		program = parse_mir_file(source_path, panic_primitives=primitives)
	except OSError as exc:
		diagnostics.append(
			Diagnostic(message=f"cannot read input: {exc}", phase="parser", severity="error", span=Span(file=str(source_path)))
		)
		return _emit(args, 1, {}, diagnostics)
	except MirParseError as exc:
		diagnostics.append(Diagnostic(message=str(exc), code="parse-error", phase="parser", severity="error", span=exc.span))
		return _emit(args, 1, {}, diagnostics)

	if args.dump_mir and not args.json:
		types = program.type_query()
		for name, body in program.bodies.items():
			print(write_mir_pretty(name, body, types))

	options = HintOptions(
		only_functions=frozenset(args.only) if args.only else None,
		abort_paths=DEFAULT_ABORT_PATHS | frozenset(args.abort_paths or []),
	)
	try:
		hints = generate_hints(program, options=options, diagnostics=diagnostics)
	except ProgramContractError as exc:
		diagnostics.append(
			Diagnostic(
				message=str(exc),
				code="contract",
				phase="hints",
				severity="error",
				span=Span(file=str(source_path)),
				notes=[f"function: {exc.function}"] if exc.function else [],
			)
		)
		return _emit(args, 1, {}, diagnostics)

	return _emit(args, 1 if has_errors(diagnostics) else 0, hints, diagnostics)


if __name__ == "__main__":
	sys.exit(main())
