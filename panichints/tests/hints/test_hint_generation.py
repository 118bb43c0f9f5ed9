# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
End-to-end hint generation over parsed MIR.
"""

from __future__ import annotations

import pytest

from panichints.analysis.errors import ProgramContractError
from panichints.core.diagnostics import Diagnostic
from panichints.hint import EXPLICIT_PANIC_ASSERTION, ROOT_MODULE, Hint, PanicKind
from panichints.hint_generation import HintOptions, count_hints, generate_hints, module_path_of, short_name_of
from panichints.mir.parser import parse_mir
from panichints.program import FnDef
from panichints.test_support import (
	ABORT_MIR,
	BOUNDS_MIR,
	CROSS_BLOCK_MIR,
	DIVIDE_MIR,
	PANIC_MIR,
	REMAINDER_MIR,
	RING_MIR,
	TRAIT_DECL_MIR,
	UNSUPPORTED_MIR,
	make_types,
	program_of,
)


def _summary(hints):
	return {module: [(h.function, h.assertion, h.kind) for h in items] for module, items in hints.items()}


def test_division_guard() -> None:
	hints = generate_hints(parse_mir(DIVIDE_MIR))
	assert _summary(hints) == {ROOT_MODULE: [("divide", "b == 0", PanicKind.DIVISION_BY_ZERO)]}


def test_remainder_guard() -> None:
	hints = generate_hints(parse_mir(REMAINDER_MIR))
	assert _summary(hints) == {ROOT_MODULE: [("remainder", "b == 0", PanicKind.REMAINDER_BY_ZERO)]}


def test_bounds_check_guard() -> None:
	hints = generate_hints(parse_mir(BOUNDS_MIR))
	assert _summary(hints) == {ROOT_MODULE: [("get", "i < arr.len()", PanicKind.BOUNDS_CHECK)]}


def test_explicit_panic_and_abort_share_a_module() -> None:
	hints = generate_hints(parse_mir(PANIC_MIR + ABORT_MIR))
	assert _summary(hints) == {
		"checks": [
			("checks::fail", EXPLICIT_PANIC_ASSERTION, PanicKind.EXPLICIT_PANIC),
			("checks::bail", EXPLICIT_PANIC_ASSERTION, PanicKind.EXPLICIT_PANIC),
		]
	}
	assert EXPLICIT_PANIC_ASSERTION == "Explicit Panic"


def test_field_accesses_use_declared_names() -> None:
	hints = generate_hints(parse_mir(RING_MIR))
	assert _summary(hints) == {
		"ring": [
			("ring::peek", "self.tail == 0", PanicKind.DIVISION_BY_ZERO),
			("ring::peek", "self.head < 8", PanicKind.BOUNDS_CHECK),
		]
	}


def test_hints_carry_the_terminator_span() -> None:
	[hint] = generate_hints(parse_mir(DIVIDE_MIR, file="div.mir"))[ROOT_MODULE]
	assert hint.span.file == "div.mir"
	assert hint.span.line == 10
	assert hint.to_json()["kind"] == "DivisionByZero"


def test_generation_is_idempotent() -> None:
	program = parse_mir(DIVIDE_MIR + BOUNDS_MIR + RING_MIR + PANIC_MIR)
	first = generate_hints(program)
	second = generate_hints(program)
	assert first == second
	assert count_hints(first) == 5


def test_trait_declarations_are_skipped_with_a_note() -> None:
	diagnostics: list[Diagnostic] = []
	hints = generate_hints(parse_mir(TRAIT_DECL_MIR + DIVIDE_MIR), diagnostics=diagnostics)

	assert list(hints) == [ROOT_MODULE]
	notes = [d.message for d in diagnostics if d.severity == "note"]
	assert any("skipping shapes::Shape::area" in m and "trait method declaration" in m for m in notes)


def test_unrenderable_guard_is_dropped_with_a_warning() -> None:
	diagnostics: list[Diagnostic] = []
	hints = generate_hints(parse_mir(UNSUPPORTED_MIR + DIVIDE_MIR), diagnostics=diagnostics)

	assert _summary(hints) == {ROOT_MODULE: [("divide", "b == 0", PanicKind.DIVISION_BY_ZERO)]}
	warnings = [d for d in diagnostics if d.severity == "warning"]
	assert len(warnings) == 1
	assert warnings[0].code == "unsupported-operator"
	assert warnings[0].phase == "hints"
	assert "shapes::scaled" in warnings[0].message
	assert "slot: _3" in warnings[0].notes
	assert any("total fault sites found: 2 (1 rendered, 1 dropped)" in d.message for d in diagnostics)


def test_value_from_another_block_is_not_resolved() -> None:
	diagnostics: list[Diagnostic] = []
	hints = generate_hints(parse_mir(CROSS_BLOCK_MIR), diagnostics=diagnostics)

	assert hints == {}
	[warning] = [d for d in diagnostics if d.severity == "warning"]
	assert warning.code == "no-definition"
	assert "block: bb1" in warning.notes


def test_only_functions_allowlist() -> None:
	program = parse_mir(DIVIDE_MIR + BOUNDS_MIR + PANIC_MIR)
	hints = generate_hints(program, options=HintOptions(only_functions=frozenset({"get", "fail"})))
	assert _summary(hints) == {
		ROOT_MODULE: [("get", "i < arr.len()", PanicKind.BOUNDS_CHECK)],
		"checks": [("checks::fail", EXPLICIT_PANIC_ASSERTION, PanicKind.EXPLICIT_PANIC)],
	}


def test_custom_root_module_and_abort_paths() -> None:
	src = """
fn stop() -> ! {
    let mut _0: !;

    bb0: {
        _0 = my::halt() -> unwind continue;
    }
}
"""
	options = HintOptions(abort_paths=frozenset({"my::halt"}), root_module="crate")
	hints = generate_hints(parse_mir(src), options=options)
	assert _summary(hints) == {"crate": [("stop", EXPLICIT_PANIC_ASSERTION, PanicKind.EXPLICIT_PANIC)]}


def test_missing_body_is_a_contract_violation() -> None:
	class _LyingProgram:
		def __init__(self, inner):
			self._inner = inner

		def functions(self):
			yield FnDef(name="ghost", has_body=True)

		def body_of(self, name):
			raise KeyError(name)

		def type_query(self):
			return self._inner.type_query()

	table, types = make_types()
	with pytest.raises(ProgramContractError) as info:
		generate_hints(_LyingProgram(program_of(types, {})))
	assert info.value.function == "ghost"


def test_mir_program_reports_contract_violation_for_declarations() -> None:
	table, types = make_types()
	program = program_of(types, {"decl": None})
	with pytest.raises(ProgramContractError):
		program.body_of("decl")
	with pytest.raises(ValueError):
		program.add("decl", None)


def test_module_paths() -> None:
	assert module_path_of("a::b::f") == "a::b"
	assert module_path_of("f") == ROOT_MODULE
	assert module_path_of("f", root="crate") == "crate"
	assert short_name_of("a::b::f") == "f"
	assert short_name_of("f") == "f"


def test_hint_to_json_shape() -> None:
	hint = Hint(function="m::f", assertion="b == 0", kind=PanicKind.DIVISION_BY_ZERO)
	assert hint.to_json() == {
		"function": "m::f",
		"assertion": "b == 0",
		"kind": "DivisionByZero",
		"file": None,
		"line": None,
		"column": None,
	}
