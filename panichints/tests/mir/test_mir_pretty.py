# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from panichints.hint_generation import generate_hints
from panichints.mir.mir_nodes import ConstantIndex, Downcast, Place, UnsupportedRv
from panichints.mir.parser import parse_mir
from panichints.mir.pretty import MirPrinter, write_mir_pretty
from panichints.test_support import DIVIDE_MIR, RING_MIR, make_types


def test_pretty_prints_rustc_shaped_text() -> None:
	program = parse_mir(DIVIDE_MIR)
	text = write_mir_pretty("divide", program.body_of("divide"), program.type_query())

	assert text.startswith("fn divide(_1: i32, _2: i32) -> i32 {\n")
	assert "    debug b => _2;\n" in text
	assert "    let mut _3: bool;\n" in text
	assert "        _3 = Eq(copy _2, const 0_i32);\n" in text
	assert '        assert(!move _3, "attempt to divide `{}` by zero", copy _1) -> bb1;\n' in text
	assert "        _0 = Div(copy _1, copy _2);\n" in text
	assert text.endswith("}\n")


def test_pretty_output_parses_back_to_the_same_hints() -> None:
	program = parse_mir(RING_MIR)
	types = program.type_query()
	text = write_mir_pretty("ring::peek", program.body_of("ring::peek"), types)
	assert "_3 = copy ((*_1).1: usize);" in text

	reparsed = parse_mir("struct RingBuffer { data: [u32; 8], head: usize, tail: usize }\n" + text)
	first = generate_hints(program)["ring"]
	second = generate_hints(reparsed)["ring"]
	assert [(h.assertion, h.kind) for h in first] == [(h.assertion, h.kind) for h in second]


def test_bodyless_declaration_and_unmodelled_pieces() -> None:
	table, types = make_types()
	printer = MirPrinter(types)

	assert write_mir_pretty("Trait::m", None, types) == "fn Trait::m();\n"
	assert printer.rvalue(UnsupportedRv(kind="Cast", text="IntToInt")) == "<Cast: IntToInt>"
	assert printer.place(Place(slot="_1", projection=(ConstantIndex(offset=1, min_length=3),))) == "_1[1 of 3]"
	assert printer.place(Place(slot="_2", projection=(Downcast(variant="Ok"),))) == "(_2 as Ok)"


def test_cleanup_blocks_and_operand_calls_print_back() -> None:
	src = DIVIDE_MIR.replace("    let mut _3: bool;\n", "    let mut _3: bool;\n    let _4: fn(i32) -> i32;\n").replace(
		"        _0 = Div(copy _1, copy _2);\n        return;\n",
		"        _0 = move _4(copy _1) -> [return: bb2, unwind: bb3];\n    }\n\n"
		"    bb2: {\n        return;\n    }\n\n    bb3 (cleanup): {\n        resume;\n",
	)
	program = parse_mir(src)
	text = write_mir_pretty("divide", program.body_of("divide"), program.type_query())

	assert "    let mut _4: fn(i32) -> i32;\n" in text
	assert "        _0 = move _4(copy _1) -> bb2;\n" in text
	assert "    bb3 (cleanup): {\n        resume;\n    }\n" in text
	reprinted = generate_hints(parse_mir(text))
	assert [h.assertion for hs in reprinted.values() for h in hs] == ["b == 0"]
