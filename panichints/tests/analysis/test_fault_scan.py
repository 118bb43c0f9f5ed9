# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Fault-site scanner tests.
"""

from __future__ import annotations

from panichints.analysis.fault_scan import FaultSiteScanner
from panichints.hint import PanicKind
from panichints.mir.mir_nodes import (
	Assert,
	BoundsCheck,
	Call,
	Constant,
	DivisionByZero,
	FnRef,
	Goto,
	OtherAssert,
	Overflow,
	Place,
	RemainderByZero,
	Return,
	SwitchInt,
)
from panichints.test_support import block, body, const, copy, make_types, move


def _call(path: str) -> Call:
	return Call(dest=Place(slot="_0"), func=Constant(value=FnRef(path)), target=None)


def test_bodyless_function_has_no_sites() -> None:
	table, types = make_types()
	assert FaultSiteScanner(types).scan("Trait::method", None) == []


def test_assert_kinds_are_recorded_with_guard() -> None:
	table, types = make_types()
	fn = body(
		block("bb0", term=Assert(cond=move("_3"), expected=False, msg=DivisionByZero(copy("_1")), target="bb1")),
		block("bb1", term=Assert(cond=move("_4"), expected=False, msg=RemainderByZero(copy("_1")), target="bb2")),
		block("bb2", term=Assert(cond=move("_5"), expected=True, msg=BoundsCheck(len=const(4), index=copy("_2")), target="bb3")),
		block("bb3", term=Return()),
	)
	records = FaultSiteScanner(types).scan("m::f", fn)

	assert [r.kind for r in records] == [
		PanicKind.DIVISION_BY_ZERO,
		PanicKind.REMAINDER_BY_ZERO,
		PanicKind.BOUNDS_CHECK,
	]
	assert [r.block for r in records] == ["bb0", "bb1", "bb2"]
	assert records[2].guard == move("_5")
	assert all(r.function == "m::f" for r in records)


def test_other_terminators_and_asserts_are_ignored() -> None:
	table, types = make_types()
	fn = body(
		block("bb0", term=Assert(cond=move("_3"), expected=False, msg=Overflow(op="+"), target="bb1")),
		block("bb1", term=Assert(cond=move("_4"), expected=True, msg=OtherAssert("custom"), target="bb2")),
		block("bb2", term=SwitchInt(discr=copy("_1"), targets=(("0", "bb3"),))),
		block("bb3", term=_call("util::helper")),
		block("bb4", term=Goto(target="bb5")),
		block("bb5"),
	)
	assert FaultSiteScanner(types).scan("f", fn) == []


def test_constant_condition_asserts_are_not_sites() -> None:
	table, types = make_types()
	fn = body(block("bb0", term=Assert(cond=const(True), expected=True, msg=BoundsCheck(len=const(4), index=const(1)))))
	assert FaultSiteScanner(types).scan("f", fn) == []


def test_panic_primitives_and_aborts_are_explicit_panics() -> None:
	table, types = make_types()
	fn = body(
		block("bb0", term=_call("core::panicking::panic")),
		block("bb1", term=_call("std::process::abort")),
		block("bb2", term=_call("my::shutdown")),
	)

	records = FaultSiteScanner(types).scan("f", fn)
	assert [(r.kind, r.block, r.guard) for r in records] == [
		(PanicKind.EXPLICIT_PANIC, "bb0", None),
		(PanicKind.EXPLICIT_PANIC, "bb1", None),
	]

	scanner = FaultSiteScanner(types, abort_paths=["my::shutdown"])
	assert [r.block for r in scanner.scan("f", fn)] == ["bb0", "bb2"]
	assert scanner.is_panic_entry("core::panicking::panic")
	assert not scanner.is_panic_entry("std::process::abort")
