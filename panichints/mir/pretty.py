# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
MIR pretty-printer.

Renders a MirBody in the same textual shape the front-end reads, which is
what `--dump-mir` prints. Rvalues the passes do not model are shown as
`<Kind: detail>` and do not parse back.
"""

from __future__ import annotations

import re
from typing import List, Optional

from panichints.mir.mir_nodes import (
	BINOP_NAMES,
	UNOP_NAMES,
	Assert,
	AssertMessage,
	Assign,
	BinaryOpRv,
	BoundsCheck,
	Call,
	Constant,
	ConstantIndex,
	CopyForDerefRv,
	Copy,
	Deref,
	DivisionByZero,
	Downcast,
	Drop,
	Field,
	FnRef,
	Goto,
	Index,
	MirBody,
	MisalignedPointerDereference,
	Move,
	Nop,
	NullPointerDereference,
	Operand,
	OtherAssert,
	Overflow,
	OverflowNeg,
	Place,
	RawPtrRv,
	RefRv,
	RemainderByZero,
	Return,
	Rvalue,
	Statement,
	StorageDead,
	StorageLive,
	SwitchInt,
	Terminator,
	UnaryOpRv,
	Unreachable,
	UnwindResume,
	UnsupportedRv,
	UseRv,
)
from panichints.types_protocol import TypeQuery

_BINOP_SPELLING = {op: name for name, op in BINOP_NAMES.items()}
_UNOP_SPELLING = {op: name for name, op in UNOP_NAMES.items()}
_INT_TYPE = re.compile(r"^[iu](8|16|32|64|128|size)$")

_INDENT = "    "


def _slot_key(slot: str) -> int:
	return int(slot[1:]) if slot[1:].isdigit() else 1 << 30


class MirPrinter:
	"""Render one function body; types are spelled through the TypeQuery."""

	def __init__(self, types: TypeQuery) -> None:
		self._types = types

	def function(self, name: str, body: Optional[MirBody]) -> str:
		if body is None:
			return f"fn {name}();\n"
		params = [f"_{i}" for i in range(1, body.arg_count + 1)]
		sig = ", ".join(f"{p}: {self._ty(body.slot_types.get(p))}" for p in params)
		ret = f" -> {self._ty(body.return_type)}" if body.return_type is not None else ""
		lines: List[str] = [f"fn {name}({sig}){ret} {{"]
		for slot in sorted(body.debug_names, key=_slot_key):
			lines.append(f"{_INDENT}debug {body.debug_names[slot]} => {slot};")
		for slot in sorted(body.slot_types, key=_slot_key):
			if slot in params:
				continue
			lines.append(f"{_INDENT}let mut {slot}: {self._ty(body.slot_types[slot])};")
		for block in body.blocks:
			lines.append("")
			mark = " (cleanup)" if block.is_cleanup else ""
			lines.append(f"{_INDENT}{block.name}{mark}: {{")
			for stmt in block.statements:
				lines.append(f"{_INDENT * 2}{self.statement(stmt)}")
			if block.terminator is not None:
				lines.append(f"{_INDENT * 2}{self.terminator(block.terminator)}")
			lines.append(f"{_INDENT}}}")
		lines.append("}")
		return "\n".join(lines) + "\n"

	def statement(self, stmt: Statement) -> str:
		if isinstance(stmt, Assign):
			return f"{self.place(stmt.dest)} = {self.rvalue(stmt.value)};"
		if isinstance(stmt, StorageLive):
			return f"StorageLive({stmt.slot});"
		if isinstance(stmt, StorageDead):
			return f"StorageDead({stmt.slot});"
		if isinstance(stmt, Nop):
			return "nop;"
		return f"<{type(stmt).__name__}>;"

	def terminator(self, term: Terminator) -> str:
		if isinstance(term, Goto):
			return f"goto -> {term.target};"
		if isinstance(term, Return):
			return "return;"
		if isinstance(term, Unreachable):
			return "unreachable;"
		if isinstance(term, UnwindResume):
			return "resume;"
		if isinstance(term, SwitchInt):
			arms = ", ".join(f"{label}: {bb}" for label, bb in term.targets)
			return f"switchInt({self.operand(term.discr)}) -> [{arms}];"
		if isinstance(term, Drop):
			return f"drop({self.place(term.place)}) -> {self._target(term.target)};"
		if isinstance(term, Assert):
			bang = "" if term.expected else "!"
			text, args = self._assert_message(term.msg)
			rendered_args = "".join(f", {self.operand(a)}" for a in args)
			return f"assert({bang}{self.operand(term.cond)}, \"{text}\"{rendered_args}) -> {self._target(term.target)};"
		if isinstance(term, Call):
			args = ", ".join(self.operand(a) for a in term.args)
			path = term.callee_path()
			callee = path if path is not None else self.operand(term.func)
			return f"{self.place(term.dest)} = {callee}({args}) -> {self._target(term.target)};"
		return f"<{type(term).__name__}>;"

	def rvalue(self, rv: Rvalue) -> str:
		if isinstance(rv, BinaryOpRv):
			return f"{_BINOP_SPELLING[rv.op]}({self.operand(rv.left)}, {self.operand(rv.right)})"
		if isinstance(rv, UnaryOpRv):
			return f"{_UNOP_SPELLING[rv.op]}({self.operand(rv.operand)})"
		if isinstance(rv, RefRv):
			return ("&mut " if rv.mutable else "&") + self.place(rv.place)
		if isinstance(rv, RawPtrRv):
			return ("&raw mut " if rv.mutable else "&raw const ") + self.place(rv.place)
		if isinstance(rv, CopyForDerefRv):
			return f"CopyForDeref({self.place(rv.place)})"
		if isinstance(rv, UseRv):
			return self.operand(rv.operand)
		if isinstance(rv, UnsupportedRv):
			return f"<{rv.kind}: {rv.text}>" if rv.text else f"<{rv.kind}>"
		return f"<{type(rv).__name__}>"

	def operand(self, op: Operand) -> str:
		if isinstance(op, Copy):
			return f"copy {self.place(op.place)}"
		if isinstance(op, Move):
			return f"move {self.place(op.place)}"
		if isinstance(op, Constant):
			return f"const {self.constant(op)}"
		return f"<{type(op).__name__}>"

	def constant(self, const: Constant) -> str:
		value = const.value
		if isinstance(value, bool):
			return "true" if value else "false"
		if isinstance(value, int):
			suffix = self._ty(const.ty) if const.ty is not None else ""
			return f"{value}_{suffix}" if _INT_TYPE.match(suffix) else str(value)
		if isinstance(value, str):
			escaped = value.replace("\\", "\\\\").replace('"', '\\"')
			return f"\"{escaped}\""
		if isinstance(value, FnRef):
			return value.path
		return "()"

	def place(self, place: Place) -> str:
		text = place.slot
		for elem in place.projection:
			if isinstance(elem, Deref):
				text = f"(*{text})"
			elif isinstance(elem, Field):
				ty = f": {self._ty(elem.ty)}" if elem.ty is not None else ""
				text = f"({text}.{elem.index}{ty})"
			elif isinstance(elem, Index):
				text = f"{text}[{elem.index}]"
			elif isinstance(elem, ConstantIndex):
				text = f"{text}[{elem.offset} of {elem.min_length}]"
			elif isinstance(elem, Downcast):
				text = f"({text} as {elem.variant})"
		return text

	def _assert_message(self, msg: AssertMessage) -> tuple[str, List[Operand]]:
		if isinstance(msg, BoundsCheck):
			return "index out of bounds: the length is {} but the index is {}", [msg.len, msg.index]
		if isinstance(msg, DivisionByZero):
			return "attempt to divide `{}` by zero", [msg.operand]
		if isinstance(msg, RemainderByZero):
			return "attempt to calculate the remainder of `{}` with a divisor of zero", [msg.operand]
		if isinstance(msg, Overflow):
			args = [a for a in (msg.left, msg.right) if a is not None]
			return f"attempt to compute `{{}} {msg.op} {{}}`, which would overflow", args
		if isinstance(msg, OverflowNeg):
			return "attempt to negate `{}`, which would overflow", [msg.operand] if msg.operand is not None else []
		if isinstance(msg, MisalignedPointerDereference):
			args = [a for a in (msg.required, msg.found) if a is not None]
			return "misaligned pointer dereference: address must be a multiple of {} but is {}", args
		if isinstance(msg, NullPointerDereference):
			return "null pointer dereference occurred", []
		if isinstance(msg, OtherAssert):
			return msg.message.replace('"', '\\"'), []
		return type(msg).__name__, []

	def _target(self, target: Optional[str]) -> str:
		return target if target is not None else "unwind continue"

	def _ty(self, ty: Optional[object]) -> str:
		if ty is None:
			return "_"
		return self._types.display(ty)


def write_mir_pretty(name: str, body: Optional[MirBody], types: TypeQuery) -> str:
	"""Render `body` (or a bodyless declaration) as textual MIR."""
	return MirPrinter(types).function(name, body)


__all__ = ["MirPrinter", "write_mir_pretty"]
