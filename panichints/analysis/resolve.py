# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Guard resolution: render the value held by a slot as a readable expression.

Fault sites reference their guard through a slot (`assert(move _5, ...)`).
The slot itself means nothing to a reader, so the resolver walks backward in
the same basic block to the statement that last assigned it and renders that
statement's rvalue, recursing into operands:

	_4 = PtrMetadata(copy _2);   // _2 is debug-named `arr`
	_5 = Lt(copy _1, copy _4);   // _1 is debug-named `i`
	assert(move _5, ...)         // -> "i < arr.len()"

Rules:
  - a debug-named slot always renders as its name, even if it is also
    assigned in the block;
  - only the block containing the fault site is searched, and operands of the
    statement at index k are looked up strictly before k, so recursion is
    bounded by the block length;
  - anything outside the modelled subset raises a ResolutionError subclass.
"""

from __future__ import annotations

from typing import Optional, Tuple

from panichints.analysis.errors import (
	NoDefinition,
	TypeMismatch,
	UnsupportedConstant,
	UnsupportedExpression,
	UnsupportedOperator,
)
from panichints.analysis.projections import DEFAULT_POLICY, ProjectionRenderer, RenderPolicy, place_type
from panichints.mir.mir_nodes import (
	Assign,
	BasicBlock,
	BinaryOpRv,
	BinOp,
	Constant,
	CopyForDerefRv,
	MirBody,
	Operand,
	Place,
	RawPtrRv,
	RefRv,
	Rvalue,
	Slot,
	UnaryOpRv,
	UnOp,
	UnsupportedRv,
	UseRv,
	operand_place,
)
from panichints.types_protocol import TypeQuery


BINOP_SYMBOLS = {
	BinOp.EQ: "==",
	BinOp.LT: "<",
	BinOp.LE: "<=",
}


def find_assignment(block: BasicBlock, slot: Slot, *, before: Optional[int] = None) -> Optional[Tuple[int, Assign]]:
	"""
	Return `(index, statement)` of the last whole-slot assignment to `slot`
	among `block.statements[:before]`, or None.

	Assignments into a projection of the slot (`(_1.0: T) = ...`) do not
	define the slot and are skipped.
	"""
	stop = len(block.statements) if before is None else min(before, len(block.statements))
	for idx in range(stop - 1, -1, -1):
		stmt = block.statements[idx]
		if isinstance(stmt, Assign) and stmt.dest.slot == slot and stmt.dest.is_bare():
			return idx, stmt
	return None


def render_constant(const: Constant) -> str:
	"""Render a scalar-integer constant; bools render as their scalar value."""
	value = const.value
	if isinstance(value, bool):
		return "1" if value else "0"
	if isinstance(value, int):
		return str(value)
	raise UnsupportedConstant(f"cannot render constant {value!r} as a scalar integer")


class ValueResolver:
	"""Resolve slots of one function body to readable expressions."""

	def __init__(self, body: MirBody, types: TypeQuery, policy: RenderPolicy = DEFAULT_POLICY) -> None:
		self._body = body
		self._types = types
		self._policy = policy
		self._projections = ProjectionRenderer(body, types, policy)

	def resolve(self, block: BasicBlock, slot: Slot, *, before: Optional[int] = None) -> str:
		"""Render the value of `slot` as seen at position `before` of `block`."""
		name = self._body.debug_names.get(slot)
		if name is not None:
			return name
		found = find_assignment(block, slot, before=before)
		if found is None:
			raise NoDefinition(f"{slot} is not named and not assigned earlier in {block.name}", slot=slot)
		idx, stmt = found
		return self._render_rvalue(block, idx, slot, stmt.value)

	def render_place(self, block: BasicBlock, place: Place, *, before: Optional[int] = None) -> str:
		base = self.resolve(block, place.slot, before=before)
		return self._projections.render_projections(base, place)

	def render_operand(self, block: BasicBlock, op: Operand, *, before: Optional[int] = None) -> str:
		if isinstance(op, Constant):
			return render_constant(op)
		place = operand_place(op)
		if place is None:
			raise UnsupportedExpression(f"cannot render operand {op!r}")
		return self.render_place(block, place, before=before)

	def _render_rvalue(self, block: BasicBlock, idx: int, slot: Slot, rv: Rvalue) -> str:
		if isinstance(rv, BinaryOpRv):
			symbol = BINOP_SYMBOLS.get(rv.op)
			if symbol is None:
				raise UnsupportedOperator(f"{slot} = {rv.op.name}(..): operator has no rendering", slot=slot)
			left = self.render_operand(block, rv.left, before=idx)
			right = self.render_operand(block, rv.right, before=idx)
			return f"{left} {symbol} {right}"
		if isinstance(rv, UnaryOpRv):
			if rv.op is not UnOp.PTR_METADATA:
				raise UnsupportedOperator(f"{slot} = {rv.op.name}(..): operator has no rendering", slot=slot)
			self._expect_sequence(slot, rv.operand)
			return f"{self.render_operand(block, rv.operand, before=idx)}.len()"
		if isinstance(rv, (CopyForDerefRv, RefRv)):
			return self._policy.ref_prefix + self.render_place(block, rv.place, before=idx)
		if isinstance(rv, RawPtrRv):
			return self._policy.raw_ptr_prefix + self.render_place(block, rv.place, before=idx)
		if isinstance(rv, UseRv):
			return self.render_operand(block, rv.operand, before=idx)
		if isinstance(rv, UnsupportedRv):
			raise UnsupportedExpression(f"{slot} = <{rv.kind}>: rvalue kind is not modelled", slot=slot)
		raise UnsupportedExpression(f"{slot} = {type(rv).__name__}: rvalue kind is not modelled", slot=slot)

	def _expect_sequence(self, slot: Slot, op: Operand) -> None:
		if isinstance(op, Constant):
			ty = op.ty
		else:
			place = operand_place(op)
			ty = place_type(self._body, self._types, place) if place is not None else None
		if ty is None or not self._types.is_sequence_shaped(ty):
			shown = "an untyped value" if ty is None else f"`{self._types.display(ty)}`"
			raise TypeMismatch(f"{slot} takes the length of {shown}, which is not an array or slice", slot=slot)


__all__ = ["ValueResolver", "find_assignment", "render_constant", "BINOP_SYMBOLS"]
