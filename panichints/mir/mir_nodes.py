# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Mid-level Intermediate Representation (MIR) as seen by the hint passes.

This mirrors the shape of a compiler MIR after borrow checking:
- Function bodies are ordered basic blocks.
- Blocks hold statements (mostly `slot = rvalue` assignments) and end in one
  terminator.
- Values live in numbered slots (`_0`, `_1`, ...); places are a slot plus a
  chain of projections (deref, field, index, ...).

The rvalue algebra is closed: anything the passes do not model is spelled as
`UnsupportedRv`, so a new rvalue shape is always an explicit addition here.
There are **no semantics** baked in; it is just a typed tree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Optional, Tuple, Union

from panichints.core.span import Span
from panichints.core.types_core import TypeId


Slot = str     # "_3"
BlockId = str  # "bb0"


# Places and projections

class ProjectionElem:
	"""Base class for place projection elements."""
	pass


@dataclass(frozen=True)
class Deref(ProjectionElem):
	"""`(*place)`"""
	pass


@dataclass(frozen=True)
class Field(ProjectionElem):
	"""`(place.index: ty)`; `ty` is the type of the selected field when known."""
	index: int
	ty: Optional[TypeId] = None


@dataclass(frozen=True)
class Index(ProjectionElem):
	"""`place[slot]`"""
	index: Slot


@dataclass(frozen=True)
class ConstantIndex(ProjectionElem):
	"""`place[offset of min_length]`"""
	offset: int
	min_length: int


@dataclass(frozen=True)
class Downcast(ProjectionElem):
	"""`(place as Variant)`"""
	variant: str


@dataclass(frozen=True)
class Place:
	"""A slot plus the projections applied to it, innermost first."""
	slot: Slot
	projection: Tuple[ProjectionElem, ...] = ()

	def is_bare(self) -> bool:
		return not self.projection


# Operands

@dataclass(frozen=True)
class FnRef:
	"""A function item used as a value (call targets)."""
	path: str


ConstValue = Union[int, bool, str, FnRef, None]  # None is the unit value `()`


class Operand:
	"""Base class for rvalue operands."""
	pass


@dataclass(frozen=True)
class Copy(Operand):
	place: Place


@dataclass(frozen=True)
class Move(Operand):
	place: Place


@dataclass(frozen=True)
class Constant(Operand):
	value: ConstValue
	ty: Optional[TypeId] = None


def operand_place(op: Operand) -> Optional[Place]:
	"""Return the place read by `op`, or None for constants."""
	if isinstance(op, (Copy, Move)):
		return op.place
	return None


# Operators

class BinOp(Enum):
	ADD = auto()
	SUB = auto()
	MUL = auto()
	DIV = auto()
	REM = auto()
	BIT_AND = auto()
	BIT_OR = auto()
	BIT_XOR = auto()
	SHL = auto()
	SHR = auto()
	EQ = auto()
	NE = auto()
	LT = auto()
	LE = auto()
	GT = auto()
	GE = auto()
	CMP = auto()
	OFFSET = auto()
	ADD_WITH_OVERFLOW = auto()
	SUB_WITH_OVERFLOW = auto()
	MUL_WITH_OVERFLOW = auto()


class UnOp(Enum):
	NOT = auto()
	NEG = auto()
	PTR_METADATA = auto()  # length of a slice / metadata of a fat pointer


# MIR spelling of each operator (`Eq(copy _1, const 0_i32)`).
BINOP_NAMES: Dict[str, BinOp] = {
	"Add": BinOp.ADD,
	"Sub": BinOp.SUB,
	"Mul": BinOp.MUL,
	"Div": BinOp.DIV,
	"Rem": BinOp.REM,
	"BitAnd": BinOp.BIT_AND,
	"BitOr": BinOp.BIT_OR,
	"BitXor": BinOp.BIT_XOR,
	"Shl": BinOp.SHL,
	"Shr": BinOp.SHR,
	"Eq": BinOp.EQ,
	"Ne": BinOp.NE,
	"Lt": BinOp.LT,
	"Le": BinOp.LE,
	"Gt": BinOp.GT,
	"Ge": BinOp.GE,
	"Cmp": BinOp.CMP,
	"Offset": BinOp.OFFSET,
	"AddWithOverflow": BinOp.ADD_WITH_OVERFLOW,
	"SubWithOverflow": BinOp.SUB_WITH_OVERFLOW,
	"MulWithOverflow": BinOp.MUL_WITH_OVERFLOW,
}

UNOP_NAMES: Dict[str, UnOp] = {
	"Not": UnOp.NOT,
	"Neg": UnOp.NEG,
	"PtrMetadata": UnOp.PTR_METADATA,
}


# Rvalues

class Rvalue:
	"""Base class for the right-hand side of an assignment."""
	pass


@dataclass(frozen=True)
class BinaryOpRv(Rvalue):
	op: BinOp
	left: Operand
	right: Operand


@dataclass(frozen=True)
class UnaryOpRv(Rvalue):
	op: UnOp
	operand: Operand


@dataclass(frozen=True)
class RefRv(Rvalue):
	"""`&place` / `&mut place`"""
	place: Place
	mutable: bool = False


@dataclass(frozen=True)
class CopyForDerefRv(Rvalue):
	"""`CopyForDeref(place)`"""
	place: Place


@dataclass(frozen=True)
class RawPtrRv(Rvalue):
	"""`&raw const place` / `&raw mut place`"""
	place: Place
	mutable: bool = False


@dataclass(frozen=True)
class UseRv(Rvalue):
	"""Plain use of an operand (`copy _1`, `const 5_usize`)."""
	operand: Operand


@dataclass(frozen=True)
class UnsupportedRv(Rvalue):
	"""Any rvalue shape the hint passes do not model (casts, aggregates, ...)."""
	kind: str
	text: str = ""


# Statements

class Statement:
	"""Base class for MIR statements (non-terminators)."""
	pass


@dataclass(frozen=True)
class Assign(Statement):
	"""dest = value"""
	dest: Place
	value: Rvalue
	span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class StorageLive(Statement):
	slot: Slot
	span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class StorageDead(Statement):
	slot: Slot
	span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class Nop(Statement):
	span: Span = field(default_factory=Span)


# Assert messages

class AssertMessage:
	"""Base class for the structured failure tag of an `assert` terminator."""
	pass


@dataclass(frozen=True)
class BoundsCheck(AssertMessage):
	len: Operand
	index: Operand


@dataclass(frozen=True)
class DivisionByZero(AssertMessage):
	operand: Operand


@dataclass(frozen=True)
class RemainderByZero(AssertMessage):
	operand: Operand


@dataclass(frozen=True)
class Overflow(AssertMessage):
	op: str
	left: Optional[Operand] = None
	right: Optional[Operand] = None


@dataclass(frozen=True)
class OverflowNeg(AssertMessage):
	operand: Optional[Operand] = None


@dataclass(frozen=True)
class MisalignedPointerDereference(AssertMessage):
	required: Optional[Operand] = None
	found: Optional[Operand] = None


@dataclass(frozen=True)
class NullPointerDereference(AssertMessage):
	pass


@dataclass(frozen=True)
class OtherAssert(AssertMessage):
	"""Assert message we have no structured form for; keeps the raw text."""
	message: str


# Terminators

class Terminator:
	"""Base class for MIR terminators (end of a basic block)."""
	pass


@dataclass(frozen=True)
class Goto(Terminator):
	target: BlockId
	span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class Return(Terminator):
	span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class Unreachable(Terminator):
	span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class UnwindResume(Terminator):
	"""`resume;`: continue unwinding out of a cleanup block."""
	span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class SwitchInt(Terminator):
	discr: Operand
	targets: Tuple[Tuple[str, BlockId], ...] = ()
	span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class Drop(Terminator):
	place: Place
	target: Optional[BlockId] = None
	span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class Assert(Terminator):
	"""`assert([!]cond, msg) -> target`: fault unless `cond == expected`."""
	cond: Operand
	expected: bool
	msg: AssertMessage
	target: Optional[BlockId] = None
	span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class Call(Terminator):
	"""`dest = func(args) -> target`"""
	dest: Place
	func: Operand
	args: Tuple[Operand, ...] = ()
	target: Optional[BlockId] = None
	span: Span = field(default_factory=Span)

	def callee_path(self) -> Optional[str]:
		"""Fully qualified path of a statically known callee."""
		if isinstance(self.func, Constant) and isinstance(self.func.value, FnRef):
			return self.func.value.path
		return None


# Containers

@dataclass
class BasicBlock:
	"""
	Basic block: a list of statements followed by a single terminator.

	No control flow leaves this block except via the terminator.
	Cleanup blocks (`bbN (cleanup)`) only run while unwinding.
	"""
	name: BlockId
	statements: List[Statement] = field(default_factory=list)
	terminator: Optional[Terminator] = None
	is_cleanup: bool = False


@dataclass
class MirBody:
	"""
	MIR function body: ordered blocks plus the side tables the passes consult.

	`debug_names` maps slots to user-visible variable names; `slot_types` maps
	slots to their static TypeIds. `arg_count` slots after `_0` are parameters.
	"""
	blocks: List[BasicBlock] = field(default_factory=list)
	debug_names: Dict[Slot, str] = field(default_factory=dict)
	slot_types: Dict[Slot, TypeId] = field(default_factory=dict)
	arg_count: int = 0
	return_type: Optional[TypeId] = None
	span: Span = field(default_factory=Span)

	def block(self, name: BlockId) -> BasicBlock:
		for bb in self.blocks:
			if bb.name == name:
				return bb
		raise KeyError(name)


__all__ = [
	"Slot", "BlockId",
	"ProjectionElem", "Deref", "Field", "Index", "ConstantIndex", "Downcast", "Place",
	"FnRef", "ConstValue", "Operand", "Copy", "Move", "Constant", "operand_place",
	"BinOp", "UnOp", "BINOP_NAMES", "UNOP_NAMES",
	"Rvalue", "BinaryOpRv", "UnaryOpRv", "RefRv", "CopyForDerefRv", "RawPtrRv", "UseRv", "UnsupportedRv",
	"Statement", "Assign", "StorageLive", "StorageDead", "Nop",
	"AssertMessage", "BoundsCheck", "DivisionByZero", "RemainderByZero", "Overflow", "OverflowNeg",
	"MisalignedPointerDereference", "NullPointerDereference", "OtherAssert",
	"Terminator", "Goto", "Return", "Unreachable", "UnwindResume", "SwitchInt", "Drop", "Assert", "Call",
	"BasicBlock", "MirBody",
]
