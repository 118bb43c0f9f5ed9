# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Textual MIR front-end.

Parses MIR dumps in the shape rustc prints them (`fn f(_1: i32) -> i32 { ... }`,
`bb0: { _3 = Eq(copy _2, const 0_i32); assert(!move _3, "...") -> bb1; }`)
into a `MirProgram`. The grammar lives next to this file in `mir.lark`; the
builder below turns lark trees into `mir_nodes` objects and registers every
type it meets in a `TypeTable`.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from lark import Lark, Token, Tree
from lark.exceptions import LarkError, UnexpectedInput

from panichints.core.span import Span
from panichints.core.types_core import PRIMITIVE_SCALARS, TypeId, TypeTable
from panichints.mir.mir_nodes import (
	BINOP_NAMES,
	UNOP_NAMES,
	Assert,
	AssertMessage,
	Assign,
	BasicBlock,
	BinaryOpRv,
	BoundsCheck,
	Call,
	Constant,
	ConstantIndex,
	Copy,
	CopyForDerefRv,
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
	UnOp,
	Unreachable,
	UnwindResume,
	UnsupportedRv,
	UseRv,
)
from panichints.program import MirProgram
from panichints.types_query_impl import TableTypeQuery

_GRAMMAR_PATH = Path(__file__).with_name("mir.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="contextual",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
)

_INT_SUFFIX = re.compile(r"^(-?[0-9]+)_([iu](?:8|16|32|64|128|size))$")
_OVERFLOW_OP = re.compile(r"`\{\} (\S+) \{\}`")


class MirParseError(ValueError):
	"""
	Error raised for malformed textual MIR.

	Carries a best-effort `span` so the driver can report `file:line:col`
	instead of a raw traceback.
	"""

	def __init__(self, message: str, *, span: Span | None = None) -> None:
		super().__init__(message)
		self.span = span if span is not None else Span()


def parse_mir(source: str, *, file: Optional[str] = None, panic_primitives: Iterable[str] | None = None) -> MirProgram:
	"""Parse textual MIR into a MirProgram (bodies in source order)."""
	try:
		tree = _PARSER.parse(source)
	except UnexpectedInput as exc:
		first_line = str(exc).strip().splitlines()[0] if str(exc).strip() else "syntax error"
		raise MirParseError(
			first_line,
			span=Span(file=file, line=getattr(exc, "line", None), column=getattr(exc, "column", None)),
		) from exc
	except LarkError as exc:
		raise MirParseError(str(exc), span=Span(file=file)) from exc
	return _Builder(file, panic_primitives).build(tree)


def parse_mir_file(path: Path, *, panic_primitives: Iterable[str] | None = None) -> MirProgram:
	return parse_mir(path.read_text(encoding="utf-8"), file=str(path), panic_primitives=panic_primitives)


def _name(node: object) -> str:
	return node.data if isinstance(node, Tree) else ""


def _tokens(node: Tree, *types: str) -> List[Token]:
	return [c for c in node.children if isinstance(c, Token) and c.type in types]


def _trees(node: Tree) -> List[Tree]:
	return [c for c in node.children if isinstance(c, Tree)]


def _has_token(node: Tree, tok_type: str) -> bool:
	return bool(_tokens(node, tok_type))


def _string_value(tok: Token) -> str:
	return tok.value[1:-1].replace('\\"', '"').replace("\\\\", "\\")


class _Builder:
	"""Turn a parsed `start` tree into a MirProgram."""

	def __init__(self, file: Optional[str], panic_primitives: Iterable[str] | None) -> None:
		self._file = file
		self._table = TypeTable()
		self._program = MirProgram(types=TableTypeQuery(self._table, panic_primitives))
		# Per-function state, reset by _build_fn.
		self._slot_types: Dict[str, TypeId] = {}
		self._debug_names: Dict[str, str] = {}

	def build(self, tree: Tree) -> MirProgram:
		items = _trees(tree)
		structs = [it for it in items if _name(it) == "struct_def"]
		# Declare every struct first so fields may refer to any of them.
		for st in structs:
			self._table.declare_adt(self._path(_trees(st)[0]))
		for st in structs:
			self._define_struct(st)
		for it in items:
			if _name(it) in ("fn_def", "fn_decl"):
				self._build_fn(it)
		return self._program

	def _span(self, node: Tree | Token) -> Span:
		if isinstance(node, Token):
			return Span(file=self._file, line=node.line, column=node.column)
		return Span.from_loc(node.meta, file=self._file)

	# Items

	def _define_struct(self, node: Tree) -> None:
		children = _trees(node)
		name = self._path(children[0])
		adt = self._table.lookup_adt(name)
		if adt is None:
			raise MirParseError(f"struct `{name}` was not declared", span=self._span(node))
		fields: List[Tuple[str, TypeId]] = []
		seen = set()
		for decl in children[1:]:
			name_tok = _tokens(decl, "NAME")[0]
			if name_tok.value in seen:
				raise MirParseError(f"duplicate field `{name_tok.value}`", span=self._span(name_tok))
			seen.add(name_tok.value)
			fields.append((name_tok.value, self._type(_trees(decl)[0])))
		self._table.define_fields(adt, fields)

	def _build_fn(self, node: Tree) -> None:
		self._slot_types = {}
		self._debug_names = {}
		children = _trees(node)
		name = self._path(children[0])
		arg_count = 0
		return_type: Optional[TypeId] = None
		body_tree: Optional[Tree] = None
		for child in children[1:]:
			kind = _name(child)
			if kind == "params":
				for param in _trees(child):
					slot = _tokens(param, "SLOT")[0].value
					self._slot_types[slot] = self._type(_trees(param)[0])
					arg_count += 1
			elif kind == "ret_type":
				return_type = self._type(_trees(child)[0])
			elif kind == "fn_body":
				body_tree = child
		if return_type is not None:
			self._slot_types.setdefault("_0", return_type)
		if name in self._program.bodies:
			raise MirParseError(f"duplicate function `{name}`", span=self._span(node))
		if _name(node) == "fn_decl" or body_tree is None:
			self._program.add(name, None)
			return

		blocks: List[BasicBlock] = []
		for child in _trees(body_tree):
			if _name(child) == "bb":
				blocks.append(self._bb(child))
			else:
				self._decl(child)
		self._program.add(
			name,
			MirBody(
				blocks=blocks,
				debug_names=dict(self._debug_names),
				slot_types=dict(self._slot_types),
				arg_count=arg_count,
				return_type=return_type,
				span=self._span(node),
			),
		)

	def _decl(self, node: Tree) -> None:
		kind = _name(node)
		if kind == "debug_decl":
			var = _tokens(node, "NAME")[0].value
			value = _trees(node)[0]
			if _name(value) == "constant":
				return
			place = self._place(value)
			# Only a whole slot names a slot; `debug x => (*_1)` describes a
			# sub-place and must not rename `_1`.
			if place.is_bare():
				self._debug_names.setdefault(place.slot, var)
		elif kind == "let_decl":
			slot = _tokens(node, "SLOT")[0].value
			self._slot_types[slot] = self._type(_trees(node)[0])
		elif kind == "scope_decl":
			for child in _trees(node):
				self._decl(child)

	# Blocks

	def _bb(self, node: Tree) -> BasicBlock:
		name = _tokens(node, "BB")[0].value
		is_cleanup = any(_name(t) == "cleanup_mark" for t in _trees(node))
		lines = [t for t in _trees(node) if _name(t) != "cleanup_mark"]
		statements: List[Statement] = []
		terminator: Optional[Terminator] = None
		for idx, line in enumerate(lines):
			item = self._line(line)
			if isinstance(item, Terminator):
				if idx != len(lines) - 1:
					raise MirParseError(f"terminator must end block {name}", span=self._span(line))
				terminator = item
			else:
				statements.append(item)
		return BasicBlock(name=name, statements=statements, terminator=terminator, is_cleanup=is_cleanup)

	def _line(self, node: Tree) -> Statement | Terminator:
		kind = _name(node)
		span = self._span(node)
		if kind == "assign_line":
			return self._assign_or_call(node, span)
		if kind == "storage_live":
			return StorageLive(slot=_tokens(node, "SLOT")[0].value, span=span)
		if kind == "storage_dead":
			return StorageDead(slot=_tokens(node, "SLOT")[0].value, span=span)
		if kind == "nop":
			return Nop(span=span)
		if kind == "goto_term":
			return Goto(target=_tokens(node, "BB")[0].value, span=span)
		if kind == "return_term":
			return Return(span=span)
		if kind == "unreachable_term":
			return Unreachable(span=span)
		if kind == "resume_term":
			return UnwindResume(span=span)
		if kind == "assert_term":
			return self._assert(node, span)
		if kind == "switch_term":
			discr, targets = _trees(node)
			return SwitchInt(discr=self._operand(discr), targets=tuple(self._labeled_targets(targets)), span=span)
		if kind == "drop_term":
			place, targets = _trees(node)
			return Drop(place=self._place(place), target=self._success_target(targets), span=span)
		raise MirParseError(f"unexpected block item `{kind}`", span=span)

	def _assign_or_call(self, node: Tree, span: Span) -> Statement | Terminator:
		children = _trees(node)
		dest = self._place(children[0])
		rv_tree = children[1]
		targets = children[2] if len(children) > 2 else None
		if targets is None:
			return Assign(dest=dest, value=self._rvalue(rv_tree), span=span)
		kind = _name(rv_tree)
		if kind == "call_like":
			path_tree, *args = _trees(rv_tree)
			func: Operand = Constant(value=FnRef(self._path(path_tree)))
		elif kind == "operand_call":
			callee, *args = _trees(rv_tree)
			func = self._operand(callee)
		else:
			raise MirParseError("only calls may transfer control with `->`", span=span)
		return Call(
			dest=dest,
			func=func,
			args=tuple(self._as_operand(a) for a in args),
			target=self._success_target(targets),
			span=span,
		)

	def _assert(self, node: Tree, span: Span) -> Assert:
		negated = _has_token(node, "BANG")
		message = _string_value(_tokens(node, "STRING")[0])
		subtrees = _trees(node)
		cond = self._operand(subtrees[0])
		args = [self._operand(t) for t in subtrees[1:-1]]
		return Assert(
			cond=cond,
			expected=not negated,
			msg=self._assert_message(message, args, span),
			target=self._success_target(subtrees[-1]),
			span=span,
		)

	def _assert_message(self, text: str, args: List[Operand], span: Span) -> AssertMessage:
		def arg(i: int) -> Optional[Operand]:
			return args[i] if i < len(args) else None

		if text.startswith("index out of bounds"):
			if len(args) < 2:
				raise MirParseError("bounds check needs length and index operands", span=span)
			return BoundsCheck(len=args[0], index=args[1])
		if text.startswith("attempt to divide") and "by zero" in text:
			if not args:
				raise MirParseError("division check needs a dividend operand", span=span)
			return DivisionByZero(operand=args[0])
		if text.startswith("attempt to calculate the remainder") and "divisor of zero" in text:
			if not args:
				raise MirParseError("remainder check needs a dividend operand", span=span)
			return RemainderByZero(operand=args[0])
		if text.startswith("attempt to negate"):
			return OverflowNeg(operand=arg(0))
		if "overflow" in text:
			m = _OVERFLOW_OP.search(text)
			op = m.group(1) if m else text
			return Overflow(op=op, left=arg(0), right=arg(1))
		if text.startswith("misaligned pointer dereference"):
			return MisalignedPointerDereference(required=arg(0), found=arg(1))
		if text.startswith("null pointer dereference"):
			return NullPointerDereference()
		return OtherAssert(message=text)

	def _success_target(self, node: Tree) -> Optional[str]:
		kind = _name(node)
		if kind == "single_target":
			return _tokens(node, "BB")[0].value
		if kind == "target_list":
			for label, bb in self._labeled_targets(node):
				if label in ("success", "return"):
					return bb
		return None

	def _labeled_targets(self, node: Tree) -> List[Tuple[str, str]]:
		if _name(node) == "single_target":
			return [("otherwise", _tokens(node, "BB")[0].value)]
		out: List[Tuple[str, str]] = []
		for item in _trees(node):
			if _name(item) != "labeled_target":
				continue
			label_tree = _trees(item)[0]
			label = "".join(tok.value for tok in label_tree.children if isinstance(tok, Token))
			out.append((label, _tokens(item, "BB")[0].value))
		return out

	# Rvalues and operands

	def _rvalue(self, node: Tree) -> Rvalue:
		kind = _name(node)
		if kind == "use_rv":
			return UseRv(operand=self._operand(_trees(node)[0]))
		if kind == "ref_rv":
			return RefRv(place=self._place(_trees(node)[0]), mutable=_has_token(node, "MUT"))
		if kind == "raw_const_rv":
			return RawPtrRv(place=self._place(_trees(node)[0]), mutable=False)
		if kind == "raw_mut_rv":
			return RawPtrRv(place=self._place(_trees(node)[0]), mutable=True)
		if kind == "call_like":
			return self._named_rvalue(node)
		if kind == "operand_call":
			return UnsupportedRv(kind="Call", text=f"{len(_trees(node)) - 1} argument(s)")
		if kind == "cast_rv":
			return UnsupportedRv(kind="Cast", text=_tokens(node, "NAME")[0].value)
		if kind == "array_rv":
			return UnsupportedRv(kind="Aggregate", text="array")
		if kind == "tuple_rv":
			return UnsupportedRv(kind="Aggregate", text="tuple")
		raise MirParseError(f"unexpected rvalue `{kind}`", span=self._span(node))

	def _named_rvalue(self, node: Tree) -> Rvalue:
		"""`Eq(a, b)`, `PtrMetadata(a)`, `Len(place)`, `CopyForDeref(place)`, ..."""
		path_tree, *args = _trees(node)
		name = self._path(path_tree)
		if name in BINOP_NAMES and len(args) == 2:
			return BinaryOpRv(op=BINOP_NAMES[name], left=self._as_operand(args[0]), right=self._as_operand(args[1]))
		if name in UNOP_NAMES and len(args) == 1:
			return UnaryOpRv(op=UNOP_NAMES[name], operand=self._as_operand(args[0]))
		if name == "Len" and len(args) == 1:
			return UnaryOpRv(op=UnOp.PTR_METADATA, operand=self._as_operand(args[0]))
		if name == "CopyForDeref" and len(args) == 1 and not self._is_operand(args[0]):
			return CopyForDerefRv(place=self._place(args[0]))
		return UnsupportedRv(kind=name, text=f"{len(args)} argument(s)")

	def _is_operand(self, node: Tree) -> bool:
		return _name(node) in ("copy_op", "move_op", "constant")

	def _as_operand(self, node: Tree) -> Operand:
		if self._is_operand(node):
			return self._operand(node)
		return Copy(place=self._place(node))

	def _operand(self, node: Tree) -> Operand:
		kind = _name(node)
		if kind == "copy_op":
			return Copy(place=self._place(_trees(node)[0]))
		if kind == "move_op":
			return Move(place=self._place(_trees(node)[0]))
		if kind == "constant":
			return self._constant(node.children[0])
		raise MirParseError(f"expected an operand, got `{kind}`", span=self._span(node))

	def _constant(self, node: Tree | Token) -> Constant:
		kind = _name(node)
		if kind == "int_const":
			tok = node.children[0]
			m = _INT_SUFFIX.match(tok.value)
			if m:
				return Constant(value=int(m.group(1)), ty=self._table.new_scalar(m.group(2)))
			return Constant(value=int(tok.value))
		if kind == "true_const":
			return Constant(value=True, ty=self._table.new_scalar("bool"))
		if kind == "false_const":
			return Constant(value=False, ty=self._table.new_scalar("bool"))
		if kind == "str_const":
			str_ty = self._table.new_ref(self._table.new_scalar("str"), is_mut=False)
			return Constant(value=_string_value(node.children[0]), ty=str_ty)
		if kind == "unit_const":
			return Constant(value=None, ty=self._table.ensure_unit())
		if kind == "fn_const":
			return Constant(value=FnRef(self._path(_trees(node)[0])))
		raise MirParseError(f"unexpected constant `{kind}`", span=self._span(node))

	# Places

	def _place(self, node: Tree) -> Place:
		kind = _name(node)
		if kind == "slot_place":
			return Place(slot=_tokens(node, "SLOT")[0].value)
		base = self._place(_trees(node)[0])
		if kind == "deref_place":
			elem = Deref()
		elif kind == "field_place":
			index = int(_tokens(node, "INT")[0].value)
			ty_trees = _trees(node)[1:]
			elem = Field(index=index, ty=self._type(ty_trees[0]) if ty_trees else None)
		elif kind == "downcast_place":
			elem = Downcast(variant=_tokens(node, "NAME")[0].value)
		elif kind == "index_place":
			elem = Index(index=_tokens(node, "SLOT")[0].value)
		elif kind == "constant_index_place":
			offset_tok, min_tok = _tokens(node, "INT")
			elem = ConstantIndex(offset=int(offset_tok.value), min_length=int(min_tok.value))
		else:
			raise MirParseError(f"unexpected place `{kind}`", span=self._span(node))
		return Place(slot=base.slot, projection=base.projection + (elem,))

	# Types and paths

	def _type(self, node: Tree) -> TypeId:
		kind = _name(node)
		table = self._table
		if kind == "path_type":
			path_tree, *params = _trees(node)
			name = self._path(path_tree)
			if params:
				return table.new_opaque(name, [self._type(p) for p in params])
			if name in PRIMITIVE_SCALARS:
				return table.new_scalar(name)
			adt = table.lookup_adt(name)
			if adt is not None:
				return adt
			return table.new_opaque(name)
		if kind == "ref_type":
			return table.new_ref(self._type(_trees(node)[0]), is_mut=_has_token(node, "MUT"))
		if kind == "const_ptr_type":
			return table.new_raw_ptr(self._type(_trees(node)[0]), is_mut=False)
		if kind == "mut_ptr_type":
			return table.new_raw_ptr(self._type(_trees(node)[0]), is_mut=True)
		if kind == "slice_type":
			return table.new_slice(self._type(_trees(node)[0]))
		if kind == "array_type":
			return table.new_array(self._type(_trees(node)[0]), int(_tokens(node, "INT")[0].value))
		if kind == "tuple_type":
			return table.new_tuple([self._type(t) for t in _trees(node)])
		if kind == "never_type":
			return table.ensure_never()
		if kind == "fn_ptr_type":
			params = [t for t in _trees(node) if _name(t) != "fn_ret"]
			rets = [t for t in _trees(node) if _name(t) == "fn_ret"]
			ret = self._type(_trees(rets[0])[0]) if rets else table.ensure_unit()
			return table.new_fn_ptr([self._type(p) for p in params], ret)
		raise MirParseError(f"unexpected type `{kind}`", span=self._span(node))

	def _path(self, node: Tree) -> str:
		"""
		Join path segments with `::`, dropping turbofish generic arguments.

		A qualified path keeps its `<Self as Trait>` head spelled through the
		type table, e.g. `<Vec<i32> as Index<usize>>::index`.
		"""
		segments = [c.value for c in node.children if isinstance(c, Token)]
		if _name(node) == "qualified_path":
			self_ty, trait_ty = _trees(node)[:2]
			display = self._table.display
			segments.insert(0, f"<{display(self._type(self_ty))} as {display(self._type(trait_ty))}>")
		return "::".join(segments)


__all__ = ["MirParseError", "parse_mir", "parse_mir_file"]
