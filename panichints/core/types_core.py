# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Minimal type core backing the type-query capability.

TypeIds are opaque ints indexing into a TypeTable. TypeKind keeps the universe
small: just enough shape information for the hint passes to tell aggregates
(named structs with fields) from sequences (arrays, slices, and pointers to
them) and to follow a place through dereferences and field selections.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, List, Optional, Tuple


TypeId = int  # opaque handle into the TypeTable


class TypeKind(Enum):
	"""Kinds of types understood by the minimal type core."""

	SCALAR = auto()
	ADT = auto()      # named aggregate with declared fields
	OPAQUE = auto()   # named type we know nothing about (e.g. `Vec<u8>`)
	TUPLE = auto()
	ARRAY = auto()
	SLICE = auto()
	REF = auto()
	RAW_PTR = auto()
	FN_PTR = auto()   # `fn(A, B) -> R`; last param is the return type
	NEVER = auto()


PRIMITIVE_SCALARS = frozenset(
	{
		"bool", "char", "str",
		"i8", "i16", "i32", "i64", "i128", "isize",
		"u8", "u16", "u32", "u64", "u128", "usize",
		"f32", "f64",
	}
)


@dataclass(frozen=True)
class TypeDef:
	"""Definition of a type stored in the TypeTable."""

	kind: TypeKind
	name: str
	param_types: Tuple[TypeId, ...] = ()
	ref_mut: bool | None = None  # only meaningful for REF / RAW_PTR
	length: int | None = None    # only meaningful for ARRAY


class TypeTable:
	"""
	Simple type table that owns TypeIds.

	Structural types (refs, slices, arrays, tuples) are interned so the same
	shape always maps to the same TypeId. Named aggregates are declared first
	and get their fields afterwards, which lets struct declarations refer to
	each other regardless of order.
	"""

	def __init__(self) -> None:
		self._defs: Dict[TypeId, TypeDef] = {}
		self._next_id: TypeId = 1  # reserve 0 for "invalid"
		self._interned: Dict[TypeDef, TypeId] = {}
		self._adts_by_name: Dict[str, TypeId] = {}
		self._adt_fields: Dict[TypeId, List[Tuple[str, TypeId]]] = {}

	def new_scalar(self, name: str) -> TypeId:
		"""Register (or reuse) a scalar type such as `usize` or `bool`."""
		return self._intern(TypeDef(kind=TypeKind.SCALAR, name=name))

	def declare_adt(self, name: str) -> TypeId:
		"""Declare a named aggregate; fields are attached with `define_fields`."""
		existing = self._adts_by_name.get(name)
		if existing is not None:
			return existing
		ty = self._add(TypeDef(kind=TypeKind.ADT, name=name))
		self._adts_by_name[name] = ty
		self._adt_fields[ty] = []
		return ty

	def define_fields(self, adt: TypeId, fields: List[Tuple[str, TypeId]]) -> None:
		"""Attach the ordered (name, type) field list to a declared aggregate."""
		if self.get(adt).kind is not TypeKind.ADT:
			raise ValueError(f"{self.display(adt)} is not an aggregate type")
		self._adt_fields[adt] = list(fields)

	def lookup_adt(self, name: str) -> Optional[TypeId]:
		return self._adts_by_name.get(name)

	def adt_fields(self, adt: TypeId) -> List[Tuple[str, TypeId]]:
		"""Return the declared fields of an aggregate (empty for non-aggregates)."""
		return list(self._adt_fields.get(adt, []))

	def new_opaque(self, name: str, params: List[TypeId] | None = None) -> TypeId:
		"""Register a named type with no known layout (generic containers, foreign types)."""
		return self._intern(TypeDef(kind=TypeKind.OPAQUE, name=name, param_types=tuple(params or ())))

	def new_tuple(self, elems: List[TypeId]) -> TypeId:
		return self._intern(TypeDef(kind=TypeKind.TUPLE, name="Tuple", param_types=tuple(elems)))

	def ensure_unit(self) -> TypeId:
		"""Return the stable `()` TypeId."""
		return self.new_tuple([])

	def new_array(self, elem: TypeId, length: int) -> TypeId:
		"""Register a fixed-length array `[elem; length]`."""
		return self._intern(TypeDef(kind=TypeKind.ARRAY, name="Array", param_types=(elem,), length=length))

	def new_slice(self, elem: TypeId) -> TypeId:
		"""Register an unsized slice `[elem]`."""
		return self._intern(TypeDef(kind=TypeKind.SLICE, name="Slice", param_types=(elem,)))

	def new_ref(self, inner: TypeId, is_mut: bool) -> TypeId:
		"""Register a reference type to `inner` (mutable vs shared encoded in ref_mut/name)."""
		name = "RefMut" if is_mut else "Ref"
		return self._intern(TypeDef(kind=TypeKind.REF, name=name, param_types=(inner,), ref_mut=is_mut))

	def new_raw_ptr(self, inner: TypeId, is_mut: bool) -> TypeId:
		"""Register a raw pointer type to `inner` (`*mut` vs `*const`)."""
		name = "PtrMut" if is_mut else "PtrConst"
		return self._intern(TypeDef(kind=TypeKind.RAW_PTR, name=name, param_types=(inner,), ref_mut=is_mut))

	def new_fn_ptr(self, params: List[TypeId], ret: TypeId) -> TypeId:
		return self._intern(TypeDef(kind=TypeKind.FN_PTR, name="FnPtr", param_types=(*params, ret)))

	def ensure_never(self) -> TypeId:
		return self._intern(TypeDef(kind=TypeKind.NEVER, name="!"))

	def get(self, ty: TypeId) -> TypeDef:
		"""Fetch the TypeDef for a given TypeId."""
		return self._defs[ty]

	def display(self, ty: TypeId) -> str:
		"""Render a type the way MIR dumps spell it (`&mut [u8]`, `*const T`, `(i32, bool)`)."""
		td = self.get(ty)
		kind = td.kind
		if kind is TypeKind.REF:
			prefix = "&mut " if td.ref_mut else "&"
			return prefix + self.display(td.param_types[0])
		if kind is TypeKind.RAW_PTR:
			prefix = "*mut " if td.ref_mut else "*const "
			return prefix + self.display(td.param_types[0])
		if kind is TypeKind.SLICE:
			return f"[{self.display(td.param_types[0])}]"
		if kind is TypeKind.ARRAY:
			return f"[{self.display(td.param_types[0])}; {td.length}]"
		if kind is TypeKind.TUPLE:
			inner = ", ".join(self.display(p) for p in td.param_types)
			if len(td.param_types) == 1:
				inner += ","
			return f"({inner})"
		if kind is TypeKind.FN_PTR:
			*params, ret = td.param_types
			sig = "fn(" + ", ".join(self.display(p) for p in params) + ")"
			ret_td = self._defs[ret]
			if ret_td.kind is TypeKind.TUPLE and not ret_td.param_types:
				return sig
			return f"{sig} -> {self.display(ret)}"
		if kind is TypeKind.OPAQUE and td.param_types:
			args = ", ".join(self.display(p) for p in td.param_types)
			return f"{td.name}<{args}>"
		return td.name

	def _intern(self, td: TypeDef) -> TypeId:
		existing = self._interned.get(td)
		if existing is not None:
			return existing
		ty = self._add(td)
		self._interned[td] = ty
		return ty

	def _add(self, td: TypeDef) -> TypeId:
		ty_id = self._next_id
		self._next_id += 1
		self._defs[ty_id] = td
		return ty_id


__all__ = ["TypeId", "TypeKind", "TypeDef", "TypeTable", "PRIMITIVE_SCALARS"]
