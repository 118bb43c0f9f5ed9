# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
TypeTable-backed implementation of the `TypeQuery` protocol.

The front-end registers every type it sees in a `TypeTable`; this wrapper
answers the shape questions the hint passes ask and carries the set of
functions treated as panic primitives.
"""

from __future__ import annotations

from typing import FrozenSet, Iterable, Optional

from panichints.core.types_core import TypeId, TypeKind, TypeTable
from panichints.types_protocol import TypeQuery


DEFAULT_PANIC_PRIMITIVES: FrozenSet[str] = frozenset(
	{
		"core::panicking::panic",
		"core::panicking::panic_fmt",
		"core::panicking::panic_explicit",
		"core::panicking::panic_nounwind",
		"core::panicking::panic_display",
		"core::panicking::panic_str_2015",
		"core::panicking::unreachable_display",
		"std::panicking::begin_panic",
		"std::rt::begin_panic",
		"std::panic::panic_any",
	}
)


class TableTypeQuery(TypeQuery):
	"""Answer type queries from a `TypeTable`."""

	def __init__(self, table: TypeTable, panic_primitives: Iterable[str] | None = None) -> None:
		self.table = table
		self.panic_primitives: FrozenSet[str] = (
			frozenset(panic_primitives) if panic_primitives is not None else DEFAULT_PANIC_PRIMITIVES
		)

	def field_name(self, aggregate: TypeId, index: int) -> Optional[str]:
		fields = self.table.adt_fields(aggregate)
		if 0 <= index < len(fields):
			return fields[index][0]
		return None

	def field_type(self, aggregate: TypeId, index: int) -> Optional[TypeId]:
		td = self.table.get(aggregate)
		if td.kind is TypeKind.TUPLE:
			if 0 <= index < len(td.param_types):
				return td.param_types[index]
			return None
		fields = self.table.adt_fields(aggregate)
		if 0 <= index < len(fields):
			return fields[index][1]
		return None

	def is_aggregate(self, ty: TypeId) -> bool:
		return self.table.get(ty).kind is TypeKind.ADT

	def is_sequence_shaped(self, ty: TypeId) -> bool:
		td = self.table.get(ty)
		if td.kind in (TypeKind.ARRAY, TypeKind.SLICE):
			return True
		if td.kind in (TypeKind.REF, TypeKind.RAW_PTR):
			inner = self.table.get(td.param_types[0])
			return inner.kind in (TypeKind.ARRAY, TypeKind.SLICE)
		return False

	def pointee(self, ty: TypeId) -> Optional[TypeId]:
		td = self.table.get(ty)
		if td.kind in (TypeKind.REF, TypeKind.RAW_PTR):
			return td.param_types[0]
		return None

	def is_panic_primitive(self, path: str) -> bool:
		return path in self.panic_primitives

	def display(self, ty: TypeId) -> str:
		return self.table.display(ty)


__all__ = ["TableTypeQuery", "DEFAULT_PANIC_PRIMITIVES"]
