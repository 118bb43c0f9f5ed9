# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from panichints.core.types_core import TypeKind, TypeTable
from panichints.types_query_impl import DEFAULT_PANIC_PRIMITIVES, TableTypeQuery


def test_type_table_interns_structural_types() -> None:
	table = TypeTable()
	u8 = table.new_scalar("u8")

	assert table.new_scalar("u8") == u8
	assert table.new_slice(u8) == table.new_slice(u8)
	assert table.new_ref(u8, is_mut=False) != table.new_ref(u8, is_mut=True)
	assert table.new_array(u8, 4) != table.new_array(u8, 5)
	assert table.ensure_unit() == table.new_tuple([])
	assert table.get(table.ensure_never()).kind is TypeKind.NEVER


def test_type_table_display_matches_mir_spelling() -> None:
	table = TypeTable()
	u8 = table.new_scalar("u8")
	i32 = table.new_scalar("i32")

	assert table.display(table.new_ref(table.new_slice(u8), is_mut=True)) == "&mut [u8]"
	assert table.display(table.new_raw_ptr(i32, is_mut=False)) == "*const i32"
	assert table.display(table.new_array(u8, 8)) == "[u8; 8]"
	assert table.display(table.new_tuple([i32, u8])) == "(i32, u8)"
	assert table.display(table.new_tuple([i32])) == "(i32,)"
	assert table.display(table.new_opaque("Vec", [u8])) == "Vec<u8>"


def test_adts_are_declared_then_defined() -> None:
	table = TypeTable()
	node = table.declare_adt("Node")
	usize = table.new_scalar("usize")

	# A second declaration under the same name is the same type.
	assert table.declare_adt("Node") == node
	assert table.adt_fields(node) == []

	table.define_fields(node, [("len", usize), ("next", table.new_ref(node, is_mut=False))])
	assert [name for name, _ in table.adt_fields(node)] == ["len", "next"]
	assert table.lookup_adt("Node") == node
	assert table.lookup_adt("Missing") is None


def test_define_fields_rejects_non_aggregates() -> None:
	table = TypeTable()
	with pytest.raises(ValueError):
		table.define_fields(table.new_scalar("i32"), [])


def test_type_query_shapes() -> None:
	table = TypeTable()
	types = TableTypeQuery(table)
	i32 = table.new_scalar("i32")
	point = table.declare_adt("Point")
	table.define_fields(point, [("x", i32), ("y", i32)])
	arr = table.new_array(i32, 3)
	slice_ref = table.new_ref(table.new_slice(i32), is_mut=False)

	assert types.is_aggregate(point)
	assert not types.is_aggregate(table.new_tuple([i32, i32]))
	assert types.field_name(point, 1) == "y"
	assert types.field_name(point, 2) is None
	assert types.field_type(table.new_tuple([i32, arr]), 1) == arr

	assert types.is_sequence_shaped(arr)
	assert types.is_sequence_shaped(slice_ref)
	assert types.is_sequence_shaped(table.new_raw_ptr(arr, is_mut=True))
	assert not types.is_sequence_shaped(i32)
	assert not types.is_sequence_shaped(table.new_opaque("Vec", [i32]))

	assert types.pointee(slice_ref) == table.new_slice(i32)
	assert types.pointee(i32) is None


def test_panic_primitives_default_and_override() -> None:
	table = TypeTable()
	assert TableTypeQuery(table).is_panic_primitive("core::panicking::panic")
	assert "std::rt::begin_panic" in DEFAULT_PANIC_PRIMITIVES

	custom = TableTypeQuery(table, panic_primitives=["my::die"])
	assert custom.is_panic_primitive("my::die")
	assert not custom.is_panic_primitive("core::panicking::panic")
