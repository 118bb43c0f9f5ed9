# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Shared helpers for tests that need MIR inputs.

Two ways to get a body:
  - spell it as textual MIR (the fixtures below) and run it through
    `parse_mir`, which is closest to what the CLI sees;
  - build it by hand with the small constructors here when a test needs a
    shape the front-end would never produce (or wants to stay independent
    of it).
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Tuple

from panichints.core.types_core import TypeId, TypeTable
from panichints.mir.mir_nodes import (
	Assign,
	BasicBlock,
	Constant,
	Copy,
	MirBody,
	Move,
	Place,
	ProjectionElem,
	Rvalue,
	Statement,
	Terminator,
)
from panichints.program import MirProgram
from panichints.types_query_impl import TableTypeQuery


def make_types(panic_primitives: Iterable[str] | None = None) -> Tuple[TypeTable, TableTypeQuery]:
	"""Fresh TypeTable plus the query wrapping it."""
	table = TypeTable()
	return table, TableTypeQuery(table, panic_primitives)


def place(slot: str, *projection: ProjectionElem) -> Place:
	return Place(slot=slot, projection=tuple(projection))


def copy(slot: str, *projection: ProjectionElem) -> Copy:
	return Copy(place=place(slot, *projection))


def move(slot: str, *projection: ProjectionElem) -> Move:
	return Move(place=place(slot, *projection))


def const(value: object, ty: Optional[TypeId] = None) -> Constant:
	return Constant(value=value, ty=ty)


def assign(slot: str, value: Rvalue) -> Assign:
	return Assign(dest=Place(slot=slot), value=value)


def block(name: str, *statements: Statement, term: Optional[Terminator] = None) -> BasicBlock:
	return BasicBlock(name=name, statements=list(statements), terminator=term)


def body(
	*blocks: BasicBlock,
	debug_names: Optional[Dict[str, str]] = None,
	slot_types: Optional[Dict[str, TypeId]] = None,
	arg_count: int = 0,
) -> MirBody:
	return MirBody(
		blocks=list(blocks),
		debug_names=dict(debug_names or {}),
		slot_types=dict(slot_types or {}),
		arg_count=arg_count,
	)


def program_of(types: TableTypeQuery, bodies: Dict[str, Optional[MirBody]]) -> MirProgram:
	"""Build a MirProgram from `name -> body` (None marks a bodyless declaration)."""
	program = MirProgram(types=types)
	for name, fn_body in bodies.items():
		program.add(name, fn_body)
	return program


DIVIDE_MIR = """
fn divide(_1: i32, _2: i32) -> i32 {
    debug a => _1;
    debug b => _2;
    let mut _0: i32;
    let mut _3: bool;

    bb0: {
        _3 = Eq(copy _2, const 0_i32);
        assert(!move _3, "attempt to divide `{}` by zero", copy _1) -> [success: bb1, unwind continue];
    }

    bb1: {
        _0 = Div(copy _1, copy _2);
        return;
    }
}
"""

REMAINDER_MIR = """
fn remainder(_1: u64, _2: u64) -> u64 {
    debug a => _1;
    debug b => _2;
    let mut _0: u64;
    let mut _3: bool;

    bb0: {
        _3 = Eq(copy _2, const 0_u64);
        assert(!move _3, "attempt to calculate the remainder of `{}` with a divisor of zero", copy _1) -> [success: bb1, unwind continue];
    }

    bb1: {
        _0 = Rem(copy _1, copy _2);
        return;
    }
}
"""

BOUNDS_MIR = """
fn get(_1: &[i32], _2: usize) -> i32 {
    debug arr => _1;
    debug i => _2;
    let mut _0: i32;
    let mut _3: usize;
    let mut _4: bool;

    bb0: {
        _3 = PtrMetadata(copy _1);
        _4 = Lt(copy _2, copy _3);
        assert(move _4, "index out of bounds: the length is {} but the index is {}", move _3, copy _2) -> [success: bb1, unwind continue];
    }

    bb1: {
        _0 = copy (*_1)[_2];
        return;
    }
}
"""

PANIC_MIR = """
fn checks::fail() -> ! {
    let mut _0: !;

    bb0: {
        _0 = core::panicking::panic(const "explicit panic") -> unwind continue;
    }
}
"""

ABORT_MIR = """
fn checks::bail() -> ! {
    let mut _0: !;

    bb0: {
        _0 = std::process::abort() -> unwind continue;
    }
}
"""

RING_MIR = """
struct RingBuffer { data: [u32; 8], head: usize, tail: usize }

fn ring::peek(_1: &RingBuffer, _2: usize) -> u32 {
    debug self => _1;
    debug step => _2;
    let mut _0: u32;
    let mut _3: usize;
    let mut _4: bool;
    let mut _5: usize;
    let mut _6: bool;

    bb0: {
        _5 = copy ((*_1).2: usize);
        _6 = Eq(copy _5, const 0_usize);
        assert(!move _6, "attempt to divide `{}` by zero", copy _2) -> [success: bb1, unwind continue];
    }

    bb1: {
        _3 = copy ((*_1).1: usize);
        _4 = Lt(copy _3, const 8_usize);
        assert(move _4, "index out of bounds: the length is {} but the index is {}", const 8_usize, copy _3) -> [success: bb2, unwind continue];
    }

    bb2: {
        _0 = copy ((*_1).0: [u32; 8])[_3];
        return;
    }
}
"""

TRAIT_DECL_MIR = """
fn shapes::Shape::area(_1: &Self) -> f64;
"""

UNSUPPORTED_MIR = """
fn shapes::scaled(_1: i32, _2: i32) -> i32 {
    debug a => _1;
    debug b => _2;
    let mut _0: i32;
    let mut _3: i32;
    let mut _4: bool;

    bb0: {
        _3 = Add(copy _2, const 1_i32);
        _4 = Eq(copy _3, const 0_i32);
        assert(!move _4, "attempt to divide `{}` by zero", copy _1) -> [success: bb1, unwind continue];
    }

    bb1: {
        _0 = Div(copy _1, move _3);
        return;
    }
}
"""

CROSS_BLOCK_MIR = """
fn split(_1: i32, _2: i32) -> i32 {
    debug a => _1;
    debug b => _2;
    let mut _0: i32;
    let mut _3: bool;

    bb0: {
        _3 = Eq(copy _2, const 0_i32);
        goto -> bb1;
    }

    bb1: {
        assert(!move _3, "attempt to divide `{}` by zero", copy _1) -> [success: bb2, unwind continue];
    }

    bb2: {
        _0 = Div(copy _1, copy _2);
        return;
    }
}
"""


__all__ = [
	"make_types",
	"place",
	"copy",
	"move",
	"const",
	"assign",
	"block",
	"body",
	"program_of",
	"DIVIDE_MIR",
	"REMAINDER_MIR",
	"BOUNDS_MIR",
	"PANIC_MIR",
	"ABORT_MIR",
	"RING_MIR",
	"TRAIT_DECL_MIR",
	"UNSUPPORTED_MIR",
	"CROSS_BLOCK_MIR",
]
