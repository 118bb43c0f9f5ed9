# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Fault-site scan: find every terminator that can abort a function at runtime.

Only terminators are inspected. Two shapes matter:
  - `assert` terminators whose message is a bounds check, division by zero or
    remainder by zero (the guarding condition is recorded, not rendered);
  - calls to a panic primitive or a process-abort entry point (no guard).

Everything else (goto, return, switchInt, overflow asserts, ordinary calls)
is ignored. The scan never raises for analysis reasons: rendering happens
later, per record, so one bad guard cannot hide the other sites.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional

from panichints.core.span import Span
from panichints.hint import PanicKind
from panichints.mir.mir_nodes import (
	Assert,
	BlockId,
	BoundsCheck,
	Call,
	Constant,
	DivisionByZero,
	MirBody,
	Operand,
	RemainderByZero,
	Terminator,
)
from panichints.types_protocol import TypeQuery


DEFAULT_ABORT_PATHS: FrozenSet[str] = frozenset(
	{
		"std::process::abort",
		"core::intrinsics::abort",
		"std::intrinsics::abort",
	}
)


@dataclass(frozen=True)
class FaultRecord:
	"""
	A raw fault site.

	guard is the operand whose value decides the fault (None for explicit
	panics); block names the block whose terminator raised the record.
	"""

	kind: PanicKind
	function: str
	block: BlockId
	guard: Optional[Operand] = None
	span: Span = field(default_factory=Span)


class FaultSiteScanner:
	"""
	Collect fault records from a function body.

	Entry point:
	  scan(function: str, body: MirBody | None) -> List[FaultRecord]
	"""

	def __init__(self, types: TypeQuery, abort_paths: Iterable[str] | None = None) -> None:
		self._types = types
		self._abort_paths: FrozenSet[str] = (
			frozenset(abort_paths) if abort_paths is not None else DEFAULT_ABORT_PATHS
		)

	def scan(self, function: str, body: Optional[MirBody]) -> List[FaultRecord]:
		if body is None:
			# Declarations without a compiled body (trait method signatures).
			return []
		records: List[FaultRecord] = []
		for block in body.blocks:
			if block.terminator is None:
				continue
			record = self._visit_term(function, block.name, block.terminator)
			if record is not None:
				records.append(record)
		return records

	def is_panic_entry(self, path: str) -> bool:
		"""True if calling `path` unconditionally aborts the current execution."""
		return path in self._abort_paths or self._types.is_panic_primitive(path)

	def _visit_term(self, function: str, block: BlockId, term: Terminator) -> Optional[FaultRecord]:
		if isinstance(term, Assert):
			kind = _assert_kind(term)
			if kind is None or isinstance(term.cond, Constant):
				return None
			return FaultRecord(kind=kind, function=function, block=block, guard=term.cond, span=term.span)
		if isinstance(term, Call):
			path = term.callee_path()
			if path is not None and self.is_panic_entry(path):
				return FaultRecord(kind=PanicKind.EXPLICIT_PANIC, function=function, block=block, span=term.span)
		return None


def _assert_kind(term: Assert) -> Optional[PanicKind]:
	msg = term.msg
	if isinstance(msg, BoundsCheck):
		return PanicKind.BOUNDS_CHECK
	if isinstance(msg, DivisionByZero):
		return PanicKind.DIVISION_BY_ZERO
	if isinstance(msg, RemainderByZero):
		return PanicKind.REMAINDER_BY_ZERO
	return None


__all__ = ["FaultRecord", "FaultSiteScanner", "DEFAULT_ABORT_PATHS"]
