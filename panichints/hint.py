# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Hint data types: one reported fault site with its rendered guard.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

from panichints.core.span import Span


class PanicKind(Enum):
	"""Kinds of runtime fault a hint can describe."""

	BOUNDS_CHECK = "BoundsCheck"
	DIVISION_BY_ZERO = "DivisionByZero"
	REMAINDER_BY_ZERO = "RemainderByZero"
	EXPLICIT_PANIC = "ExplicitPanic"


EXPLICIT_PANIC_ASSERTION = "Explicit Panic"
ROOT_MODULE = "<root>"


@dataclass(frozen=True)
class Hint:
	"""
	A fault site ready for downstream tooling.

	function: fully qualified path of the owning function
	span: location of the faulting terminator
	assertion: rendered guard, or "Explicit Panic" for unconditional faults
	kind: which fault the site can raise
	"""

	function: str
	assertion: str
	kind: PanicKind
	span: Span = field(default_factory=Span)

	def to_json(self) -> dict:
		return {
			"function": self.function,
			"assertion": self.assertion,
			"kind": self.kind.value,
			"file": self.span.file,
			"line": self.span.line,
			"column": self.span.column,
		}


HintsPerModule = Dict[str, List[Hint]]


__all__ = ["PanicKind", "Hint", "HintsPerModule", "EXPLICIT_PANIC_ASSERTION", "ROOT_MODULE"]
