# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Error taxonomy for guard resolution.

Every ResolutionError is local to one fault site: the hint assembler catches
it, reports a diagnostic with the error's `code`, and drops that site. Only a
ProgramContractError aborts a whole run.
"""

from __future__ import annotations

from typing import Optional


class ResolutionError(ValueError):
	"""A guard value could not be rendered as text."""

	code = "unresolved"

	def __init__(self, message: str, *, slot: Optional[str] = None) -> None:
		super().__init__(message)
		self.slot = slot


class NoDefinition(ResolutionError):
	"""Slot is neither debug-named nor defined earlier in the same block."""

	code = "no-definition"


class UnsupportedOperator(ResolutionError):
	code = "unsupported-operator"


class UnsupportedExpression(ResolutionError):
	code = "unsupported-expression"


class UnsupportedProjection(ResolutionError):
	code = "unsupported-projection"


class UnsupportedConstant(ResolutionError):
	code = "unsupported-constant"


class TypeMismatch(ResolutionError):
	"""Size-of-slice applied to a value that is not array/slice shaped."""

	code = "type-mismatch"


class NotAnAggregate(ResolutionError):
	"""Field selection on a value that is not a named aggregate."""

	code = "not-an-aggregate"


class ProgramContractError(RuntimeError):
	"""
	The program collaborator broke its contract (e.g. a function reported as
	having a body could not produce one). This is a hard failure of the run.
	"""

	def __init__(self, message: str, *, function: Optional[str] = None) -> None:
		super().__init__(message)
		self.function = function


__all__ = [
	"ResolutionError",
	"NoDefinition",
	"UnsupportedOperator",
	"UnsupportedExpression",
	"UnsupportedProjection",
	"UnsupportedConstant",
	"TypeMismatch",
	"NotAnAggregate",
	"ProgramContractError",
]
