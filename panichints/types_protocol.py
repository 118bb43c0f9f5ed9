# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Narrow type-query protocol consumed by the hint passes.

The resolver and scanner never touch a type registry directly. Everything they
need to know about types (field names, sequence shape, pointees) goes through
this protocol, so a host compiler can plug in its own representation without
the passes knowing about it.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol


class TypeQuery(Protocol):
	"""
	Protocol for querying static types of MIR values.

	Type handles are opaque: callers only pass back what they got from the
	program (slot types, field-projection types) or from this protocol.
	"""

	def field_name(self, aggregate: Any, index: int) -> Optional[str]:
		"""Name of the field at structural `index` of a named aggregate, if any."""
		...

	def field_type(self, aggregate: Any, index: int) -> Optional[Any]:
		"""Type of the field at structural `index`, if known."""
		...

	def is_aggregate(self, ty: Any) -> bool:
		"""Return True if `ty` is a named aggregate whose fields have names."""
		...

	def is_sequence_shaped(self, ty: Any) -> bool:
		"""Return True for arrays, slices, and references/raw pointers to them."""
		...

	def pointee(self, ty: Any) -> Optional[Any]:
		"""Type obtained by dereferencing `ty` (None if `ty` is not a pointer)."""
		...

	def is_panic_primitive(self, path: str) -> bool:
		"""Return True if the function at `path` is a panic entry point."""
		...

	def display(self, ty: Any) -> str:
		"""Human-readable spelling of `ty` for diagnostics."""
		...
