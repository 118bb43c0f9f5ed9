# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Projection rendering: turn a place's projection chain into an accessor suffix.

A place like `((*_1).2: usize)` reads field #2 of the value `_1` points to.
Given the already-rendered text for `_1` (say `self`), the renderer walks the
chain from the base slot outward, tracks the static type of the value being
projected from, and asks the type query for field names:

	self + [Deref, Field(2)]  ->  "self.tail"

Dereference and pointer formation are rendered according to one explicit
`RenderPolicy`. The default elides every prefix, so `&(*self).head`,
`&raw const (*self).head` and `(*self).head` all read as `self.head`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from panichints.analysis.errors import NotAnAggregate, UnsupportedProjection
from panichints.mir.mir_nodes import Deref, Field, MirBody, Place
from panichints.types_protocol import TypeQuery


@dataclass(frozen=True)
class RenderPolicy:
	"""
	Text emitted for pointer-ish constructs.

	deref_prefix: wraps each dereference (`*` gives `(*self).head`)
	ref_prefix: prepended to `&place` / `CopyForDeref(place)` renderings
	raw_ptr_prefix: prepended to `&raw const|mut place` renderings
	"""

	deref_prefix: str = ""
	ref_prefix: str = ""
	raw_ptr_prefix: str = ""


DEFAULT_POLICY = RenderPolicy()


def place_type(body: MirBody, types: TypeQuery, place: Place) -> Optional[Any]:
	"""
	Static type of `place`, following derefs and field selections.

	Returns None as soon as a step is unknown (untyped slot, non-pointer deref,
	unknown field, or a projection kind that carries no type).
	"""
	ty = body.slot_types.get(place.slot)
	for elem in place.projection:
		if ty is None:
			return None
		if isinstance(elem, Deref):
			ty = types.pointee(ty)
		elif isinstance(elem, Field):
			ty = elem.ty if elem.ty is not None else types.field_type(ty, elem.index)
		else:
			return None
	return ty


class ProjectionRenderer:
	"""Render projection chains for places of one function body."""

	def __init__(self, body: MirBody, types: TypeQuery, policy: RenderPolicy = DEFAULT_POLICY) -> None:
		self._body = body
		self._types = types
		self._policy = policy

	def render_projections(self, base_text: str, place: Place) -> str:
		"""
		Apply `place.projection` to `base_text`.

		Raises NotAnAggregate when a field is selected from something that is
		not a named aggregate (or has no field at that index), and
		UnsupportedProjection for index/downcast/constant-index projections.
		"""
		text = base_text
		ty = self._body.slot_types.get(place.slot)
		for elem in place.projection:
			if isinstance(elem, Deref):
				if self._policy.deref_prefix:
					text = f"({self._policy.deref_prefix}{text})"
				ty = self._types.pointee(ty) if ty is not None else None
			elif isinstance(elem, Field):
				if ty is None or not self._types.is_aggregate(ty):
					shown = "an untyped value" if ty is None else f"`{self._types.display(ty)}`"
					raise NotAnAggregate(
						f"cannot select field {elem.index} of {text}: {shown} is not a named aggregate",
						slot=place.slot,
					)
				name = self._types.field_name(ty, elem.index)
				if name is None:
					raise NotAnAggregate(
						f"`{self._types.display(ty)}` has no field at index {elem.index}",
						slot=place.slot,
					)
				text = f"{text}.{name}"
				ty = elem.ty if elem.ty is not None else self._types.field_type(ty, elem.index)
			else:
				raise UnsupportedProjection(
					f"cannot render projection {type(elem).__name__} on {text}",
					slot=place.slot,
				)
		return text


__all__ = ["RenderPolicy", "DEFAULT_POLICY", "ProjectionRenderer", "place_type"]
