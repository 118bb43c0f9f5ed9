# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lightweight source span representation used by hints and diagnostics.

The analysis never interprets a Span: it is carried from the MIR statement or
terminator that raised a fault site to the Hint built for it, so downstream
tooling can point back at source. The `raw` field keeps whatever location
object the front-end produced.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source span (best-effort file/line/column plus raw parser loc)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	end_line: Optional[int] = None
	end_column: Optional[int] = None
	raw: Any = None

	@classmethod
	def from_loc(cls, loc: Any, *, file: Optional[str] = None) -> "Span":
		"""
		Construct a Span from an existing parser/location object.

		If `loc` is already a Span, it is returned unchanged; otherwise the
		common location attributes are copied over. lark `Meta` objects are
		accepted directly (`line`, `column`, `end_line`, `end_column`).
		"""
		if loc is None:
			return cls(file=file)
		if isinstance(loc, cls):
			return loc
		if getattr(loc, "empty", False):
			return cls(file=file)
		return cls(
			file=file or getattr(loc, "file", None) or getattr(loc, "filename", None) or None,
			line=getattr(loc, "line", None),
			column=getattr(loc, "column", None),
			end_line=getattr(loc, "end_line", None),
			end_column=getattr(loc, "end_column", None),
			raw=loc,
		)

	def is_known(self) -> bool:
		return self.line is not None

	def __str__(self) -> str:
		file = self.file or "<unknown>"
		line = "?" if self.line is None else str(self.line)
		column = "?" if self.column is None else str(self.column)
		return f"{file}:{line}:{column}"


__all__ = ["Span"]
