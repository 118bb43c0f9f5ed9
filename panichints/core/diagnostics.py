# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Common diagnostic structure for the hint passes and the driver.

Passes never print. They take an optional `diagnostics` list and append to it;
the driver decides how to render what was collected (human-readable on stderr
or JSON).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .span import Span


@dataclass
class Diagnostic:
	"""Represents a diagnostic (error/warning/note) produced by a pass."""

	message: str
	code: str | None = None
	# Pass that produced the diagnostic ("parser", "scan", "hints", ...).
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Source location (Span() denotes unknown).
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	def render(self) -> str:
		"""Render as `file:line:col: severity: message`."""
		return f"{self.span}: {self.severity}: {self.message}"

	def to_json(self) -> dict:
		"""Render to a structured JSON-friendly dict."""
		return {
			"phase": self.phase,
			"code": self.code,
			"message": self.message,
			"severity": self.severity,
			"file": self.span.file,
			"line": self.span.line,
			"column": self.span.column,
			"notes": list(self.notes),
		}


def report(
	diagnostics: Optional[List[Diagnostic]],
	message: str,
	*,
	severity: str,
	phase: str,
	code: str | None = None,
	span: Span | None = None,
	notes: list[str] | None = None,
) -> None:
	"""Append a Diagnostic to `diagnostics` when a sink was provided."""
	if diagnostics is None:
		return
	diagnostics.append(
		Diagnostic(
			message=message,
			code=code,
			phase=phase,
			severity=severity,
			span=span if span is not None else Span(),
			notes=list(notes or []),
		)
	)


def has_errors(diagnostics: List[Diagnostic]) -> bool:
	return any(d.severity == "error" for d in diagnostics)


__all__ = ["Diagnostic", "report", "has_errors"]
