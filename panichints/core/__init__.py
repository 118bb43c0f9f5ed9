# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Core helpers shared by every pass: spans, diagnostics and the type table.
"""

from .span import Span
from .diagnostics import Diagnostic, report, has_errors
from .types_core import TypeId, TypeKind, TypeDef, TypeTable, PRIMITIVE_SCALARS

__all__ = [
	"Span",
	"Diagnostic",
	"report",
	"has_errors",
	"TypeId",
	"TypeKind",
	"TypeDef",
	"TypeTable",
	"PRIMITIVE_SCALARS",
]
