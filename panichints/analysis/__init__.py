# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Analysis package: fault-site scanning and guard resolution over MIR.

Public API:
  - FaultSiteScanner / FaultRecord: find fault sites in a body
  - ValueResolver: render a slot's value as text (single block, backward)
  - ProjectionRenderer / RenderPolicy: accessor suffixes for places
  - ResolutionError and subclasses: why a guard could not be rendered
"""

from .errors import (
	ResolutionError,
	NoDefinition,
	UnsupportedOperator,
	UnsupportedExpression,
	UnsupportedProjection,
	UnsupportedConstant,
	TypeMismatch,
	NotAnAggregate,
	ProgramContractError,
)
from .projections import DEFAULT_POLICY, ProjectionRenderer, RenderPolicy, place_type
from .resolve import ValueResolver, find_assignment, render_constant
from .fault_scan import DEFAULT_ABORT_PATHS, FaultRecord, FaultSiteScanner

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
	"DEFAULT_POLICY",
	"ProjectionRenderer",
	"RenderPolicy",
	"place_type",
	"ValueResolver",
	"find_assignment",
	"render_constant",
	"DEFAULT_ABORT_PATHS",
	"FaultRecord",
	"FaultSiteScanner",
]
