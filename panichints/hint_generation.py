# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Hint generation: run the fault scan over a program and render every guard.

Pipeline per function (discovery order):
  1. skip declarations without a compiled body;
  2. scan terminators for fault sites (FaultSiteScanner);
  3. render each site's guard (ValueResolver) or use "Explicit Panic";
  4. file the Hint under the function's enclosing module.

A guard that cannot be rendered drops that one hint and is reported as a
warning diagnostic; the rest of the program is still analyzed. The result is
therefore best-effort: completeness has to be audited against the
diagnostics, not inferred from hint counts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, List, Optional

from panichints.analysis.errors import ProgramContractError, ResolutionError
from panichints.analysis.fault_scan import DEFAULT_ABORT_PATHS, FaultRecord, FaultSiteScanner
from panichints.analysis.projections import DEFAULT_POLICY, RenderPolicy
from panichints.analysis.resolve import ValueResolver
from panichints.core.diagnostics import Diagnostic, report
from panichints.hint import EXPLICIT_PANIC_ASSERTION, ROOT_MODULE, Hint, HintsPerModule, PanicKind
from panichints.mir.mir_nodes import MirBody, operand_place
from panichints.program import Program


_PHASE = "hints"


@dataclass(frozen=True)
class HintOptions:
	"""
	Knobs for a hint run.

	only_functions: restrict the run to functions whose last path component is
	  in this set (None analyzes everything)
	abort_paths: callees treated as process-abort entry points
	root_module: module key for functions declared at the crate root
	policy: how pointer-ish constructs are rendered
	"""

	only_functions: Optional[FrozenSet[str]] = None
	abort_paths: FrozenSet[str] = DEFAULT_ABORT_PATHS
	root_module: str = ROOT_MODULE
	policy: RenderPolicy = DEFAULT_POLICY


def module_path_of(fn_path: str, root: str = ROOT_MODULE) -> str:
	"""`a::b::f` -> `a::b`; a path without `::` lives in `root`."""
	pos = fn_path.rfind("::")
	if pos < 0:
		return root
	return fn_path[:pos]


def short_name_of(fn_path: str) -> str:
	"""`a::b::f` -> `f`"""
	pos = fn_path.rfind("::")
	return fn_path[pos + 2:] if pos >= 0 else fn_path


def generate_hints(
	program: Program,
	*,
	options: Optional[HintOptions] = None,
	diagnostics: Optional[List[Diagnostic]] = None,
) -> HintsPerModule:
	"""
	Build the hint catalogue for `program`.

	Raises ProgramContractError if a function reported as having a body cannot
	produce it; every other problem is reported through `diagnostics`.
	"""
	opts = options or HintOptions()
	types = program.type_query()
	scanner = FaultSiteScanner(types, opts.abort_paths)
	hints: HintsPerModule = {}
	sites = 0

	for fn in program.functions():
		if opts.only_functions is not None and short_name_of(fn.name) not in opts.only_functions:
			continue
		if not fn.has_body:
			report(
				diagnostics,
				f"skipping {fn.name}: no MIR available (likely a trait method declaration)",
				severity="note",
				phase=_PHASE,
			)
			continue
		body = _body_of(program, fn.name)
		records = scanner.scan(fn.name, body)
		sites += len(records)
		if not records:
			continue
		module = module_path_of(fn.name, opts.root_module)
		resolver = ValueResolver(body, types, opts.policy)
		for record in records:
			hint = _hint_for(record, body, resolver, diagnostics)
			if hint is not None:
				hints.setdefault(module, []).append(hint)

	for module, module_hints in hints.items():
		report(diagnostics, f"{module}: {len(module_hints)} hint(s)", severity="note", phase=_PHASE)
	if sites:
		rendered = count_hints(hints)
		report(
			diagnostics,
			f"total fault sites found: {sites} ({rendered} rendered, {sites - rendered} dropped)",
			severity="note",
			phase=_PHASE,
		)
	return hints


assemble = generate_hints


def _body_of(program: Program, name: str) -> MirBody:
	try:
		body = program.body_of(name)
	except ProgramContractError:
		raise
	except LookupError as exc:
		raise ProgramContractError(f"no MIR body available for {name}", function=name) from exc
	if body is None:
		raise ProgramContractError(f"no MIR body available for {name}", function=name)
	return body


def _hint_for(
	record: FaultRecord,
	body: MirBody,
	resolver: ValueResolver,
	diagnostics: Optional[List[Diagnostic]],
) -> Optional[Hint]:
	if record.kind is PanicKind.EXPLICIT_PANIC:
		return Hint(function=record.function, assertion=EXPLICIT_PANIC_ASSERTION, kind=record.kind, span=record.span)
	try:
		block = body.block(record.block)
		assertion = resolver.render_operand(block, record.guard)
	except ResolutionError as err:
		guard_place = operand_place(record.guard)
		slot = err.slot or (guard_place.slot if guard_place is not None else "?")
		report(
			diagnostics,
			f"{record.function}: dropped {record.kind.value} hint: cannot render {slot} in {record.block}: {err}",
			severity="warning",
			phase=_PHASE,
			code=err.code,
			span=record.span,
			notes=[f"function: {record.function}", f"slot: {slot}", f"block: {record.block}"],
		)
		return None
	return Hint(function=record.function, assertion=assertion, kind=record.kind, span=record.span)


def count_hints(hints: HintsPerModule) -> int:
	return sum(len(v) for v in hints.values())


__all__ = ["HintOptions", "generate_hints", "assemble", "module_path_of", "short_name_of", "count_hints"]
