# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
The program collaborator: what the hint passes need from a host compiler.

The passes only ever see a `Program`: an ordered list of function-like
definitions (with a flag saying whether a compiled body exists), a body per
analyzable definition, and a `TypeQuery`. `MirProgram` is the in-memory
implementation produced by the textual MIR front-end and used by tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, Optional, Protocol

from panichints.analysis.errors import ProgramContractError
from panichints.mir.mir_nodes import MirBody
from panichints.types_protocol import TypeQuery


@dataclass(frozen=True)
class FnDef:
	"""A function-like definition: fully qualified path plus body availability."""

	name: str
	has_body: bool


class Program(Protocol):
	def functions(self) -> Iterable[FnDef]:
		"""Function-like definitions in discovery order."""
		...

	def body_of(self, name: str) -> MirBody:
		"""Body of an analyzable definition; raises ProgramContractError if missing."""
		...

	def type_query(self) -> TypeQuery:
		...


@dataclass
class MirProgram:
	"""
	In-memory Program.

	`bodies` preserves insertion order; a `None` body marks a declaration
	without compiled MIR (e.g. a trait method signature).
	"""

	types: TypeQuery
	bodies: Dict[str, Optional[MirBody]] = field(default_factory=dict)

	def add(self, name: str, body: Optional[MirBody]) -> None:
		if name in self.bodies:
			raise ValueError(f"duplicate function definition: {name}")
		self.bodies[name] = body

	def functions(self) -> Iterator[FnDef]:
		for name, body in self.bodies.items():
			yield FnDef(name=name, has_body=body is not None)

	def body_of(self, name: str) -> MirBody:
		body = self.bodies.get(name)
		if body is None:
			raise ProgramContractError(f"no MIR body available for {name}", function=name)
		return body

	def type_query(self) -> TypeQuery:
		return self.types


__all__ = ["FnDef", "Program", "MirProgram"]
