# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
panichints: enumerate every place a compiled function can abort at runtime.

For each fault site in a program's MIR (bounds checks, division/remainder by
zero, explicit panics and aborts) a Hint is produced whose `assertion` is the
guarding condition rendered back into source-like text (`i < arr.len()`,
`b == 0`), grouped by enclosing module.

Typical use:

	program = parse_mir(text)
	hints = generate_hints(program, diagnostics=diags)
"""

from .hint import EXPLICIT_PANIC_ASSERTION, ROOT_MODULE, Hint, HintsPerModule, PanicKind
from .hint_generation import HintOptions, assemble, generate_hints
from .mir.parser import MirParseError, parse_mir, parse_mir_file
from .program import FnDef, MirProgram, Program

__all__ = [
	"EXPLICIT_PANIC_ASSERTION",
	"ROOT_MODULE",
	"Hint",
	"HintsPerModule",
	"PanicKind",
	"HintOptions",
	"assemble",
	"generate_hints",
	"MirParseError",
	"parse_mir",
	"parse_mir_file",
	"FnDef",
	"MirProgram",
	"Program",
]
