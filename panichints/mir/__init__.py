# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
MIR package: node definitions, the textual front-end and the pretty-printer.

Subpackages:
  - mir_nodes: the closed MIR algebra (re-exported here)
  - parser: build a MirProgram from a textual MIR dump (`parse_mir`)
  - pretty: render a MirBody back to text (`write_mir_pretty`)
"""

from .mir_nodes import *  # noqa: F401,F403
from .mir_nodes import __all__ as _nodes_all

__all__ = list(_nodes_all)
