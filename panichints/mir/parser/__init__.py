# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Textual MIR front-end (lark grammar in `mir.lark`).
"""

from .parser import MirParseError, parse_mir, parse_mir_file

__all__ = ["MirParseError", "parse_mir", "parse_mir_file"]
