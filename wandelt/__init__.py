"""Wandelt language front end: tokens, builtin types, syntax tree, diagnostics and a parser over supplied tokens."""

__version__ = "0.1.0"

__all__ = ["ast", "diagnostics", "parser", "source_file", "tokens", "types"]