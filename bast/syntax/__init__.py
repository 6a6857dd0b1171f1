"""
Syntax module.

Parses Go source into tree-sitter syntax trees.
"""

from __future__ import annotations

from .parser import GO_LANGUAGE, GoParser, PackageSource, SourceFile, find_errors, node_text

__all__ = [
    "GO_LANGUAGE",
    "GoParser",
    "PackageSource",
    "SourceFile",
    "find_errors",
    "node_text",
]
