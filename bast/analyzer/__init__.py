"""
Analyzer module.

Contains import selector resolution, declaration queries, symbol tables and
basic type resolution over the lowered IR.
"""

from __future__ import annotations

from .import_resolver import resolve_import, split_selector
from .scope_builder import build_scope
from .type_resolver import lookup_type_name, resolve_basic_type
from .types import PREDECLARED_TYPES, UNIVERSE, Basic, Composite, GoType, Named, Scope, ScopeLike, TypeName, Unresolved

__all__ = [
    "resolve_import",
    "split_selector",
    "build_scope",
    "lookup_type_name",
    "resolve_basic_type",
    "PREDECLARED_TYPES",
    "UNIVERSE",
    "Basic",
    "Composite",
    "GoType",
    "Named",
    "Scope",
    "ScopeLike",
    "TypeName",
    "Unresolved",
]
