"""bast: basic AST for Go

Lowers Go source files into a flat, queryable model of their top level
declarations and resolves selectors, basic types and method sets over it.
Meant to be traversed from code generation templates.
"""

__version__ = "0.1.0"

from .api import Bast
from .config import LoadConfig, PrinterConfig
from .errors import BastError, FrozenStoreError, LoadError, LoweringIssue, SyntaxIssue, TemplateError
from .kinds import DeclKind
from .loader import PLACEHOLDER_PACKAGE, load, parse_source
from .model import Const, Declaration, Field, File, Func, Import, Interface, Method, Package, Struct, Type, Var
from .printer import format_bast, print_bast
from .store import OrderedMap

__all__ = [
    "Bast",
    "LoadConfig",
    "PrinterConfig",
    "BastError",
    "FrozenStoreError",
    "LoadError",
    "LoweringIssue",
    "SyntaxIssue",
    "TemplateError",
    "DeclKind",
    "PLACEHOLDER_PACKAGE",
    "load",
    "parse_source",
    "Const",
    "Declaration",
    "Field",
    "File",
    "Func",
    "Import",
    "Interface",
    "Method",
    "Package",
    "Struct",
    "Type",
    "Var",
    "format_bast",
    "print_bast",
    "OrderedMap",
]
