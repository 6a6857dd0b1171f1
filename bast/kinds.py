"""Declaration kinds."""

from __future__ import annotations

from enum import Enum


class DeclKind(Enum):
    """Kind of a top level declaration in the IR."""

    VAR = "var"
    CONST = "const"
    TYPE = "type"
    FUNC = "func"
    METHOD = "method"
    STRUCT = "struct"
    INTERFACE = "interface"
