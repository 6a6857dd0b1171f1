"""
Declaration derived package scopes.

Builds a Scope of type names for a lowered package so basic type resolution
works without an external type checker. Only type names are entered; the
right hand side of each type declaration is resolved lazily, on first use,
against the package scope, the universe, or the scope of an imported package.
"""

from __future__ import annotations

import re
from functools import partial
from typing import TYPE_CHECKING

from ..kinds import DeclKind
from .import_resolver import resolve_import
from .types import UNIVERSE, Composite, GoType, Named, Scope, TypeName

if TYPE_CHECKING:
    from ..model import File, Interface, Package, Struct

_IDENT = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_QUALIFIED = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*\.[A-Za-z_][A-Za-z0-9_]*$")


def build_scope(package: Package, scope: Scope | None = None) -> Scope:
    """
    Build the type scope of a lowered package.

    Args:
        package: Package whose files have been lowered
        scope: Scope to fill, a new one below the universe if omitted

    Returns:
        Scope with one TypeName per type, struct and interface declaration
    """
    if scope is None:
        scope = Scope(parent=UNIVERSE)
    for file in package.files.values():
        for decl in file.declarations.values():
            if decl.kind is DeclKind.TYPE:
                resolve = partial(_resolve_expr, scope, file, decl.type)
                if decl.is_alias:
                    obj = TypeName(name=decl.name, type_factory=partial(_alias_type, resolve, decl.type), is_alias=True)
                else:
                    obj = TypeName(name=decl.name, _type=Named(package.path, decl.name, resolve))
            elif decl.kind is DeclKind.STRUCT:
                obj = TypeName(name=decl.name, _type=Named(package.path, decl.name, partial(Composite, struct_text(decl))))
            elif decl.kind is DeclKind.INTERFACE:
                obj = TypeName(name=decl.name, _type=Named(package.path, decl.name, partial(Composite, interface_text(decl))))
            else:
                continue
            scope.insert(obj)
    return scope


def struct_text(struct: Struct) -> str:
    """Render a struct's type literal, e.g. "struct{A int; B string}"."""
    parts = []
    for f in struct.fields.values():
        text = f.type if f.unnamed else f"{f.name} {f.type}"
        if f.tag:
            text = f"{text} {f.tag}"
        parts.append(text)
    return "struct{" + "; ".join(parts) + "}"


def interface_text(interface: Interface) -> str:
    """Render an interface's type literal, e.g. "interface{io.Reader; Foo()}"."""
    parts = [f.type for f in interface.interfaces.values()]
    parts.extend(f"{m.name}{m.signature}" for m in interface.methods.values())
    return "interface{" + "; ".join(parts) + "}"


def _alias_type(resolve, text: str) -> GoType:
    typ = resolve()
    return typ if typ is not None else Composite(text)


def _resolve_expr(scope: Scope, file: File, text: str) -> GoType | None:
    """Resolve a type expression to the type it denotes, or None if unknown."""
    text = text.strip()
    if _IDENT.match(text):
        obj = scope.lookup_parent(text)
        return obj.type if obj is not None else None

    if _QUALIFIED.match(text):
        imp = resolve_import(file, text)
        package = file.package
        bast = package.bast if package is not None else None
        if imp is None or bast is None:
            return None
        target = bast.packages.get(imp.path)
        if target is None or target.scope is None:
            return None
        obj = target.scope.lookup(text.split(".", 1)[1])
        return obj.type if obj is not None else None

    return Composite(text)
