"""
Declaration lookup and filter queries.

All queries are ordered traversals over packages, files and declarations in
insertion order. Declarations are filtered by their DeclKind; lookups return
the first match and list queries return new lists.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Any

from ..kinds import DeclKind

if TYPE_CHECKING:
    from ..model import Declaration, Method, Package

# Kinds whose declared type text is compared by typed_decls.
_TYPED_KINDS = {DeclKind.VAR, DeclKind.CONST, DeclKind.TYPE}


def find_package(packages: Iterable[Package], key: str) -> Package | None:
    """Find a package by import path, falling back to its short name."""
    packages = list(packages)
    for pkg in packages:
        if pkg.path == key:
            return pkg
    for pkg in packages:
        if pkg.name == key:
            return pkg
    return None


def iter_decls(packages: Iterable[Package], kind: DeclKind | None = None) -> Iterator[Declaration]:
    for pkg in packages:
        for file in pkg.files.values():
            for decl in file.declarations.values():
                if kind is None or decl.kind is kind:
                    yield decl


def named_decl(packages: Iterable[Package], kind: DeclKind, name: str) -> Any:
    """Return the first declaration of kind named name, or None."""
    for decl in iter_decls(packages, kind):
        if decl.name == name:
            return decl
    return None


def kind_decls(packages: Iterable[Package], kind: DeclKind) -> list[Any]:
    return list(iter_decls(packages, kind))


def typed_decls(packages: Iterable[Package], kind: DeclKind, type_name: str) -> list[Any]:
    """
    Return declarations of kind whose declared type text equals type_name.

    The comparison is textual: a var of type MyInt does not match "int" even
    if MyInt is defined as int.

    Args:
        packages: Packages to search
        kind: One of DeclKind.VAR, DeclKind.CONST or DeclKind.TYPE
        type_name: Type text to match exactly

    Returns:
        Matching declarations in source order
    """
    if kind not in _TYPED_KINDS:
        raise ValueError(f"declarations of kind {kind.value} have no declared type")
    return [decl for decl in iter_decls(packages, kind) if decl.type == type_name]


def method_set(packages: Iterable[Package], type_name: str) -> list[Method]:
    """
    Return methods whose receiver type is type_name.

    A leading "*" is ignored on both sides so value and pointer receiver
    methods are returned for either form of type_name.
    """
    type_name = type_name.lstrip("*")
    out = []
    for decl in iter_decls(packages, DeclKind.METHOD):
        receiver = decl.receiver
        if receiver is not None and receiver.type.lstrip("*") == type_name:
            out.append(decl)
    return out


def field_names(packages: Iterable[Package], struct_name: str) -> list[str]:
    """Return field names of the first struct named struct_name."""
    struct = named_decl(packages, DeclKind.STRUCT, struct_name)
    if struct is None:
        return []
    return [f.name for f in struct.fields.values()]
