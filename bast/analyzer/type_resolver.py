"""
Basic type resolution.

Follows the definition chain of a type name through package scopes until a
predeclared basic type (or another fixed point) is reached.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from .import_resolver import resolve_import, split_selector
from .types import PREDECLARED_TYPES, GoType, TypeName

if TYPE_CHECKING:
    from ..model import File, Package

logger = logging.getLogger(__name__)


def lookup_type_name(packages: Iterable[Package], type_name: str, file: File | None = None) -> TypeName | None:
    """
    Look up the type name object for type_name.

    Unqualified names are searched in every package scope and the first match
    wins. Qualified names ("pkg.Name") are resolved through the imports of
    file when given; without a file the first package named pkg is used.

    Args:
        packages: Loaded packages in load order
        type_name: Type name, optionally qualified
        file: File providing the import context for qualified names

    Returns:
        The TypeName found or None
    """
    packages = list(packages)
    parts = split_selector(type_name)
    if parts is None:
        for pkg in packages:
            if pkg.scope is None:
                continue
            obj = pkg.scope.lookup(type_name)
            if obj is not None:
                return obj
        return None

    pkg_name, name = parts
    target: Package | None = None
    if file is not None:
        imp = resolve_import(file, type_name)
        if imp is not None:
            target = next((pkg for pkg in packages if pkg.path == imp.path), None)
    else:
        target = next((pkg for pkg in packages if pkg.name == pkg_name), None)

    if target is None or target.scope is None:
        return None
    return target.scope.lookup(name)


def underlying_chain(typ: GoType) -> str:
    """Unwrap typ until its underlying type is itself or unavailable."""
    seen: set[int] = set()
    while True:
        under = typ.underlying()
        if under is None:
            return str(typ)
        if under is typ:
            break
        if id(typ) in seen:
            logger.debug("Type cycle detected at %s", typ)
            break
        seen.add(id(typ))
        typ = under
    return str(typ)


def resolve_basic_type(packages: Iterable[Package], type_name: str, file: File | None = None) -> str:
    """
    Resolve the basic type a type name derives from.

    Args:
        packages: Loaded packages in load order
        type_name: Type name, optionally qualified
        file: File providing the import context for qualified names

    Returns:
        Name of the basic type, type_name itself if it is a predeclared basic
        type, or an empty string if it could not be resolved
    """
    obj = lookup_type_name(packages, type_name, file)
    if obj is None:
        if type_name in PREDECLARED_TYPES:
            return type_name
        return ""
    return underlying_chain(obj.type)
