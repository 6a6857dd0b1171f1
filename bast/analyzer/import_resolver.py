"""
Import selector resolution.

Maps the package part of a qualified selector ("pkg.Name") to one of the
imports of a file. This is a heuristic, not Go's import resolution: an
explicit alias wins, then an unaliased import whose path base matches. Two
unaliased imports sharing a base resolve to the first one in file order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..model import File, Import


def split_selector(selector: str) -> tuple[str, str] | None:
    """
    Split a qualified selector into package and name.

    Args:
        selector: Selector such as "pkg.Name"

    Returns:
        (package, name) or None if selector is not a valid qualified selector
    """
    pkg, sep, name = selector.partition(".")
    if not sep or not pkg or not name:
        return None
    return pkg, name


def resolve_import(file: File, selector: str) -> Import | None:
    """
    Find the import of file that the package part of selector refers to.

    Args:
        file: File whose imports are searched
        selector: Qualified selector such as "pkg.Name"

    Returns:
        The matching Import or None if selector is invalid or nothing matches
    """
    parts = split_selector(selector)
    if parts is None:
        return None
    pkg = parts[0]

    imports = file.imports.values()

    # Explicit aliases first.
    for imp in imports:
        if imp.name and imp.name == pkg:
            return imp

    # Then the base of unaliased imports, version suffixes skipped.
    for imp in imports:
        if not imp.name and imp.base == pkg:
            return imp

    return None
