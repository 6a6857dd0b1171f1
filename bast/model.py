"""
Declaration model.

These entities are the IR produced by lowering Go syntax trees. They are
denormalized for easy traversal from templates: every type expression is kept
as its source text and every list is an OrderedMap in source order.

Ownership is tree shaped (Package -> File -> Declaration -> Field). Upward
links (File -> Package, Declaration -> File, Package -> Bast) are weak
references so the ownership graph stays acyclic.
"""

from __future__ import annotations

import re
import weakref
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

from .analyzer import queries
from .analyzer.import_resolver import resolve_import
from .analyzer.type_resolver import resolve_basic_type
from .errors import SyntaxIssue
from .kinds import DeclKind
from .store import OrderedMap

if TYPE_CHECKING:
    from .analyzer.types import ScopeLike
    from .api import Bast

# Major version path suffix such as "v2" in "example.com/repo/v2".
_VERSION_SUFFIX = re.compile(r"^[A-Za-z][0-9]+$")


def _deref(ref: weakref.ReferenceType | None) -> Any:
    return ref() if ref is not None else None


@dataclass(frozen=True, eq=False)
class Package:
    """A Go package."""

    # Name is the package name as it appears in the package clause.
    name: str = ""
    # Path is the package import path and the identity of the package.
    path: str = ""
    files: OrderedMap[File] = field(default_factory=OrderedMap)
    # Optional symbol table used for basic type resolution.
    scope: ScopeLike | None = field(default=None, repr=False)
    # Syntax errors reported for this package when loading leniently.
    errors: list[SyntaxIssue] = field(default_factory=list, repr=False)
    bast_ref: weakref.ReferenceType | None = field(default=None, repr=False)

    @property
    def bast(self) -> Bast | None:
        return _deref(self.bast_ref)

    def declarations(self) -> list[Declaration]:
        """Return all declarations of all files in file order."""
        return [decl for file in self.files.values() for decl in file.declarations.values()]

    def var(self, name: str) -> Var | None:
        return queries.named_decl([self], DeclKind.VAR, name)

    def const(self, name: str) -> Const | None:
        return queries.named_decl([self], DeclKind.CONST, name)

    def type(self, name: str) -> Type | None:
        return queries.named_decl([self], DeclKind.TYPE, name)

    def func(self, name: str) -> Func | None:
        return queries.named_decl([self], DeclKind.FUNC, name)

    def method(self, name: str) -> Method | None:
        return queries.named_decl([self], DeclKind.METHOD, name)

    def struct(self, name: str) -> Struct | None:
        return queries.named_decl([self], DeclKind.STRUCT, name)

    def interface(self, name: str) -> Interface | None:
        return queries.named_decl([self], DeclKind.INTERFACE, name)

    def decl_file(self, name: str) -> str:
        """Return the path of the file declaring name, or an empty string."""
        for file in self.files.values():
            if file.has_decl(name):
                return file.name
        return ""

    def has_decl(self, name: str) -> bool:
        return self.decl_file(name) != ""


@dataclass(frozen=True, eq=False)
class File:
    """A Go source file."""

    # Name is the full path of the file and its identity.
    name: str = ""
    # Name from the package clause.
    package_name: str = ""
    # All comment groups of the file, docs included, each a tuple of raw lines.
    comments: tuple[tuple[str, ...], ...] = ()
    # Doc comment of the package clause.
    doc: tuple[str, ...] = ()
    # Imports keyed by unquoted import path.
    imports: OrderedMap[Import] = field(default_factory=OrderedMap)
    declarations: OrderedMap[Declaration] = field(default_factory=OrderedMap)
    package_ref: weakref.ReferenceType | None = field(default=None, repr=False)

    @property
    def package(self) -> Package | None:
        return _deref(self.package_ref)

    def var(self, name: str) -> Var | None:
        return self._decl(DeclKind.VAR, name)

    def const(self, name: str) -> Const | None:
        return self._decl(DeclKind.CONST, name)

    def type(self, name: str) -> Type | None:
        return self._decl(DeclKind.TYPE, name)

    def func(self, name: str) -> Func | None:
        return self._decl(DeclKind.FUNC, name)

    def method(self, name: str) -> Method | None:
        return self._decl(DeclKind.METHOD, name)

    def struct(self, name: str) -> Struct | None:
        return self._decl(DeclKind.STRUCT, name)

    def interface(self, name: str) -> Interface | None:
        return self._decl(DeclKind.INTERFACE, name)

    def has_decl(self, name: str) -> bool:
        """Report whether a declaration is stored under name or named name."""
        if name in self.declarations:
            return True
        return any(decl.name == name for decl in self.declarations.values())

    def import_spec_from_selector(self, selector: str) -> Import | None:
        """Return the import a selector such as "pkg.Name" refers to, or None."""
        return resolve_import(self, selector)

    def _decl(self, kind: DeclKind, name: str) -> Any:
        decl = self.declarations.get(name)
        if decl is not None and decl.kind is kind:
            return decl
        for decl in self.declarations.values():
            if decl.kind is kind and decl.name == name:
                return decl
        return None


@dataclass(frozen=True, eq=False)
class Import:
    """A package import of a File."""

    # Name is empty, "." for dot imports, "_" for blank imports or an alias.
    name: str = ""
    # Path is the unquoted import path.
    path: str = ""
    doc: tuple[str, ...] = ()
    comment: tuple[str, ...] = ()

    @property
    def base(self) -> str:
        """Name an unaliased import is referred to by in selectors.

        This is the last path element, or the element before it when the last
        one is a major version suffix ("example.com/repo/v2" -> "repo").
        """
        parts = [part for part in self.path.split("/") if part]
        if not parts:
            return ""
        if len(parts) > 1 and _VERSION_SUFFIX.match(parts[-1]):
            return parts[-2]
        return parts[-1]


@dataclass(frozen=True, eq=False)
class Model:
    """Base with the attributes shared by declarations and fields."""

    name: str = ""
    doc: tuple[str, ...] = ()
    # Trailing comment on the same line as the declaration.
    comment: tuple[str, ...] = ()
    file_ref: weakref.ReferenceType | None = field(default=None, repr=False)

    @property
    def file(self) -> File | None:
        return _deref(self.file_ref)

    @property
    def package(self) -> Package | None:
        file = self.file
        return file.package if file is not None else None

    def import_spec_by_selector(self, selector: str) -> Import | None:
        """Resolve selector against the imports of the declaring file."""
        file = self.file
        if file is None:
            return None
        return resolve_import(file, selector)

    def resolve_basic_type(self, type_name: str) -> str:
        """Return the basic type type_name derives from, or an empty string.

        Qualified names are resolved through the imports of the declaring file.
        Requires type scopes on the loaded packages.
        """
        package = self.package
        if package is None:
            return resolve_basic_type([], type_name)
        bast = package.bast
        packages = bast.packages.values() if bast is not None else [package]
        return resolve_basic_type(packages, type_name, file=self.file)


@dataclass(frozen=True, eq=False)
class Declaration(Model):
    """Base of all top level declarations, identified by their kind."""

    kind: ClassVar[DeclKind]


@dataclass(frozen=True, eq=False)
class Field(Model):
    """A struct field, receiver, parameter, result or type parameter.

    For unnamed struct fields and interface embeds name equals type and
    unnamed is True. Receivers store the bare type name; pointer is True if
    the receiver was declared with a "*".
    """

    type: str = ""
    # Raw tag literal including its quotes.
    tag: str = ""
    unnamed: bool = False
    pointer: bool = False


@dataclass(frozen=True, eq=False)
class Var(Declaration):
    """A variable. type is empty if implicit, value is empty if not set."""

    kind: ClassVar[DeclKind] = DeclKind.VAR

    type: str = ""
    value: str = ""


@dataclass(frozen=True, eq=False)
class Const(Declaration):
    """A constant. type is empty if implicit, value is empty if not set."""

    kind: ClassVar[DeclKind] = DeclKind.CONST

    type: str = ""
    value: str = ""


@dataclass(frozen=True, eq=False)
class Type(Declaration):
    """A defined type or an alias."""

    kind: ClassVar[DeclKind] = DeclKind.TYPE

    # Source text of the right hand side type expression.
    type: str = ""
    is_alias: bool = False
    type_params: OrderedMap[Field] = field(default_factory=OrderedMap)


@dataclass(frozen=True, eq=False)
class Func(Declaration):
    """A function."""

    kind: ClassVar[DeclKind] = DeclKind.FUNC

    type_params: OrderedMap[Field] = field(default_factory=OrderedMap)
    params: OrderedMap[Field] = field(default_factory=OrderedMap)
    results: OrderedMap[Field] = field(default_factory=OrderedMap)

    @property
    def signature(self) -> str:
        """Parameters and results rendered as Go source, e.g. "(a int) error"."""
        params = f"({_join_fields(self.params)})"
        results = self.results.values()
        if not results:
            return params
        if len(results) == 1 and results[0].unnamed:
            return f"{params} {results[0].type}"
        return f"{params} ({_join_fields(self.results)})"


@dataclass(frozen=True, eq=False)
class Method(Func):
    """A method. receiver is None for interface methods."""

    kind: ClassVar[DeclKind] = DeclKind.METHOD

    receiver: Field | None = None


@dataclass(frozen=True, eq=False)
class Struct(Declaration):
    """A struct type."""

    kind: ClassVar[DeclKind] = DeclKind.STRUCT

    fields: OrderedMap[Field] = field(default_factory=OrderedMap)
    type_params: OrderedMap[Field] = field(default_factory=OrderedMap)

    def methods(self) -> list[Method]:
        """Return methods of this struct declared anywhere in its package."""
        package = self.package
        if package is None:
            return []
        return queries.method_set([package], self.name)

    def field_names(self) -> list[str]:
        return [f.name for f in self.fields.values()]


@dataclass(frozen=True, eq=False)
class Interface(Declaration):
    """An interface type.

    methods holds named methods; interfaces holds embedded interfaces and
    type set elements keyed by their type text.
    """

    kind: ClassVar[DeclKind] = DeclKind.INTERFACE

    methods: OrderedMap[Method] = field(default_factory=OrderedMap)
    interfaces: OrderedMap[Field] = field(default_factory=OrderedMap)
    type_params: OrderedMap[Field] = field(default_factory=OrderedMap)


def _join_fields(fields: OrderedMap[Field]) -> str:
    parts = []
    for f in fields.values():
        parts.append(f.type if f.unnamed else f"{f.name} {f.type}")
    return ", ".join(parts)
