"""
Symbol table model for basic type resolution.

A Scope maps identifiers to TypeName objects. Each TypeName carries a
GoType whose underlying() yields the next type in its definition chain:
a Basic or Composite type is its own underlying type, a Named type's
underlying type is the type it was defined from, and an Unresolved type has
no underlying type at all.

Any object with a compatible lookup(name) method can serve as a package
scope, so scopes produced by an external type checker can be plugged in.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

# Predeclared basic type names.
PREDECLARED_TYPES = frozenset(
    {
        "bool",
        "byte",
        "complex64",
        "complex128",
        "float32",
        "float64",
        "int",
        "int8",
        "int16",
        "int32",
        "int64",
        "rune",
        "string",
        "uint",
        "uint8",
        "uint16",
        "uint32",
        "uint64",
        "uintptr",
    }
)

_WHITESPACE = re.compile(r"\s+")


class GoType:
    """Base of all types in a scope."""

    def underlying(self) -> GoType | None:
        raise NotImplementedError

    def __str__(self) -> str:
        raise NotImplementedError


class Basic(GoType):
    """A predeclared basic type."""

    def __init__(self, name: str):
        self.name = name

    def underlying(self) -> GoType:
        return self

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Basic({self.name!r})"


class Composite(GoType):
    """A type literal such as a struct, slice, map or func type."""

    def __init__(self, text: str):
        self.text = _WHITESPACE.sub(" ", text).strip()

    def underlying(self) -> GoType:
        return self

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"Composite({self.text!r})"


class Unresolved(GoType):
    """A type whose definition is not available."""

    def __init__(self, text: str):
        self.text = text

    def underlying(self) -> GoType | None:
        return None

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"Unresolved({self.text!r})"


class Named(GoType):
    """A defined type. Its definition is resolved lazily on first use."""

    def __init__(self, package_path: str, name: str, resolve: Callable[[], GoType | None]):
        self.package_path = package_path
        self.name = name
        self._resolve = resolve
        self._underlying: GoType | None = None
        self._resolved = False

    def underlying(self) -> GoType | None:
        if not self._resolved:
            self._resolved = True
            self._underlying = self._resolve()
        return self._underlying

    def __str__(self) -> str:
        if self.package_path:
            return f"{self.package_path}.{self.name}"
        return self.name

    def __repr__(self) -> str:
        return f"Named({str(self)!r})"


@dataclass
class TypeName:
    """A type name object in a scope.

    For aliases the type is the aliased type itself, as in Go.
    """

    name: str = ""
    type_factory: Callable[[], GoType] | None = field(default=None, repr=False)
    is_alias: bool = False
    _type: GoType | None = field(default=None, repr=False)

    @property
    def type(self) -> GoType:
        if self._type is None:
            # Stays Unresolved if the factory reaches this name again, as in "type A = A".
            self._type = Unresolved(self.name)
            if self.type_factory is not None:
                self._type = self.type_factory()
        return self._type


class ScopeLike(Protocol):
    """Anything a package scope can be: Scope or a type checker's scope."""

    def lookup(self, name: str) -> TypeName | None: ...


class Scope:
    """Maps identifiers to type names in declaration order."""

    def __init__(self, parent: Scope | None = None):
        self.parent = parent
        self._names: dict[str, TypeName] = {}

    def insert(self, obj: TypeName) -> TypeName | None:
        """Insert obj unless its name is taken; return the existing object if it is."""
        existing = self._names.get(obj.name)
        if existing is not None:
            return existing
        self._names[obj.name] = obj
        return None

    def lookup(self, name: str) -> TypeName | None:
        return self._names.get(name)

    def lookup_parent(self, name: str) -> TypeName | None:
        """Look name up in this scope and then in its parents."""
        scope: Scope | None = self
        while scope is not None:
            obj = scope.lookup(name)
            if obj is not None:
                return obj
            scope = scope.parent
        return None

    def names(self) -> list[str]:
        return list(self._names)

    def __len__(self) -> int:
        return len(self._names)


def _universe() -> Scope:
    scope = Scope()
    for name in sorted(PREDECLARED_TYPES):
        basic = Basic(name)
        scope.insert(TypeName(name=name, _type=basic))
    error_type = Named("", "error", lambda: Composite("interface{Error() string}"))
    scope.insert(TypeName(name="error", _type=error_type))
    scope.insert(TypeName(name="any", _type=Composite("any"), is_alias=True))
    scope.insert(TypeName(name="comparable", _type=Named("", "comparable", lambda: Composite("interface{comparable}"))))
    return scope


# Scope of predeclared identifiers, the parent of every package scope.
UNIVERSE = _universe()
