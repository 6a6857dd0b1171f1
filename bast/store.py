"""
Ordered declaration store.

Insertion-ordered, string-keyed maps used for packages, files, imports,
declarations and fields. Iteration always follows insertion order, which
for lowered entities is source order.

Maps are writable while the IR is being built and are frozen once lowering
completes, after which any write raises FrozenStoreError.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Generic, TypeVar

from .errors import FrozenStoreError

V = TypeVar("V")


class OrderedMap(Generic[V]):
    """A string-keyed map that remembers insertion order."""

    __slots__ = ("_items", "_frozen")

    def __init__(self) -> None:
        self._items: dict[str, V] = {}
        self._frozen = False

    def put(self, key: str, value: V) -> bool:
        """
        Store value under key if the key is not taken yet.

        Args:
            key: Map key
            value: Value to store

        Returns:
            True if the value was stored, False if key already existed

        Raises:
            FrozenStoreError: If the map has been frozen
        """
        if self._frozen:
            raise FrozenStoreError(f"cannot put {key!r}: map is frozen")
        if key in self._items:
            return False
        self._items[key] = value
        return True

    def get(self, key: str, default: V | None = None) -> V | None:
        return self._items.get(key, default)

    def keys(self) -> list[str]:
        return list(self._items.keys())

    def values(self) -> list[V]:
        return list(self._items.values())

    def items(self) -> list[tuple[str, V]]:
        return list(self._items.items())

    def first(self) -> V | None:
        """Return the first inserted value or None if the map is empty."""
        for value in self._items.values():
            return value
        return None

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __getitem__(self, key: str) -> V:
        return self._items[key]

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"OrderedMap({list(self._items)!r})"
