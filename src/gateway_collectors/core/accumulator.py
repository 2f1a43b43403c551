"""Insertion-ordered keyed store of collected items.

A key present in a :class:`Collection` means the item is currently
collected.  Re-setting an existing key replaces the item but keeps its
original position, so repeated reactions with the same emoji collapse into
one entry.
"""

from __future__ import annotations

from typing import Iterator, MutableMapping, Optional, TypeVar

T = TypeVar("T")


class Collection(MutableMapping[str, T]):
    """Ordered ``str -> item`` mapping owned by a single collector."""

    def __init__(self) -> None:
        self._items: dict[str, T] = {}

    def __getitem__(self, key: str) -> T:
        return self._items[key]

    def __setitem__(self, key: str, item: T) -> None:
        self._items[key] = item

    def __delitem__(self, key: str) -> None:
        del self._items[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Collection({self._items!r})"

    # ------------------------------------------------------------------
    # Convenience API
    # ------------------------------------------------------------------

    @property
    def size(self) -> int:
        return len(self._items)

    def set(self, key: str, item: T) -> None:
        self._items[key] = item

    def has(self, key: str) -> bool:
        return key in self._items

    def delete(self, key: str) -> bool:
        """Remove *key*; return whether anything was removed."""
        if key in self._items:
            del self._items[key]
            return True
        return False

    def first(self) -> Optional[T]:
        return next(iter(self._items.values()), None)

    def last(self) -> Optional[T]:
        return next(reversed(self._items.values()), None)

    def snapshot(self) -> dict[str, T]:
        """Return an independent ordered copy of the current entries."""
        return dict(self._items)
