# guit/core/SelectableList.py
"""SelectableList.py
========================
A cursor-tracking container over an ordered sequence of items.

The cursor is either unset (``None``) or a valid index into the items; an
empty list never has a cursor. Movement wraps around in both directions, so
the list has no "end": stepping past the last item lands on the first and
vice versa. Callers never do index arithmetic themselves, they only move
the cursor with :meth:`next` / :meth:`previous` and read :attr:`selected`.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Generic, Optional, TypeVar


T = TypeVar("T")


class SelectableList(Generic[T]):
    """Ordered items plus an optional cursor with wrap-around movement."""

    def __init__(self, items: Optional[Iterable[T]] = None) -> None:
        self._items: list[T] = list(items) if items is not None else []
        self._selected: Optional[int] = None

    @classmethod
    def with_items(cls, items: Iterable[T]) -> "SelectableList[T]":
        """Builds a list over *items* with no cursor set."""
        return cls(items)

    @property
    def items(self) -> tuple[T, ...]:
        return tuple(self._items)

    @property
    def selected(self) -> Optional[int]:
        """Index of the highlighted item, or None when nothing is selected."""
        return self._selected

    @property
    def selected_item(self) -> Optional[T]:
        if self._selected is None:
            return None
        return self._items[self._selected]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"SelectableList(len={len(self._items)}, selected={self._selected})"

    def next(self) -> None:
        """Moves the cursor down one item, wrapping to the first. No-op when empty."""
        if not self._items:
            return
        if self._selected is None:
            self._selected = 0
        else:
            self._selected = (self._selected + 1) % len(self._items)

    def previous(self) -> None:
        """Moves the cursor up one item, wrapping to the last. No-op when empty.

        With no cursor set, the first call selects index 0 (same as :meth:`next`).
        """
        if not self._items:
            return
        if self._selected is None:
            self._selected = 0
        else:
            self._selected = (self._selected + len(self._items) - 1) % len(self._items)

    def replace_items(self, items: Iterable[T]) -> None:
        """Swaps in a refreshed item set, keeping the cursor valid.

        A cursor past the new end is clamped to the last item; an empty
        refresh unsets it.
        """
        self._items = list(items)
        if not self._items:
            self._selected = None
        elif self._selected is not None and self._selected >= len(self._items):
            self._selected = len(self._items) - 1
