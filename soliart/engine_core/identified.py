"""
IdentifiedList - An ordered collection indexed by element identity.

Order is significant everywhere it is used: the last card of a pile or
foundation is its top, and frames are hit-tested in registration order.
The id index is kept alongside the list so lookups stay O(1).
"""

from __future__ import annotations
from typing import Any, Callable, Generic, Hashable, Iterable, Iterator, TypeVar

T = TypeVar("T")


def _default_id(item: Any) -> Hashable:
    return item.card_id


class IdentifiedList(Generic[T]):
    """
    Ordered sequence of uniquely identified items.

    ``id_of`` extracts an item's identity; two items with the same
    identity can never be held at once.
    """

    def __init__(
        self,
        items: Iterable[T] = (),
        id_of: Callable[[T], Hashable] = _default_id,
    ):
        self._id_of = id_of
        self._items: list[T] = []
        self._index: dict[Hashable, int] = {}
        self.extend(items)

    def append(self, item: T) -> None:
        """Append a new item. Raises ValueError if its id is already present."""
        item_id = self._id_of(item)
        if item_id in self._index:
            raise ValueError(f"Duplicate id in collection: {item_id!r}")
        self._index[item_id] = len(self._items)
        self._items.append(item)

    def extend(self, items: Iterable[T]) -> None:
        for item in items:
            self.append(item)

    def upsert(self, item: T) -> None:
        """Replace the item with the same id in place, or append it."""
        item_id = self._id_of(item)
        position = self._index.get(item_id)
        if position is None:
            self.append(item)
        else:
            self._items[position] = item

    def remove_where(self, predicate: Callable[[T], bool]) -> list[T]:
        """Remove every matching item, returning the removed items in order."""
        removed = [item for item in self._items if predicate(item)]
        if removed:
            self._items = [item for item in self._items if not predicate(item)]
            self._reindex()
        return removed

    def remove(self, item_id: Hashable) -> T | None:
        removed = self.remove_where(lambda item: self._id_of(item) == item_id)
        return removed[0] if removed else None

    def clear(self) -> None:
        self._items = []
        self._index = {}

    def first_index_of(self, item_id: Hashable) -> int | None:
        return self._index.get(item_id)

    def get(self, item_id: Hashable) -> T | None:
        position = self._index.get(item_id)
        return None if position is None else self._items[position]

    def suffix_from(self, position: int) -> list[T]:
        """Items from ``position`` to the end, in order."""
        return self._items[position:]

    def ids(self) -> list[Hashable]:
        return [self._id_of(item) for item in self._items]

    @property
    def last(self) -> T | None:
        return self._items[-1] if self._items else None

    @property
    def is_empty(self) -> bool:
        return not self._items

    def _reindex(self) -> None:
        self._index = {self._id_of(item): i for i, item in enumerate(self._items)}

    def __contains__(self, item: Any) -> bool:
        if isinstance(item, Hashable) and item in self._index:
            return True
        try:
            return self._id_of(item) in self._index
        except AttributeError:
            return False

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, position):
        return self._items[position]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IdentifiedList):
            return NotImplemented
        return self._items == other._items

    def __repr__(self) -> str:
        return f"IdentifiedList({self._items!r})"
