"""
HashSet keyed by a caller-supplied hash function.

Membership and de-duplication are decided by ``hash_fn(item)``, not by the
item itself: the first item stored under a key wins and later items with the
same key are dropped. Iteration order is unspecified.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from cursors import ListCursor
from defaults import default_hash
from iterable import Iterable

logger = logging.getLogger(__name__)


class HashSet:
    """
    Set of items keyed by ``hash_fn`` (canonical JSON by default).

    Example:
        notes = HashSet(lambda note: note % 12)
        notes.add(60)
        notes.add(72)       # same pitch class, dropped
        notes.to_array()    # [60]
    """

    def __init__(self, hash_fn: Optional[Callable[[Any], Any]] = None):
        self._hash = hash_fn or default_hash
        self._entries: Dict[Any, Any] = {}
        self._count = 0

    @property
    def hash_fn(self) -> Callable[[Any], Any]:
        return self._hash

    # --------- iteration ----------
    def iterator(self):
        """Cursor over a snapshot of the current items"""
        return ListCursor(list(self._entries.values()))

    def as_iterable(self) -> Iterable:
        """Expose the set as a re-iterable source for lazy operations"""
        return Iterable(self.iterator)

    def __iter__(self):
        return self.iterator()

    def count(self) -> int:
        return self._count

    def __len__(self) -> int:
        return self._count

    def __contains__(self, item) -> bool:
        return self.contains(item)

    def for_each(self, func: Callable[[Any], Any]) -> None:
        for item in list(self._entries.values()):
            func(item)

    def to_array(self) -> List[Any]:
        return list(self._entries.values())

    # --------- mutation ----------
    def add(self, item) -> None:
        """Store ``item`` unless an item with the same hash is already present"""
        key = self._hash(item)
        if key in self._entries:
            logger.debug(f"Dropped {item!r}: hash {key!r} already held by {self._entries[key]!r}")
            return
        self._entries[key] = item
        self._count += 1

    def add_range(self, items) -> None:
        """Add every item of a list, Iterable, HashSet or other Python iterable"""
        for item in items:
            self.add(item)

    def remove(self, item) -> None:
        """Delete the entry sharing ``item``'s hash; absent items are ignored"""
        key = self._hash(item)
        if key in self._entries:
            del self._entries[key]
            self._count -= 1

    def contains(self, item) -> bool:
        return self._hash(item) in self._entries

    # --------- set algebra ----------
    def union(self, other) -> "HashSet":
        """New set (using this set's hash) holding the items of both"""
        result = HashSet(self._hash)
        result.add_range(self._entries.values())
        result.add_range(other)
        return result

    def intersect(self, other) -> "HashSet":
        """New set (using this set's hash) holding this set's items also found in ``other``"""
        if not isinstance(other, HashSet):
            lookup = HashSet(self._hash)
            lookup.add_range(other)
            other = lookup
        result = HashSet(self._hash)
        for item in self._entries.values():
            if other.contains(item):
                result.add(item)
        return result
