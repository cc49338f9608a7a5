"""
Enumerable: an Iterable over a concrete, indexable list.

The backing list is exposed through data(). Whoever holds that reference may
mutate it and the Enumerable sees the change on its next read; only
to_array() copies.
"""

import logging
from typing import Any, Callable, List, Optional

from cursors import ListCursor
from defaults import strict_equal
from iterable import Iterable, resolve_range_args

logger = logging.getLogger(__name__)


class Enumerable(Iterable):
    """Indexable collection backed by a list (duplicates allowed, order kept)"""

    def __init__(self, data: Optional[List[Any]] = None):
        super().__init__()
        self._data = data if data is not None else []

    def iterator(self):
        return ListCursor(self.data())

    def data(self) -> List[Any]:
        """Return the backing list itself"""
        return self._data

    def set_data(self, new_data: List[Any]) -> None:
        """Replace the backing list wholesale"""
        self._data = new_data

    def count(self) -> int:
        return len(self.data())

    def __len__(self) -> int:
        return self.count()

    def first_index(self, predicate: Callable[[Any], bool]) -> int:
        """Index of the first element matching ``predicate``, or -1"""
        for index, item in enumerate(self.data()):
            if predicate(item):
                return index
        return -1

    def last_index(self, predicate: Callable[[Any], bool]) -> int:
        """Index of the last element matching ``predicate``, or -1"""
        data = self.data()
        for index in range(len(data) - 1, -1, -1):
            if predicate(data[index]):
                return index
        return -1

    def last(self, predicate: Optional[Callable[[Any], bool]] = None, default=None):
        # Scan from the end instead of draining a cursor
        data = self.data()
        if predicate is None:
            return data[-1] if data else default
        for index in range(len(data) - 1, -1, -1):
            if predicate(data[index]):
                return data[index]
        return default

    def remove(self, item, equal: Callable[[Any, Any], bool] = strict_equal) -> None:
        """Remove every element equal to ``item``, in place, keeping survivor order"""
        data = self.data()
        before = len(data)
        data[:] = [element for element in data if not equal(element, item)]
        logger.debug(f"Removed {before - len(data)} element(s) equal to {item!r}")
        self.set_data(data)

    def to_array(self) -> List[Any]:
        return list(self.data())

    @staticmethod
    def range(start=None, step=None, stop=None) -> "Enumerable":
        """
        Materialize ``start, start + step, ...`` (stopping before ``stop``) into
        a list. Takes the same one-, two- and three-argument forms as
        Iterable.range(), but a stop is always required.
        """
        if start is None and stop is None:
            raise ValueError("Enumerable.range() requires a stop")
        start, step, stop = resolve_range_args(start, step, stop)
        return Enumerable(Iterable.progression(start, step, stop).to_array())
