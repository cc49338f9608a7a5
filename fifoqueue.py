"""
FIFO queue on a single growable list.

Dequeue advances a front offset instead of shifting the list. Once the
consumed prefix reaches half of the backing list it is dropped in one go,
keeping the amortized cost of dequeue constant.
"""

import logging
from typing import Any, List

from cursors import ListCursor
from enumerable import Enumerable

logger = logging.getLogger(__name__)


class Queue(Enumerable):
    """
    First-in, first-out queue.

    Logical index 0 is always backing position ``_first``. The element count
    is tracked on every enqueue/dequeue rather than derived from the list,
    so it does not depend on when compaction happens.
    """

    def __init__(self):
        super().__init__([])
        self._first = 0
        self._count = 0

    def iterator(self):
        return ListCursor(self._data, self._first)

    def data(self) -> List[Any]:
        """Return the backing list with the consumed prefix dropped"""
        if self._first != 0:
            self._compact()
        return self._data

    def set_data(self, new_data: List[Any]) -> None:
        self._data = new_data
        self._first = 0
        self._count = len(new_data)

    def enqueue(self, item) -> None:
        self._data.append(item)
        self._count += 1

    def dequeue(self):
        """Remove and return the front item; None when the queue is empty"""
        if self._count == 0:
            return None
        item = self._data[self._first]
        self._first += 1
        self._count -= 1
        if self._first * 2 >= len(self._data):
            self._compact()
        return item

    def peek(self):
        """Return the front item without removing it; None when empty"""
        if self._count == 0:
            return None
        return self._data[self._first]

    def count(self) -> int:
        return self._count

    def to_array(self) -> List[Any]:
        return self._data[self._first:]

    def _compact(self):
        logger.debug(f"Compacting queue: dropping {self._first} of {len(self._data)} slots")
        del self._data[:self._first]
        self._first = 0
