"""
Concrete cursors: sources (lists, ranges, repeats, Python iterators) and the
pipeline stages behind Iterable's lazy operations.

Stages that must know whether another matching element exists (where,
take_while, skip_while, skip_last) pull from upstream into a lookahead
buffer when constructed and again after each vended element, so
has_elements() can answer without pulling on the caller's behalf.
"""

from collections import deque
from typing import Any, Callable, Iterator, List

from protocols import Cursor


_MISSING = object()


# ---------- Sources ----------

class ListCursor(Cursor):
    """Walks a backing list from ``start``; reads the list live on every pull"""

    def __init__(self, data: List[Any], start: int = 0):
        self._data = data
        self._i = start

    def has_elements(self) -> bool:
        return self._i < len(self._data)

    def _advance(self):
        item = self._data[self._i]
        self._i += 1
        return item


class RangeCursor(Cursor):
    """Arithmetic progression, unbounded when ``stop`` is None"""

    def __init__(self, start, step, stop=None):
        self._current = start
        self._step = step
        self._stop = stop

    def has_elements(self) -> bool:
        if self._stop is None:
            return True
        if self._step > 0:
            return self._current < self._stop
        return self._current > self._stop

    def _advance(self):
        result = self._current
        self._current += self._step
        return result


class RepeatCursor(Cursor):
    def __init__(self, value):
        self._value = value

    def has_elements(self) -> bool:
        return True

    def _advance(self):
        return self._value


class IteratorCursor(Cursor):
    """Adapts a Python iterator using a one-slot lookahead buffer"""

    def __init__(self, iterator: Iterator[Any]):
        self._iterator = iterator
        self._buffer = next(self._iterator, _MISSING)

    def has_elements(self) -> bool:
        return self._buffer is not _MISSING

    def _advance(self):
        result = self._buffer
        self._buffer = next(self._iterator, _MISSING)
        return result


# ---------- Pipeline stages ----------

class TakeCursor(Cursor):
    def __init__(self, upstream: Cursor, limit: int):
        self._upstream = upstream
        self._remaining = limit

    def has_elements(self) -> bool:
        return self._remaining > 0 and self._upstream.has_elements()

    def _advance(self):
        self._remaining -= 1
        return self._upstream.next()


class SkipCursor(Cursor):
    """Discards up to ``count`` leading elements immediately, then passes through"""

    def __init__(self, upstream: Cursor, count: int):
        self._upstream = upstream
        skipped = 0
        while skipped < count and upstream.has_elements():
            upstream.next()
            skipped += 1
        self.skipped = skipped

    def has_elements(self) -> bool:
        return self._upstream.has_elements()

    def _advance(self):
        return self._upstream.next()


class SelectCursor(Cursor):
    def __init__(self, upstream: Cursor, mapper: Callable[[Any], Any]):
        self._upstream = upstream
        self._mapper = mapper

    def has_elements(self) -> bool:
        return self._upstream.has_elements()

    def _advance(self):
        return self._mapper(self._upstream.next())


class WhereCursor(Cursor):
    """Surfaces only elements matching ``predicate``"""

    def __init__(self, upstream: Cursor, predicate: Callable[[Any], bool]):
        self._upstream = upstream
        self._predicate = predicate
        self._buffer = None
        self._has_next = False
        self._fill()

    def _fill(self):
        while self._upstream.has_elements():
            item = self._upstream.next()
            if self._predicate(item):
                self._buffer = item
                self._has_next = True
                return
        self._buffer = None
        self._has_next = False

    def has_elements(self) -> bool:
        return self._has_next

    def _advance(self):
        result = self._buffer
        self._fill()
        return result


class TakeWhileCursor(Cursor):
    """
    Vends elements until the first one failing ``predicate``. The failing
    element is consumed and dropped; nothing after it is pulled.
    """

    def __init__(self, upstream: Cursor, predicate: Callable[[Any], bool]):
        self._upstream = upstream
        self._predicate = predicate
        self._buffer = None
        self._has_next = False
        self._fill()

    def _fill(self):
        self._has_next = False
        self._buffer = None
        if self._upstream.has_elements():
            item = self._upstream.next()
            if self._predicate(item):
                self._buffer = item
                self._has_next = True

    def has_elements(self) -> bool:
        return self._has_next

    def _advance(self):
        result = self._buffer
        self._fill()
        return result


class SkipWhileCursor(Cursor):
    """
    Drops the leading run matching ``predicate`` when constructed. The first
    survivor is held as the head; everything after it passes straight through.
    """

    def __init__(self, upstream: Cursor, predicate: Callable[[Any], bool]):
        self._upstream = upstream
        self._head = None
        self._has_head = False
        while upstream.has_elements():
            item = upstream.next()
            if not predicate(item):
                self._head = item
                self._has_head = True
                break

    def has_elements(self) -> bool:
        return self._has_head or self._upstream.has_elements()

    def _advance(self):
        if self._has_head:
            result = self._head
            self._head = None
            self._has_head = False
            return result
        return self._upstream.next()


class SkipLastCursor(Cursor):
    """Holds back the final ``count`` elements using a sliding window"""

    def __init__(self, upstream: Cursor, count: int):
        self._upstream = upstream
        self._held = max(count, 0)
        self._window = deque()
        self._fill()

    def _fill(self):
        while len(self._window) <= self._held and self._upstream.has_elements():
            self._window.append(self._upstream.next())

    def has_elements(self) -> bool:
        return len(self._window) > self._held

    def _advance(self):
        result = self._window.popleft()
        self._fill()
        return result

