"""
Iterable: a lazy, chainable sequence built on pull cursors.

Nothing runs until a consumer pulls. Lazy operations (where, select, take,
...) take ownership of their parent's cursor when they are constructed and
return a new pipeline wrapping a single stage cursor.

Ownership rules:
  - A root Iterable (built from a factory, range(), repeat(), or a concrete
    container) hands out a fresh cursor on every iterator() call and can be
    consumed any number of times.
  - A derived pipeline owns exactly one cursor. Deriving from it transfers
    that cursor to the child, and pulling from it once it has vended an
    element raises PipelineConsumedError. Peeking with empty() is free.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from cursors import (
    IteratorCursor,
    RangeCursor,
    RepeatCursor,
    SelectCursor,
    SkipCursor,
    SkipLastCursor,
    SkipWhileCursor,
    TakeCursor,
    TakeWhileCursor,
    WhereCursor,
)
from defaults import numeric_max, numeric_min, strict_equal, to_number
from errors import PipelineConsumedError
from protocols import Cursor

logger = logging.getLogger(__name__)


def resolve_range_args(start, step, stop):
    """Map range()'s one-, two- and three-argument forms onto (start, step, stop)"""
    if start is None:
        return 0, 1 if step is None else step, stop
    if step is None and stop is None:
        return 0, 1, start
    if stop is None:
        return start, 1, step
    return start, 1 if step is None else step, stop


class Iterable:
    """
    A chainable, lazy collection backed by a cursor factory.

    Args:
        factory: zero-argument callable returning a fresh Cursor
    """

    def __init__(self, factory: Optional[Callable[[], Cursor]] = None):
        self._factory = factory
        self._stage: Optional[Cursor] = None
        self._claimed = False

    @staticmethod
    def _pipeline(stage: Cursor) -> "Iterable":
        pipeline = Iterable()
        pipeline._stage = stage
        return pipeline

    @classmethod
    def from_iterable(cls, source) -> "Iterable":
        """Wrap a Python iterable; a one-shot iterator becomes a one-shot pipeline"""
        if iter(source) is source:
            return cls._pipeline(IteratorCursor(source))
        return Iterable(lambda: IteratorCursor(iter(source)))

    # --------- cursor ownership ----------
    def iterator(self) -> Cursor:
        """Return a cursor over this sequence"""
        if self._stage is None:
            if self._factory is None:
                raise TypeError(f"{type(self).__name__} has no cursor factory")
            return self._factory()
        if self._claimed:
            self._reject("iterate", "was handed to a downstream operation")
        if self._stage.pulled:
            self._reject("iterate", "has already been consumed")
        return self._stage

    def is_pipeline(self) -> bool:
        """True for derived, single-owner pipelines"""
        return self._stage is not None

    def _claim(self, operation: str) -> Cursor:
        if self._stage is not None:
            if self._claimed:
                self._reject(operation, "was handed to a downstream operation")
            if self._stage.pulled:
                self._reject(operation, "has already been consumed")
            self._claimed = True
            return self._stage
        return self.iterator()

    def _reject(self, operation: str, reason: str):
        logger.debug(f"Rejected {operation} on pipeline {id(self):#x}: {reason}")
        raise PipelineConsumedError(operation, reason)

    def __iter__(self):
        return self.iterator()

    # --------- chainable operators (lazy) ----------
    def take(self, count: int) -> "Iterable":
        """Yield at most ``count`` elements"""
        return Iterable._pipeline(TakeCursor(self._claim("take"), count))

    def take_while(self, predicate: Callable[[Any], bool]) -> "Iterable":
        """Yield elements until the first one failing ``predicate``"""
        return Iterable._pipeline(TakeWhileCursor(self._claim("take_while"), predicate))

    def skip(self, count: int) -> "Iterable":
        """Discard the first ``count`` elements now and yield the rest"""
        return Iterable._pipeline(SkipCursor(self._claim("skip"), count))

    def skip_while(self, predicate: Callable[[Any], bool]) -> "Iterable":
        """Discard the leading run matching ``predicate`` now and yield the rest"""
        return Iterable._pipeline(SkipWhileCursor(self._claim("skip_while"), predicate))

    def skip_last(self, count: int) -> "Iterable":
        """
        Yield everything except the last ``count`` elements.

        Only meaningful on finite sources: the final ``count`` elements are
        only known once the source is exhausted.
        """
        return Iterable._pipeline(SkipLastCursor(self._claim("skip_last"), count))

    def where(self, predicate: Callable[[Any], bool]) -> "Iterable":
        """Yield only the elements matching ``predicate``"""
        return Iterable._pipeline(WhereCursor(self._claim("where"), predicate))

    def select(self, mapper: Callable[[Any], Any]) -> "Iterable":
        """Yield ``mapper(x)`` for every element"""
        return Iterable._pipeline(SelectCursor(self._claim("select"), mapper))

    # --------- generators ----------
    @staticmethod
    def range(start=None, step=None, stop=None) -> "Iterable":
        """
        Arithmetic sequence ``start, start + step, ...`` stopping strictly
        before ``stop``. Arguments are read by how many are given:

            range()               0, 1, 2, ... (unbounded)
            range(stop)           0 .. stop - 1
            range(start, stop)    start .. stop - 1
            range(start, step, stop)

        Use progression() for an unbounded sequence from another start.
        """
        start, step, stop = resolve_range_args(start, step, stop)
        return Iterable.progression(start, step, stop)

    @staticmethod
    def progression(start=0, step=1, stop=None) -> "Iterable":
        """Like range() but binds arguments strictly by name; no ``stop`` means unbounded"""
        if step == 0:
            raise ValueError("range() step must not be zero")
        return Iterable(lambda: RangeCursor(start, step, stop))

    @staticmethod
    def repeat(value=0) -> "Iterable":
        """Endless sequence of ``value``"""
        return Iterable(lambda: RepeatCursor(value))

    # --------- terminal operations (force evaluation) ----------
    def count(self) -> int:
        """Return the number of elements"""
        it = self.iterator()
        total = 0
        while it.has_elements():
            it.next()
            total += 1
        return total

    def empty(self) -> bool:
        return not self.iterator().has_elements()

    def contains(self, item, equal: Callable[[Any, Any], bool] = strict_equal) -> bool:
        """Return True if any element equals ``item`` under ``equal``"""
        it = self.iterator()
        while it.has_elements():
            if equal(item, it.next()):
                return True
        return False

    def first(self, predicate: Optional[Callable[[Any], bool]] = None, default=None):
        """Return the first element (matching ``predicate``), or default"""
        it = self.iterator()
        while it.has_elements():
            item = it.next()
            if predicate is None or predicate(item):
                return item
        return default

    def last(self, predicate: Optional[Callable[[Any], bool]] = None, default=None):
        """Return the last element (matching ``predicate``), or default. Drains the source."""
        it = self.iterator()
        result = default
        while it.has_elements():
            item = it.next()
            if predicate is None or predicate(item):
                result = item
        return result

    def for_each(self, func: Callable[[Any], Any]) -> None:
        it = self.iterator()
        while it.has_elements():
            func(it.next())

    def all(self, predicate: Optional[Callable[[Any], bool]] = None) -> bool:
        """
        Return True if every element satisfies ``predicate`` (truthiness by
        default). An empty source returns False.
        """
        it = self.iterator()
        result = it.has_elements()
        while it.has_elements():
            item = it.next()
            if not (predicate(item) if predicate is not None else item):
                return False
        return result

    def any(self, predicate: Optional[Callable[[Any], bool]] = None) -> bool:
        """Return True if some element satisfies ``predicate`` (truthiness by default)"""
        it = self.iterator()
        while it.has_elements():
            item = it.next()
            if predicate(item) if predicate is not None else item:
                return True
        return False

    def group_by(self, key_fn: Callable[[Any], Any]) -> Dict[Any, List[Any]]:
        """Drain the source into ``{key: [members in order]}``"""
        groups = {}
        it = self.iterator()
        while it.has_elements():
            item = it.next()
            key = key_fn(item)
            if key not in groups:
                groups[key] = []
            groups[key].append(item)
        return groups

    def aggregate(self, seed, accumulator: Callable[[Any, Any], Any]):
        """
        Left fold in iteration order.

        Example:
            Enumerable([1, 2, 3]).aggregate(0, lambda total, x: total + x)  # 6
        """
        result = seed
        it = self.iterator()
        while it.has_elements():
            result = accumulator(result, it.next())
        return result

    def max(self, comparer: Callable[[Any, Any], Any] = numeric_max, default=None):
        """Reduce with ``comparer`` (returns the larger of two); default when empty"""
        return self._reduce_pairwise(comparer, default)

    def min(self, comparer: Callable[[Any, Any], Any] = numeric_min, default=None):
        """Reduce with ``comparer`` (returns the smaller of two); default when empty"""
        return self._reduce_pairwise(comparer, default)

    def _reduce_pairwise(self, comparer, default):
        it = self.iterator()
        if not it.has_elements():
            return default
        best = it.next()
        while it.has_elements():
            best = comparer(best, it.next())
        return best

    def sum(self, mapper: Callable[[Any], Any] = to_number):
        """Map every element to a number and add them up"""
        total = 0
        it = self.iterator()
        while it.has_elements():
            total += mapper(it.next())
        return total

    def to_array(self) -> List[Any]:
        it = self.iterator()
        items = []
        while it.has_elements():
            items.append(it.next())
        return items

    def to_set(self, hash_fn: Optional[Callable[[Any], Any]] = None):
        """Collect the elements into a HashSet keyed by ``hash_fn``"""
        from hashset import HashSet

        result = HashSet(hash_fn)
        it = self.iterator()
        while it.has_elements():
            result.add(it.next())
        return result
