"""
Iteration contracts shared by every collection type.

A Cursor is a single-pass pull cursor: callers test has_elements() before
every next(). A Sequence is anything that can hand out cursors and report
its size and contents.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Protocol, runtime_checkable


class Cursor(ABC):
    """
    Single-pass cursor over some source.

    has_elements() only peeks. next() advances and returns the element, or
    None when the cursor is exhausted. Cursors are never reset; obtain a new
    one from the owning Iterable instead.

    Cursors are also Python iterators, so ``list(cursor)`` drains one.
    """

    # Set once the cursor has vended an element
    pulled = False

    @abstractmethod
    def has_elements(self) -> bool:
        ...

    @abstractmethod
    def _advance(self) -> Any:
        """Return the next element; only called while has_elements() is true"""

    def next(self) -> Any:
        if not self.has_elements():
            return None
        self.pulled = True
        return self._advance()

    def __iter__(self):
        return self

    def __next__(self):
        if not self.has_elements():
            raise StopIteration
        return self.next()


@runtime_checkable
class Sequence(Protocol):
    """Capability shared by Iterable, Enumerable, Queue and HashSet"""

    def iterator(self) -> Cursor:
        ...

    def count(self) -> int:
        ...

    def to_array(self) -> List[Any]:
        ...
