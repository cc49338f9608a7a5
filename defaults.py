"""
Default strategies used when a caller does not supply one.

Operations take these as keyword defaults so the choice is made once per
call (or once per HashSet), never re-dispatched per element.
"""

import json
from numbers import Number
from typing import Any


def strict_equal(a: Any, b: Any) -> bool:
    """
    Default equality check for contains() and remove().

    Values of different types never match, except that ints and floats
    compare by value. Bools are not numbers here, so ``1`` and ``True``
    are different elements.
    """
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    if isinstance(a, Number) and isinstance(b, Number):
        return a == b
    return type(a) is type(b) and a == b


def default_hash(item: Any) -> str:
    """Structural hash: canonical JSON text of the item"""
    return json.dumps(item, sort_keys=True, default=repr)


def to_number(value: Any):
    """
    Numeric coercion used by sum().

    Numbers pass through unchanged, None counts as zero and strings are
    parsed as int, then float. Anything unparsable raises ValueError.
    """
    if isinstance(value, Number):
        return value
    if value is None:
        return 0
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            return int(text)
        except ValueError:
            return float(text)
    return float(value)


def numeric_max(a: Any, b: Any) -> Any:
    return a if a >= b else b


def numeric_min(a: Any, b: Any) -> Any:
    return a if a <= b else b
