"""
Error conditions raised by the lazy sequence core.

Most edge cases (reading past the end, "not found" lookups, empty
reductions) resolve to an absent value instead of raising. The only
condition that raises is misuse of a single-owner pipeline.
"""


class LazySeqError(Exception):
    """Base class for lazy sequence errors"""


class PipelineConsumedError(LazySeqError, RuntimeError):
    """
    Raised when a derived pipeline is pulled from, or derived from, after
    another consumer has taken ownership of its cursor.
    """

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"Cannot {operation}: pipeline {reason}")
