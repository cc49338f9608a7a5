"""
Utility functions for the lazy sequence service.

Logging setup, performance measurement, the named-function registry used to
turn request specs into callables, and the helpers that build and evaluate
pipelines, set operations and queue replays.
"""

import gc
import logging
import os
import sys
import time
import tracemalloc
from typing import Any, Callable, Dict, List, Optional, Tuple

import psutil

from defaults import default_hash
from enumerable import Enumerable
from errors import PipelineConsumedError
from fifoqueue import Queue
from hashset import HashSet
from iterable import Iterable
from models import (
    HashName,
    OperationSpec,
    PipelineRequest,
    QueueCommand,
    SetAlgebraRequest,
    SourceKind,
    SourceSpec,
    TerminalSpec,
)


# ---------- Logging ----------

def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Configure structured logging; level defaults to $LAZYSEQ_LOG_LEVEL or INFO"""
    level_name = (level or os.environ.get("LAZYSEQ_LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s:%(lineno)d] - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )
    return logging.getLogger('lazyseq')


logger = logging.getLogger(__name__)


# ---------- Performance tracking ----------

# One entry per measured evaluation, oldest first
_performance_log: List[Dict[str, Any]] = []


def _record(info: Dict[str, Any]) -> None:
    _performance_log.append(info)


def _finish(operation_name: str, start_time: float, success: bool) -> Dict[str, Any]:
    execution_time_ms = (time.perf_counter() - start_time) * 1000
    _, peak = tracemalloc.get_traced_memory()
    tracemalloc.stop()
    return {
        "operation": operation_name,
        "execution_time_ms": execution_time_ms,
        "memory_usage_mb": peak / 1024 / 1024,
        "success": success,
        "timestamp": time.time()
    }


def measure_performance(operation_name: str, func: Callable, *args, **kwargs) -> Tuple[Any, Dict[str, Any]]:
    """Run ``func`` under tracemalloc and a timer; return (result, performance info)"""
    tracemalloc.start()
    gc.collect()
    start_time = time.perf_counter()

    try:
        result = func(*args, **kwargs)
    except Exception as e:
        info = _finish(operation_name, start_time, success=False)
        info["error"] = str(e)
        _record(info)
        logger.error(f"{operation_name} failed after {info['execution_time_ms']:.2f}ms: {e}")
        raise

    info = _finish(operation_name, start_time, success=True)
    info["result_size"] = len(result) if hasattr(result, "__len__") else None
    _record(info)
    logger.debug(f"{operation_name} completed in {info['execution_time_ms']:.2f}ms")
    return result, info


def get_performance_summary() -> Dict[str, Any]:
    """
    Totals over the performance log plus a breakdown per operation name
    (``pipeline_count``, ``pipeline_to_array``, ...).
    """
    by_operation: Dict[str, Dict[str, Any]] = {}
    for info in _performance_log:
        stats = by_operation.setdefault(
            info["operation"], {"runs": 0, "failures": 0, "total_time_ms": 0.0, "peak_memory_mb": 0.0}
        )
        stats["runs"] += 1
        if not info["success"]:
            stats["failures"] += 1
        stats["total_time_ms"] += info["execution_time_ms"]
        stats["peak_memory_mb"] = max(stats["peak_memory_mb"], info["memory_usage_mb"])
    for stats in by_operation.values():
        stats["avg_time_ms"] = stats["total_time_ms"] / stats["runs"]

    total_time_ms = sum(stats["total_time_ms"] for stats in by_operation.values())
    count = len(_performance_log)
    return {
        "total_operations": count,
        "failed_operations": sum(stats["failures"] for stats in by_operation.values()),
        "total_time_ms": total_time_ms,
        "avg_time_ms": total_time_ms / count if count else 0.0,
        "peak_memory_mb": max((stats["peak_memory_mb"] for stats in by_operation.values()), default=0.0),
        "by_operation": by_operation
    }


def clear_performance_metrics():
    """Forget every recorded evaluation"""
    _performance_log.clear()


def get_process_memory_mb() -> float:
    return psutil.Process(os.getpid()).memory_info().rss / 1024 / 1024


# ---------- Named function registry ----------

# Each factory takes the request's optional ``arg`` and returns the callable
PREDICATES: Dict[str, Callable[[Any], Callable[[Any], bool]]] = {
    "even": lambda arg: lambda x: x % 2 == 0,
    "odd": lambda arg: lambda x: x % 2 != 0,
    "positive": lambda arg: lambda x: x > 0,
    "negative": lambda arg: lambda x: x < 0,
    "truthy": lambda arg: lambda x: bool(x),
    "lt": lambda arg: lambda x: x < arg,
    "le": lambda arg: lambda x: x <= arg,
    "gt": lambda arg: lambda x: x > arg,
    "ge": lambda arg: lambda x: x >= arg,
    "eq": lambda arg: lambda x: x == arg,
    "divisible_by": lambda arg: lambda x: x % arg == 0,
}

MAPPERS: Dict[str, Callable[[Any], Callable[[Any], Any]]] = {
    "identity": lambda arg: lambda x: x,
    "square": lambda arg: lambda x: x * x,
    "double": lambda arg: lambda x: x * 2,
    "negate": lambda arg: lambda x: -x,
    "add": lambda arg: lambda x: x + arg,
    "multiply": lambda arg: lambda x: x * arg,
    "mod": lambda arg: lambda x: x % arg,
    "pitch_class": lambda arg: lambda x: x % 12,
    "octave": lambda arg: lambda x: x // 12 - 1,
    "str": lambda arg: lambda x: str(x),
}

PARAMETERISED = {"lt", "le", "gt", "ge", "eq", "divisible_by", "add", "multiply", "mod"}

# Functions whose argument is used as a divisor
DIVISORS = {"divisible_by", "mod"}

HASHES: Dict[HashName, Callable[[Any], Any]] = {
    HashName.IDENTITY: lambda x: x,
    HashName.PITCH_CLASS: lambda x: x % 12,
    HashName.JSON: default_hash,
}


def resolve_function(registry: Dict[str, Callable], name: Optional[str], arg: Any = None) -> Callable:
    """Look up a named function and bind its argument"""
    if not name or name not in registry:
        raise ValueError(f"Unknown function: {name!r}. Available: {sorted(registry)}")
    if name in PARAMETERISED and arg is None:
        raise ValueError(f"Function {name!r} requires 'arg'")
    if name in DIVISORS and arg == 0:
        raise ValueError(f"Function {name!r} requires a non-zero 'arg'")
    return registry[name](arg)


# ---------- Pipeline building ----------

def build_source(spec: SourceSpec) -> Iterable:
    """Create the root Iterable described by a source spec"""
    if spec.kind == SourceKind.RANGE:
        return Iterable.progression(spec.start, spec.step, spec.stop)
    if spec.kind == SourceKind.REPEAT:
        return Iterable.repeat(spec.value)
    return Enumerable(list(spec.items or []))


def apply_operations(source: Iterable, operations: List[OperationSpec]) -> Iterable:
    """Chain lazy operations onto ``source``; nothing is evaluated here"""
    pipeline = source
    for op in operations:
        if op.type == "take":
            pipeline = pipeline.take(op.count)
        elif op.type == "skip":
            pipeline = pipeline.skip(op.count)
        elif op.type == "skip_last":
            pipeline = pipeline.skip_last(op.count)
        elif op.type == "where":
            pipeline = pipeline.where(resolve_function(PREDICATES, op.fn, op.arg))
        elif op.type == "take_while":
            pipeline = pipeline.take_while(resolve_function(PREDICATES, op.fn, op.arg))
        elif op.type == "skip_while":
            pipeline = pipeline.skip_while(resolve_function(PREDICATES, op.fn, op.arg))
        elif op.type == "select":
            pipeline = pipeline.select(resolve_function(MAPPERS, op.fn, op.arg))
        else:
            raise ValueError(f"Unknown op: {op.type}")
    return pipeline


def run_terminal(pipeline: Iterable, terminal: TerminalSpec) -> Any:
    """Evaluate ``pipeline`` with the requested eager operation"""
    kind = terminal.type

    if kind == "to_array":
        return pipeline.to_array()
    if kind == "count":
        return pipeline.count()
    if kind == "empty":
        return pipeline.empty()
    if kind == "sum":
        if terminal.fn:
            return pipeline.sum(resolve_function(MAPPERS, terminal.fn, terminal.arg))
        return pipeline.sum()
    if kind in ("first", "last", "any", "all"):
        predicate = resolve_function(PREDICATES, terminal.fn, terminal.arg) if terminal.fn else None
        return getattr(pipeline, kind)(predicate)
    if kind in ("min", "max"):
        return getattr(pipeline, kind)()
    if kind == "group_by":
        groups = pipeline.group_by(resolve_function(MAPPERS, terminal.fn or "identity", terminal.arg))
        return {str(key): members for key, members in groups.items()}
    if kind == "to_set":
        return pipeline.to_set(HASHES[terminal.hash]).to_array()
    if kind == "aggregate":
        # Only summation folds are exposed over HTTP
        mapper = resolve_function(MAPPERS, terminal.fn or "identity", terminal.arg)
        return pipeline.aggregate(terminal.seed, lambda total, x: total + mapper(x))
    raise ValueError(f"Unknown terminal operation: {kind}")


def process_pipeline(request: PipelineRequest) -> Dict[str, Any]:
    """Build, cap and evaluate the pipeline described by ``request``"""
    source = build_source(request.source)
    if request.source.is_generated():
        # A filter that never matches would otherwise scan the whole source
        source = source.take(request.max_scan)
    pipeline = apply_operations(source, request.operations)
    # Bounded output regardless of source
    pipeline = pipeline.take(request.max_items)

    operations_applied = [op.type for op in request.operations]
    result, info = measure_performance(
        f"pipeline_{request.terminal.type}", run_terminal, pipeline, request.terminal
    )
    logger.info(
        f"Evaluated {request.source.kind.value} pipeline "
        f"{' -> '.join(operations_applied) or '(no ops)'} -> {request.terminal.type}"
    )
    return {
        "result": result,
        "terminal": request.terminal.type,
        "operations_applied": operations_applied,
        "performance": {
            "operation": info["operation"],
            "processing_time_ms": info["execution_time_ms"],
            "memory_usage_mb": info["memory_usage_mb"],
            "lazy_evaluation": True
        }
    }


def process_set_algebra(request: SetAlgebraRequest) -> Dict[str, Any]:
    """Union or intersect two lists under a named hash"""
    hash_fn = HASHES[request.hash]
    left = HashSet(hash_fn)
    left.add_range(request.left)
    right = HashSet(hash_fn)
    right.add_range(request.right)

    result = left.union(right) if request.operation == "union" else left.intersect(right)
    return {
        "result": result.to_array(),
        "count": result.count(),
        "left_count": left.count(),
        "right_count": right.count(),
        "operation": request.operation,
        "hash": request.hash
    }


def replay_queue(commands: List[QueueCommand]) -> Dict[str, Any]:
    """Replay commands on a fresh Queue and report what came out"""
    queue = Queue()
    dequeued = []
    peeked = []
    for command in commands:
        if command.action == "enqueue":
            queue.enqueue(command.value)
        elif command.action == "dequeue":
            dequeued.append(queue.dequeue())
        else:
            peeked.append(queue.peek())
    return {
        "dequeued": dequeued,
        "peeked": peeked,
        "remaining": queue.to_array(),
        "count": queue.count()
    }


def validate_lazy_evaluation(collection: Any) -> bool:
    """True if ``collection`` is an unconsumed derived pipeline"""
    if not isinstance(collection, Iterable) or not collection.is_pipeline():
        return False
    try:
        collection.iterator()
    except PipelineConsumedError:
        return False
    return True
