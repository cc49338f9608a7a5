"""
Pydantic Models

Request and response models for the lazy sequence service.
"""

from typing import Any, Dict, List, Literal, Optional, Union
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator


Number = Union[int, float]


class SourceKind(str, Enum):
    """Supported pipeline sources"""
    RANGE = "range"
    REPEAT = "repeat"
    ITEMS = "items"


class HashName(str, Enum):
    """Named hash functions available to set operations"""
    IDENTITY = "identity"
    PITCH_CLASS = "pitch_class"
    JSON = "json"


LazyOperation = Literal[
    "where", "select", "take", "take_while", "skip", "skip_while", "skip_last"
]

TerminalOperation = Literal[
    "to_array", "count", "sum", "min", "max", "first", "last",
    "any", "all", "empty", "group_by", "to_set", "aggregate"
]


class SourceSpec(BaseModel):
    """Where a pipeline pulls its elements from"""
    kind: SourceKind = Field(SourceKind.RANGE, description="Source type")
    start: Number = Field(0, description="First value of a range")
    step: Number = Field(1, description="Increment between range values")
    stop: Optional[Number] = Field(
        None,
        description="Exclusive range bound; omit for an unbounded range"
    )
    value: Any = Field(0, description="Value produced by a repeat source")
    items: Optional[List[Any]] = Field(None, description="Literal items source")

    @model_validator(mode="after")
    def check_source(self):
        """Validate the fields each source kind needs"""
        if self.kind == SourceKind.RANGE and self.step == 0:
            raise ValueError("Range step must not be zero")
        if self.kind == SourceKind.ITEMS and self.items is None:
            raise ValueError("An items source requires 'items'")
        return self

    def is_generated(self) -> bool:
        """True for range and repeat sources, which may be unbounded or arbitrarily long"""
        return self.kind != SourceKind.ITEMS


class OperationSpec(BaseModel):
    """One lazy operation in a pipeline"""
    type: LazyOperation = Field(..., description="Lazy operation to apply")
    fn: Optional[str] = Field(
        None,
        description="Named predicate or mapper from the function registry",
        examples=["even"]
    )
    arg: Optional[Number] = Field(None, description="Argument for parameterised functions")
    count: Optional[int] = Field(None, description="Element count for take/skip/skip_last", ge=0)

    @model_validator(mode="after")
    def check_arguments(self):
        """take/skip need a count, the rest need a function name"""
        if self.type in ("take", "skip", "skip_last"):
            if self.count is None:
                raise ValueError(f"'{self.type}' requires 'count'")
        elif not self.fn:
            raise ValueError(f"'{self.type}' requires 'fn'")
        return self


class TerminalSpec(BaseModel):
    """The eager operation that evaluates a pipeline"""
    type: TerminalOperation = Field("to_array", description="Terminal operation")
    fn: Optional[str] = Field(None, description="Named function for predicates, keys or mapping")
    arg: Optional[Number] = Field(None, description="Argument for parameterised functions")
    seed: Any = Field(0, description="Seed for aggregate")
    hash: HashName = Field(HashName.JSON, description="Hash used by to_set")


class PipelineRequest(BaseModel):
    """Request to build and evaluate a lazy pipeline"""
    source: SourceSpec = Field(default_factory=SourceSpec)
    operations: List[OperationSpec] = Field(default_factory=list)
    terminal: TerminalSpec = Field(default_factory=TerminalSpec)
    max_items: int = Field(
        1000,
        description="Cap on elements reaching the terminal operation",
        ge=1,
        le=100000
    )
    max_scan: int = Field(
        1_000_000,
        description="Cap on elements pulled from a range or repeat source",
        ge=1,
        le=10_000_000
    )


class PerformanceInfo(BaseModel):
    """Timing and memory figures for one evaluation"""
    operation: str
    processing_time_ms: float = Field(..., ge=0)
    memory_usage_mb: float = Field(..., ge=0)
    lazy_evaluation: bool = True


class PipelineResponse(BaseModel):
    """Result of evaluating a pipeline"""
    result: Any
    terminal: str
    operations_applied: List[str]
    performance: PerformanceInfo
    timestamp: datetime = Field(default_factory=datetime.now)


class SetAlgebraRequest(BaseModel):
    """Union or intersection of two item lists"""
    left: List[Any] = Field(..., description="Items of the left-hand set")
    right: List[Any] = Field(..., description="Items of the right-hand set")
    operation: Literal["union", "intersect"] = Field(..., description="Set operation")
    hash: HashName = Field(HashName.JSON, description="Hash function keying both sets")


class SetAlgebraResponse(BaseModel):
    result: List[Any]
    count: int
    left_count: int
    right_count: int
    operation: str
    hash: HashName


class QueueCommand(BaseModel):
    """Single queue instruction"""
    action: Literal["enqueue", "dequeue", "peek"]
    value: Any = None


class QueueReplayRequest(BaseModel):
    """Ordered list of queue instructions to replay on a fresh queue"""
    commands: List[QueueCommand] = Field(..., description="Commands to replay")

    @field_validator("commands")
    @classmethod
    def validate_commands(cls, v):
        """Reject empty command lists"""
        if not v:
            raise ValueError("At least one command is required")
        return v


class QueueReplayResponse(BaseModel):
    dequeued: List[Any]
    peeked: List[Any]
    remaining: List[Any]
    count: int


class StatusResponse(BaseModel):
    ok: bool
    message: str
    timestamp: datetime = Field(default_factory=datetime.now)


class HealthResponse(BaseModel):
    healthy: bool
    process_memory_mb: float
    performance_metrics: Dict[str, Any]
    timestamp: datetime = Field(default_factory=datetime.now)


class ErrorResponse(BaseModel):
    error: str
    error_type: str
    timestamp: datetime = Field(default_factory=datetime.now)
