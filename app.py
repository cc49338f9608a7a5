"""FastAPI app exposing lazy pipelines, hash-keyed set algebra and queue replay."""

from datetime import datetime

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from errors import LazySeqError
from models import (
    ErrorResponse,
    HealthResponse,
    PipelineRequest,
    PipelineResponse,
    QueueReplayRequest,
    QueueReplayResponse,
    SetAlgebraRequest,
    SetAlgebraResponse,
    StatusResponse,
)
from utils import (
    clear_performance_metrics,
    get_performance_summary,
    get_process_memory_mb,
    process_pipeline,
    process_set_algebra,
    replay_queue,
    setup_logging,
)

logger = setup_logging()

app = FastAPI(
    title="Lazy Sequence Service",
    description="Lazy LINQ-style pipelines over ranges, repeats and literal items",
    version="1.0.0"
)


@app.get("/", response_model=StatusResponse)
async def root():
    """Basic service banner."""
    return StatusResponse(
        ok=True,
        message="Lazy sequence service operational - Features: lazy pipelines, hash sets, FIFO queues"
    )


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Process memory and performance summary."""
    return HealthResponse(
        healthy=True,
        process_memory_mb=get_process_memory_mb(),
        performance_metrics=get_performance_summary()
    )


@app.post("/pipeline", response_model=PipelineResponse)
async def evaluate_pipeline(request: PipelineRequest):
    """Build a lazy pipeline from the request and evaluate its terminal operation."""
    try:
        return PipelineResponse(**process_pipeline(request))
    except TypeError as e:
        raise HTTPException(status_code=400, detail=f"Operation does not apply to these items: {e}")


@app.post("/sets", response_model=SetAlgebraResponse)
async def set_algebra(request: SetAlgebraRequest):
    """Union or intersection of two lists keyed by a named hash."""
    try:
        return SetAlgebraResponse(**process_set_algebra(request))
    except TypeError as e:
        # e.g. pitch_class hash applied to non-numeric items
        raise HTTPException(status_code=400, detail=f"Cannot hash items: {e}")


@app.post("/queue", response_model=QueueReplayResponse)
async def queue_replay(request: QueueReplayRequest):
    """Replay enqueue/dequeue/peek commands on a fresh queue."""
    return QueueReplayResponse(**replay_queue(request.commands))


@app.get("/metrics")
async def get_metrics():
    """Performance summary of evaluated pipelines."""
    return {
        "summary": get_performance_summary(),
        "timestamp": datetime.now().isoformat()
    }


@app.delete("/metrics")
async def reset_metrics():
    """Clear the performance log."""
    clear_performance_metrics()
    return {"cleared": True, "timestamp": datetime.now().isoformat()}


# Exception handlers for proper error responses
@app.exception_handler(LazySeqError)
async def lazyseq_error_handler(request: Request, exc: LazySeqError):
    logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=409,
        content=ErrorResponse(
            error=str(exc),
            error_type=type(exc).__name__
        ).model_dump(mode="json")
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    logger.warning(f"Invalid request on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            error=str(exc),
            error_type=type(exc).__name__
        ).model_dump(mode="json")
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
