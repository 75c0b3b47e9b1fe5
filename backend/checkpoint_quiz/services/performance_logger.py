"""Performance monitoring middleware for API endpoints.

Tracks and logs performance metrics for quiz requests:
- Total request time (end-to-end)
- LLM latency (generation time)
- Validation time (parsing + validator chain)

Metrics are logged in structured format for analysis and alerting.
"""

from __future__ import annotations

import time
import logging
from typing import Dict, Optional
from contextvars import ContextVar
from fastapi import Request

logger = logging.getLogger(__name__)
perf_logger = logging.getLogger("performance")

# Context variables for tracking timings across async operations
_request_start_time: ContextVar[float] = ContextVar("request_start_time")
_llm_time: ContextVar[float] = ContextVar("llm_time", default=0.0)
_validation_time: ContextVar[float] = ContextVar("validation_time", default=0.0)
# Per-request holder, mutated in place so the middleware sees timings recorded in child tasks
_request_timings: ContextVar[Optional[Dict[str, float]]] = ContextVar("request_timings", default=None)

MONITORED_PATH_PREFIXES = ("/quiz",)


def set_request_start_time() -> None:
    """Mark the start of request processing."""
    _request_start_time.set(time.time())


def get_request_elapsed_time() -> float:
    """Get elapsed time since request start.

    Returns:
        Elapsed seconds, or 0.0 if not set
    """
    try:
        start = _request_start_time.get()
        return time.time() - start
    except LookupError:
        return 0.0


def track_request_timings() -> Dict[str, float]:
    """Create the timing holder for the current request and make it visible to child tasks."""
    timings = {"llm_time": 0.0, "validation_time": 0.0}
    _request_timings.set(timings)
    return timings


def _publish(key: str, seconds: float) -> None:
    timings = _request_timings.get()
    if timings is not None:
        timings[key] = seconds


def record_llm_time(seconds: float) -> None:
    """Record time spent waiting on the model client."""
    _llm_time.set(seconds)
    _publish("llm_time", seconds)
    logger.debug(f"LLM generation completed in {seconds:.3f}s")


def record_validation_time(seconds: float) -> None:
    """Record time spent parsing and validating the model response."""
    _validation_time.set(seconds)
    _publish("validation_time", seconds)
    logger.debug(f"Parse + validation completed in {seconds:.3f}s")


def get_performance_metrics() -> Dict[str, float]:
    """Get all recorded performance metrics.

    Returns:
        Dict with llm_time, validation_time, total_time
    """
    return {
        "llm_time": _llm_time.get(),
        "validation_time": _validation_time.get(),
        "total_time": get_request_elapsed_time(),
    }


def log_performance_metrics(
    endpoint: str,
    method: str,
    status_code: int,
    metrics: Optional[Dict[str, float]] = None,
) -> None:
    """Log performance metrics in structured format.

    Args:
        metrics: Timings to log (default: this context's ``get_performance_metrics()``)
    """
    metrics = metrics or get_performance_metrics()

    known_time = metrics["llm_time"] + metrics["validation_time"]
    other_time = max(0.0, metrics["total_time"] - known_time)

    perf_logger.info(
        "request_performance",
        extra={
            "endpoint": endpoint,
            "method": method,
            "status_code": status_code,
            "total_time": round(metrics["total_time"], 3),
            "llm_time": round(metrics["llm_time"], 3),
            "validation_time": round(metrics["validation_time"], 3),
            "other_time": round(other_time, 3),
        }
    )


async def performance_monitoring_middleware(request: Request, call_next):
    """FastAPI middleware for performance monitoring.

    Records request start time, processes request, then logs metrics for
    quiz endpoints. Adds timing headers in development.
    """
    set_request_start_time()
    timings = track_request_timings()

    response = await call_next(request)

    total_time = get_request_elapsed_time()
    metrics = {**timings, "total_time": total_time}

    if request.url.path.startswith(MONITORED_PATH_PREFIXES):
        log_performance_metrics(
            endpoint=request.url.path,
            method=request.method,
            status_code=response.status_code,
            metrics=metrics,
        )

    # Only add performance headers in development (avoid leaking internals in prod)
    from checkpoint_quiz.core.config import settings
    if settings.ENVIRONMENT == "development":
        response.headers["X-Response-Time"] = f"{total_time:.3f}s"
        if metrics["llm_time"] > 0:
            response.headers["X-LLM-Time"] = f"{metrics['llm_time']:.3f}s"

    return response


class PerformanceTimer:
    """Context manager for timing code blocks.

    Example:
        with PerformanceTimer() as timer:
            # ... do work ...
        record_llm_time(timer.elapsed)
    """

    def __init__(self):
        self.start_time: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self):
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed = time.time() - self.start_time
        return False
