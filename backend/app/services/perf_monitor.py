"""Performance monitoring utilities for the MODA production core."""
import time
import logging
import threading
import functools
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger("moda-api.perf")


class PerformanceTracker:
    """
    Thread-safe in-memory tracker for core operation metrics.

    Tracks:
    - Total operations run (BLM matching, status logs, heat-map scoring)
    - Average duration per operation
    - Slowest operation seen so far
    - Error count broken down by operation name
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._call_counts: Dict[str, int] = {}      # operation -> calls timed
        self._total_ms: Dict[str, float] = {}       # operation -> summed duration_ms
        self._error_counts: Dict[str, int] = {}     # operation -> count
        self._slowest_operation: Optional[str] = None
        self._slowest_operation_ms: float = 0.0

    # ------------------------------------------------------------------
    # Public write API
    # ------------------------------------------------------------------

    def record_duration(self, operation: str, duration_ms: float) -> None:
        """Record how long a single core operation took."""
        with self._lock:
            self._call_counts[operation] = self._call_counts.get(operation, 0) + 1
            self._total_ms[operation] = self._total_ms.get(operation, 0.0) + duration_ms
            if duration_ms > self._slowest_operation_ms:
                self._slowest_operation_ms = duration_ms
                self._slowest_operation = operation

    def record_error(self, operation: str) -> None:
        """Increment the error counter for a given operation."""
        with self._lock:
            self._error_counts[operation] = self._error_counts.get(operation, 0) + 1

    # ------------------------------------------------------------------
    # Public read API
    # ------------------------------------------------------------------

    def get_metrics(self) -> Dict[str, Any]:
        """
        Return a snapshot of all collected metrics.

        Returns
        -------
        dict with keys:
            operations_processed       : int
            avg_duration_ms            : float  (0 if none processed)
            slowest_operation          : str | None
            slowest_operation_ms       : float
            error_count                : int   (total across all operations)
            error_count_by_operation   : dict  {operation: count}
            operation_avg_durations_ms : dict  {operation: avg_ms}
        """
        with self._lock:
            processed = sum(self._call_counts.values())
            total_ms = sum(self._total_ms.values())
            avg = round(total_ms / processed, 2) if processed else 0.0

            op_avgs: Dict[str, float] = {
                op: round(self._total_ms[op] / count, 2)
                for op, count in self._call_counts.items()
                if count
            }

            return {
                "operations_processed": processed,
                "avg_duration_ms": avg,
                "slowest_operation": self._slowest_operation,
                "slowest_operation_ms": round(self._slowest_operation_ms, 2),
                "error_count": sum(self._error_counts.values()),
                "error_count_by_operation": dict(self._error_counts),
                "operation_avg_durations_ms": op_avgs,
            }

    def reset(self) -> None:
        """Reset all counters (useful in tests)."""
        with self._lock:
            self._call_counts.clear()
            self._total_ms.clear()
            self._error_counts.clear()
            self._slowest_operation = None
            self._slowest_operation_ms = 0.0


# Module-level singleton, import this instance everywhere else.
tracker = PerformanceTracker()


def timed(func: Callable) -> Callable:
    """
    Decorator that measures a synchronous core function, logs the duration
    at DEBUG and records it on the shared tracker.

    Usage::

        @timed
        def build_status_log(...):
            ...
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        except Exception:
            tracker.record_error(func.__qualname__)
            raise
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            tracker.record_duration(func.__qualname__, duration_ms)
            logger.debug(
                "function timed",
                extra={
                    "operation": func.__qualname__,
                    "duration_ms": duration_ms,
                },
            )
    return wrapper
