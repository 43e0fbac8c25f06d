"""
Lightweight profiling utility for measuring time spent in different operations.
Used to track latency of upstream AI gateway calls per request.
"""
import contextvars
import time
import logging
from typing import Dict
from contextlib import contextmanager

logger = logging.getLogger(__name__)


class Profiler:
    """Lightweight profiler for tracking operation timings"""

    def __init__(self):
        self.timings: Dict[str, float] = {}
        self.start_times: Dict[str, float] = {}

    def start(self, operation: str) -> None:
        """Start timing an operation"""
        self.start_times[operation] = time.perf_counter()

    def end(self, operation: str) -> float:
        """End timing an operation and return elapsed time in seconds"""
        if operation not in self.start_times:
            logger.warning(f"Operation '{operation}' was not started")
            return 0.0

        elapsed = time.perf_counter() - self.start_times[operation]
        self.timings[operation] = self.timings.get(operation, 0.0) + elapsed
        del self.start_times[operation]
        return elapsed

    @contextmanager
    def measure(self, operation: str):
        """Context manager for measuring operation time"""
        self.start(operation)
        try:
            yield
        finally:
            self.end(operation)

    def get_timings(self) -> Dict[str, float]:
        """Get all recorded timings"""
        return self.timings.copy()

    def get_total(self) -> float:
        """Get total time across all measured operations"""
        return sum(self.timings.values())

    def log_summary(self, prefix: str = "") -> None:
        """Log a summary of all timings"""
        if not self.timings:
            return

        total = self.get_total()
        lines = [f"{prefix}Profiling Summary:"]

        # Sort by time (descending)
        sorted_timings = sorted(self.timings.items(), key=lambda x: x[1], reverse=True)

        for operation, elapsed in sorted_timings:
            percentage = (elapsed / total * 100) if total > 0 else 0
            lines.append(f"{prefix}  {operation}: {elapsed*1000:.2f}ms ({percentage:.1f}%)")

        lines.append(f"{prefix}  Total: {total*1000:.2f}ms")
        logger.info("\n".join(lines))


# One profiler per request context; concurrent requests never share timings
_profiler: contextvars.ContextVar = contextvars.ContextVar("styleai_profiler", default=None)


def get_profiler() -> Profiler:
    """Get or create the profiler for the current context"""
    profiler = _profiler.get()
    if profiler is None:
        profiler = Profiler()
        _profiler.set(profiler)
    return profiler


def reset_profiler() -> Profiler:
    """Start a fresh profiler for the current context and return it"""
    profiler = Profiler()
    _profiler.set(profiler)
    return profiler
