"""Stage timing for the EUR-Lex Navigator.

Parsing, relevance mapping and index construction are CPU-bound and grow
with document size; timings are kept per stage so slow laws show up in
the logs.
"""

import functools
import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class StageTiming:
    """Timing of one run of a processing stage."""

    stage: str
    started: float = field(default_factory=time.perf_counter)
    duration: Optional[float] = None
    ok: bool = True
    error: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def fail(self, error: str) -> None:
        """Mark the run as failed without raising."""
        self.ok = False
        self.error = error

    def stop(self) -> float:
        self.duration = time.perf_counter() - self.started
        return self.duration


class PerformanceMonitor:
    """
    Collects stage timings across pipeline runs.

    Runs slower than ``slow_operation_threshold`` seconds are logged as
    warnings together with their details (source name, unit counts).
    """

    def __init__(self, slow_operation_threshold: float = 5.0):
        self.slow_operation_threshold = slow_operation_threshold
        self.timings: Dict[str, List[StageTiming]] = {}

    @contextmanager
    def track(self, stage: str, **details) -> Iterator[StageTiming]:
        """
        Time the enclosed block as one run of ``stage``.

        An exception escaping the block marks the run as failed and is
        re-raised.

        Example:
            with monitor.track("parse_document", source="aia.xhtml") as timing:
                document = parser.parse_any(text)
                timing.details["articles"] = len(document.articles)
        """
        timing = StageTiming(stage=stage, details=dict(details))
        try:
            yield timing
        except Exception as e:
            timing.fail(str(e))
            raise
        finally:
            self.record(timing)

    def record(self, timing: StageTiming) -> None:
        """Stop a timing and add it to the collected runs."""
        if timing.duration is None:
            timing.stop()
        self.timings.setdefault(timing.stage, []).append(timing)

        if timing.duration > self.slow_operation_threshold:
            logger.warning(
                f"Stage '{timing.stage}' took {timing.duration:.2f}s "
                f"(limit {self.slow_operation_threshold}s) {timing.details}"
            )

    def get_operation_stats(self, stage: str) -> Dict[str, Any]:
        """
        Summarize the recorded runs of one stage.

        Returns:
            Run count, duration figures and share of successful runs;
            empty when the stage never ran.
        """
        runs = self.timings.get(stage, [])
        if not runs:
            return {}

        durations = [run.duration for run in runs]
        return {
            "count": len(runs),
            "average": sum(durations) / len(runs),
            "min": min(durations),
            "max": max(durations),
            "total": sum(durations),
            "success_rate": sum(1 for run in runs if run.ok) / len(runs),
        }

    def get_all_stats(self) -> Dict[str, Dict[str, Any]]:
        """Summaries of every stage that ran."""
        return {stage: self.get_operation_stats(stage) for stage in self.timings}

    def reset(self) -> None:
        self.timings.clear()


def timed_operation(operation_name: str):
    """
    Decorator logging the duration of a parse, linking or indexing call.

    Sized results (documents' unit tuples, maps, indexes) are logged with
    their size. Failures are logged at error level and re-raised.
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(f"{operation_name} failed after {time.perf_counter() - started:.3f}s: {e}")
                raise
            size = f" ({len(result)} items)" if hasattr(result, "__len__") else ""
            logger.debug(f"{operation_name} completed in {time.perf_counter() - started:.3f}s{size}")
            return result
        return wrapper
    return decorator
