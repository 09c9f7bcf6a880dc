"""Wall-clock timing and the optional timing report."""

import statistics
import time
from typing import List, Optional, TYPE_CHECKING

from .utils import setup_logger

if TYPE_CHECKING:
    from .coordinator import RunSummary

logger = setup_logger(__name__)


class Stopwatch:
    """Monotonic timer usable as a context manager."""

    def __init__(self, label: str = "run", report: bool = True) -> None:
        self.label = label
        self.report = report
        self._start: Optional[float] = None
        self._end: Optional[float] = None

    def start(self) -> "Stopwatch":
        self._start = time.perf_counter()
        self._end = None
        return self

    def stop(self) -> float:
        if self._start is None:
            raise RuntimeError("Stopwatch was never started")
        self._end = time.perf_counter()
        if self.report:
            logger.info(f"Total elapsed time ({self.label}): {self.elapsed:.2f} seconds")
        return self.elapsed

    @property
    def elapsed(self) -> float:
        if self._start is None:
            return 0.0
        end = self._end if self._end is not None else time.perf_counter()
        return end - self._start

    def __enter__(self) -> "Stopwatch":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()


def timing_report(summary: "RunSummary") -> str:
    """Render a per-detector timing table for a finished run."""
    lines: List[str] = []
    lines.append("=" * 60)
    lines.append("TEXT REGION ANNOTATION TIMING REPORT")
    lines.append("=" * 60)
    lines.append(f"{'Detector':<10} {'Tasks':>6} {'Failed':>6} {'Median':>8} {'Mean':>8} {'Max':>8}")
    lines.append("-" * 60)

    for kind in summary.kinds():
        results = summary.results_for(kind)
        times = [r.elapsed for r in results]
        failed = sum(1 for r in results if not r.ok)
        if times:
            lines.append(f"{kind.name:<10} {len(times):>6d} {failed:>6d} "
                         f"{statistics.median(times):>8.2f} {statistics.mean(times):>8.2f} "
                         f"{max(times):>8.2f}")
        else:
            lines.append(f"{kind.name:<10} {0:>6d} {0:>6d} {'-':>8} {'-':>8} {'-':>8}")

    lines.append("-" * 60)
    lines.append(f"Files seen: {summary.files_seen}")
    lines.append(f"Files skipped (unreadable): {summary.files_skipped}")
    lines.append(f"Total processing time: {summary.elapsed:.1f} seconds")
    return "\n".join(lines)
