"""Progress aggregation for parallel chunk rendering.

Workers report completed chunks with tick(), which only enqueues and never
blocks. A single consumer thread drains the ticks, keeps the completed count,
and invokes the progress callback in order, so callbacks never run
concurrently and always see a strictly increasing count. A callback that raises is logged
and does not stop the count.

Example:
    >>> from pathtracer.core.progress import ProgressTracker
    >>> def report(done, total):
    ...     print(f"{done}/{total} chunks")
    >>> with ProgressTracker(total=4, callback=report) as progress:
    ...     for _ in range(4):
    ...         progress.tick()
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable
from types import TracebackType

# Type alias for progress callback
# Callback receives (completed_chunks, total_chunks)
ProgressCallback = Callable[[int, int], None]

logger = logging.getLogger(__name__)

# Sentinel closing the tick stream
_CLOSE = object()


class ProgressTracker:
    """Single-consumer aggregator of per-chunk completion ticks.

    Attributes:
        total: Number of chunks in the render.
    """

    def __init__(self, total: int, callback: ProgressCallback | None = None) -> None:
        """Initialize the tracker.

        Args:
            total: Number of chunks expected.
            callback: Optional function called as callback(completed, total)
                from the consumer thread after each tick.

        Raises:
            ValueError: If total is negative.
        """
        if total < 0:
            raise ValueError(f"Total chunk count must be non-negative, got {total}")
        self._total = total
        self._callback = callback
        self._ticks: queue.SimpleQueue[object] = queue.SimpleQueue()
        self._completed = 0
        self._lock = threading.Lock()
        self._consumer: threading.Thread | None = None

    @property
    def total(self) -> int:
        """Number of chunks expected."""
        return self._total

    @property
    def completed(self) -> int:
        """Number of ticks consumed so far."""
        with self._lock:
            return self._completed

    @property
    def fraction(self) -> float:
        """Completed fraction in [0, 1] (1.0 for an empty render)."""
        if self._total == 0:
            return 1.0
        return self.completed / self._total

    def start(self) -> None:
        """Start the consumer thread.

        Raises:
            RuntimeError: If the tracker was already started.
        """
        if self._consumer is not None:
            raise RuntimeError("ProgressTracker already started")
        self._consumer = threading.Thread(
            target=self._consume, name="pathtracer-progress", daemon=True
        )
        self._consumer.start()

    def tick(self) -> None:
        """Record one completed chunk. Safe to call from any thread."""
        self._ticks.put(None)

    def close(self) -> None:
        """Close the tick stream and wait until every tick is consumed."""
        if self._consumer is None:
            return
        self._ticks.put(_CLOSE)
        self._consumer.join()

    def _consume(self) -> None:
        while True:
            item = self._ticks.get()
            if item is _CLOSE:
                return
            with self._lock:
                self._completed += 1
                completed = self._completed
            if self._callback is None:
                continue
            try:
                self._callback(completed, self._total)
            except Exception:
                logger.exception("Progress callback failed at %d/%d", completed, self._total)

    def __enter__(self) -> ProgressTracker:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"ProgressTracker(completed={self.completed}, total={self.total})"
