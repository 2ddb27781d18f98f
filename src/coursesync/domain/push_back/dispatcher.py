"""Partitioned worker pool that preserves per-record ordering of change events."""

from __future__ import annotations

import queue
import threading
from logging import getLogger
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from coursesync.domain.ports import ChangeEvent

    from .pipeline import PushOutcome

log = getLogger(__name__)

_STOP: Final = object()


class DispatcherClosedError(RuntimeError):
    """Raised when events are submitted to a dispatcher that has been closed."""


class PushBackDispatcher:
    """Deliver change events to ``handler`` on a fixed pool of worker threads.

    Events are partitioned by content-version id: every event for one record
    lands on the same worker queue and is handled in receipt order, while
    events for unrelated records proceed independently. A slow sink call only
    stalls its own partition.
    """

    def __init__(
        self,
        handler: Callable[[ChangeEvent], PushOutcome],
        *,
        workers: int = 4,
    ) -> None:
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self._handler = handler
        self._queues: list[queue.Queue[object]] = [queue.Queue() for _ in range(workers)]
        self._outcomes: list[PushOutcome] = []
        self._lock = threading.Lock()
        self._closed = False
        self._threads = [
            threading.Thread(
                target=self._work,
                args=(work_queue,),
                name=f"push-back-{index}",
                daemon=True,
            )
            for index, work_queue in enumerate(self._queues)
        ]
        for thread in self._threads:
            thread.start()

    def __enter__(self) -> PushBackDispatcher:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def outcomes(self) -> list[PushOutcome]:
        with self._lock:
            return list(self._outcomes)

    def take_outcomes(self) -> list[PushOutcome]:
        """Return the outcomes gathered so far and forget them."""

        with self._lock:
            taken, self._outcomes = self._outcomes, []
        return taken

    def partition_for(self, event: ChangeEvent) -> int:
        return event.version_id % len(self._queues)

    def submit(self, event: ChangeEvent) -> None:
        if self._closed:
            raise DispatcherClosedError("Push-back dispatcher is closed")
        self._queues[self.partition_for(event)].put(event)

    def drain(self) -> None:
        """Block until every submitted event has been handled."""

        for work_queue in self._queues:
            work_queue.join()

    def close(self) -> list[PushOutcome]:
        """Drain outstanding events, stop the workers and return all outcomes."""

        if not self._closed:
            self._closed = True
            for work_queue in self._queues:
                work_queue.put(_STOP)
            for thread in self._threads:
                thread.join()
        return self.outcomes

    def _work(self, work_queue: queue.Queue[object]) -> None:
        while True:
            item = work_queue.get()
            try:
                if item is _STOP:
                    return
                outcome = self._handler(item)  # type: ignore[arg-type]
                with self._lock:
                    self._outcomes.append(outcome)
            except Exception:
                log.exception("Push-back worker failed to handle %r", item)
            finally:
                work_queue.task_done()
