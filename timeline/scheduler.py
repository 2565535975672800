# timeline/scheduler.py
import heapq
import itertools
import logging
import time
from typing import Any, Callable, List, Optional, Tuple

class Task:
    """A deferred call; cancel() before it fires and it never runs."""
    __slots__ = ("due", "delay", "fn", "args", "cancelled", "done")

    def __init__(self, due: float, delay: float, fn: Callable[..., Any], args: tuple):
        self.due = due
        self.delay = delay
        self.fn = fn
        self.args = args
        self.cancelled = False
        self.done = False

    def cancel(self):
        self.cancelled = True

    def __repr__(self):
        name = getattr(self.fn, "__name__", repr(self.fn))
        return f"Task({name}{self.args!r}, delay={self.delay:.3f})"

class Scheduler:
    """Cooperative timer queue, drained from the main loop via run_due().

    Tasks run in (due time, submission order). Nothing runs on its own thread.
    """
    def __init__(self, clock: Callable[[], float] = time.perf_counter):
        self.clock = clock
        self._seq = itertools.count()
        self._heap: List[Tuple[float, int, Task]] = []

    @property
    def pending(self) -> int:
        return sum(1 for _, _, t in self._heap if not t.cancelled)

    def call_later(self, delay: float, fn: Callable[..., Any], *args) -> Task:
        delay = max(0.0, float(delay))
        task = Task(self.clock() + delay, delay, fn, args)
        heapq.heappush(self._heap, (task.due, next(self._seq), task))
        return task

    def run_due(self, now: Optional[float] = None) -> int:
        now = self.clock() if now is None else now
        # 只處理本次呼叫前已到期的 task，callback 內新排的留到下一輪
        due: List[Task] = []
        while self._heap and self._heap[0][0] <= now:
            due.append(heapq.heappop(self._heap)[2])
        ran = 0
        for task in due:
            if task.cancelled:
                continue
            try:
                task.fn(*task.args)
            except Exception:
                logging.exception("Scheduled task failed: %r", task)
            task.done = True
            ran += 1
        return ran

    def cancel_all(self) -> int:
        n = 0
        for _, _, task in self._heap:
            if not task.cancelled:
                task.cancel(); n += 1
        self._heap.clear()
        return n
