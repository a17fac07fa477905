"""Deferred schedulers.

Every initializer and every continuation of a `Future` is handed to a
`Scheduler`, which runs it later, after the current synchronous work, in the
order it was scheduled.
"""

from __future__ import annotations

import asyncio
from collections import deque
from typing import TYPE_CHECKING, Protocol, final, runtime_checkable

from promissory.errors import SchedulerError
from promissory.logging import logger

if TYPE_CHECKING:
    from collections.abc import Callable


@runtime_checkable
class Scheduler(Protocol):
    def schedule(self, task: Callable[[], None], /) -> None: ...


@final
class FifoScheduler:
    """Run-later queue drained explicitly with `step` or `run`."""

    def __init__(self) -> None:
        self._tasks: deque[Callable[[], None]] = deque()
        self._running = False

    def __repr__(self) -> str:
        return f"FifoScheduler(pending={len(self._tasks)})"

    def schedule(self, task: Callable[[], None], /) -> None:
        self._tasks.append(task)

    def pending(self) -> int:
        return len(self._tasks)

    def empty(self) -> bool:
        return not self._tasks

    def step(self) -> bool:
        if self._running:
            msg = "FifoScheduler cannot be drained from inside one of its own tasks"
            raise SchedulerError(msg)

        if not self._tasks:
            return False

        task = self._tasks.popleft()
        self._running = True
        try:
            task()
        finally:
            self._running = False
        return True

    def run(self, max_steps: int | None = None) -> int:
        """Run tasks until the queue is empty, including tasks scheduled meanwhile.

        Returns the number of tasks run. An exception raised by a task
        propagates; the remaining tasks stay queued.
        """
        steps = 0
        while (max_steps is None or steps < max_steps) and self.step():
            steps += 1

        logger.debug("FifoScheduler ran %s task(s), %s pending", steps, len(self._tasks))
        return steps


@final
class AsyncioScheduler:
    """Schedules tasks on an asyncio event loop.

    The loop is the one given, else the loop running when the scheduler is
    created. Tasks may be scheduled from any thread.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop if loop is not None else asyncio.get_running_loop()

    def __repr__(self) -> str:
        return f"AsyncioScheduler(loop={self._loop!r})"

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    def schedule(self, task: Callable[[], None], /) -> None:
        self._loop.call_soon_threadsafe(task)


_default: Scheduler = FifoScheduler()


def default_scheduler() -> Scheduler:
    return _default


def set_default_scheduler(scheduler: Scheduler) -> Scheduler:
    """Replace the default scheduler and return the previous one."""
    global _default  # noqa: PLW0603
    if not isinstance(scheduler, Scheduler):
        msg = f"scheduler must be `Scheduler`, got {type(scheduler).__name__}"
        raise TypeError(msg)

    previous, _default = _default, scheduler
    return previous
