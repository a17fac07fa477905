"""Combinators aggregating several futures into one.

Results are written into the slot of the input they came from, so the order
of the output always follows the order of the input, whatever the order in
which the inputs settle. Inputs that are not futures count as already
fulfilled values.
"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Any

from typing_extensions import TypeVar

from promissory.errors import AggregateError
from promissory.future import Fulfill, Future, Reject
from promissory.logging import logger
from promissory.models.status import Fulfilled, Rejected, SettledStatus
from promissory.options import Options
from promissory.scheduler import default_scheduler

if TYPE_CHECKING:
    from collections.abc import Iterable

    from promissory.scheduler import Scheduler

T = TypeVar("T")


def _prepare(
    items: Iterable[Future[T] | T],
    scheduler: Scheduler | None,
    opts: Options | None,
) -> tuple[list[Future[T]], Scheduler, Options]:
    # both default to the ones of the first future among the inputs
    items = list(items)
    first = next((i for i in items if isinstance(i, Future)), None)
    if scheduler is None:
        scheduler = first.scheduler if first is not None else default_scheduler()
    if opts is None:
        opts = first.opts if first is not None else Options()

    futures = [i if isinstance(i, Future) else Future.resolve(i, scheduler=scheduler, opts=opts) for i in items]
    return futures, scheduler, opts


def all_(
    futures: Iterable[Future[T] | T],
    *,
    scheduler: Scheduler | None = None,
    opts: Options | None = None,
) -> Future[list[T]]:
    """Fulfill with every value once all inputs fulfill, reject with the first rejection."""
    inputs, scheduler, opts = _prepare(futures, scheduler, opts)

    def initializer(fulfill: Fulfill, reject: Reject) -> None:
        values: list[Any] = [None] * len(inputs)
        remaining = len(inputs)

        def on_fulfilled(index: int, value: T) -> None:
            nonlocal remaining
            values[index] = value
            remaining -= 1
            if remaining == 0:
                logger.debug("all: %s input(s) fulfilled", len(inputs))
                fulfill(values)

        if not inputs:
            fulfill(values)

        for index, future in enumerate(inputs):
            future.then(partial(on_fulfilled, index), reject)

    return Future(initializer, scheduler=scheduler, opts=opts)


def all_settled(
    futures: Iterable[Future[T] | T],
    *,
    scheduler: Scheduler | None = None,
    opts: Options | None = None,
) -> Future[list[SettledStatus[T]]]:
    """Fulfill with the status of every input once all of them settle. Never rejects."""
    inputs, scheduler, opts = _prepare(futures, scheduler, opts)

    def initializer(fulfill: Fulfill, _: Reject) -> None:
        statuses: list[Any] = [None] * len(inputs)
        remaining = len(inputs)

        def on_settled(index: int, status: SettledStatus[T]) -> None:
            nonlocal remaining
            statuses[index] = status
            remaining -= 1
            if remaining == 0:
                logger.debug("all_settled: %s input(s) settled", len(inputs))
                fulfill(statuses)

        if not inputs:
            fulfill(statuses)

        for index, future in enumerate(inputs):
            future.then(
                lambda value, index=index: on_settled(index, Fulfilled(value)),
                lambda error, index=index: on_settled(index, Rejected(error)),
            )

    return Future(initializer, scheduler=scheduler, opts=opts)


def any_(
    futures: Iterable[Future[T] | T],
    *,
    scheduler: Scheduler | None = None,
    opts: Options | None = None,
) -> Future[T]:
    """Fulfill with the first value, reject with an `AggregateError` if every input rejects."""
    inputs, scheduler, opts = _prepare(futures, scheduler, opts)

    def initializer(fulfill: Fulfill, reject: Reject) -> None:
        errors: list[Exception | None] = [None] * len(inputs)
        remaining = len(inputs)

        def on_rejected(index: int, error: Exception) -> None:
            nonlocal remaining
            errors[index] = error
            remaining -= 1
            if remaining == 0:
                logger.debug("any: all %s input(s) rejected", len(inputs))
                reject(AggregateError([e for e in errors if e is not None]))

        if not inputs:
            reject(AggregateError([]))

        for index, future in enumerate(inputs):
            future.then(fulfill, partial(on_rejected, index))

    return Future(initializer, scheduler=scheduler, opts=opts)


Future.all = staticmethod(all_)
Future.all_settled = staticmethod(all_settled)
Future.any = staticmethod(any_)
