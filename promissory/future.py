from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from typing import Any, ClassVar, Generic, final

from result import Err, Ok, Result
from typing_extensions import TypeAlias, TypeVar, assert_never

from promissory.errors import InvalidStateError, RejectionError
from promissory.logging import logger
from promissory.models.state import State
from promissory.options import Options
from promissory.scheduler import Scheduler, default_scheduler

T = TypeVar("T")
U = TypeVar("U")

Fulfill: TypeAlias = Callable[[Any], None]
Reject: TypeAlias = Callable[[Any], None]
Initializer: TypeAlias = Callable[[Fulfill, Reject], None]


@final
@dataclass(frozen=True)
class _Subscriber:
    callback: Callable[[Result[Any, Exception]], None]
    handles_rejection: bool


class Future(Generic[T]):
    """A value that is settled exactly once, some time after it is created.

    The initializer runs on the scheduler, never inside the constructor. It
    receives a `fulfill` and a `reject` function; whichever is called first
    settles the future and every later call is ignored. An exception raised by
    the initializer rejects the future.

    Continuations attached with `then`, `catch` and `finally_` are all kept
    and each one runs once, in attachment order, through the scheduler. This
    holds for continuations attached after the future settled as well.
    """

    # bound by promissory.combinators
    all: ClassVar[Callable[..., Future[list[Any]]]]
    all_settled: ClassVar[Callable[..., Future[list[Any]]]]
    any: ClassVar[Callable[..., Future[Any]]]

    def __init__(
        self,
        initializer: Initializer,
        *,
        scheduler: Scheduler | None = None,
        opts: Options | None = None,
    ) -> None:
        self._setup(scheduler, opts)
        self._scheduler.schedule(partial(self._initialize, initializer))

    @classmethod
    def _deferred(cls, scheduler: Scheduler, opts: Options) -> Future[Any]:
        # settled from the outside by `then`, no initializer involved
        future = cls.__new__(cls)
        future._setup(scheduler, opts)
        return future

    def _setup(self, scheduler: Scheduler | None, opts: Options | None) -> None:
        self._scheduler = scheduler if scheduler is not None else default_scheduler()
        self._opts = opts if opts is not None else Options()
        self._lock = threading.Lock()
        self._resolved = False
        self._handled = False
        self._result: Result[T, Exception] | None = None
        self._subscribers: list[_Subscriber] = []

    def __repr__(self) -> str:
        match self._result:
            case None:
                outcome = ""
            case Ok():
                outcome = f", value={self._result.unwrap()!r}"
            case Err():
                outcome = f", error={self._result.err()!r}"
        return f"Future(name={self._opts.name!r}, state={self.state.name}{outcome})"

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def opts(self) -> Options:
        return self._opts

    @property
    def state(self) -> State:
        if self._result is None:
            return State.PENDING
        if isinstance(self._result, Ok):
            return State.FULFILLED
        if isinstance(self._result, Err):
            return State.REJECTED
        assert_never(self._result)

    @property
    def pending(self) -> bool:
        return self._result is None

    @property
    def fulfilled(self) -> bool:
        return isinstance(self._result, Ok)

    @property
    def rejected(self) -> bool:
        return isinstance(self._result, Err)

    def done(self) -> bool:
        return not self.pending

    def result(self) -> T:
        """Return the value, or raise the error the future was rejected with."""
        if self._result is None:
            msg = "Future is still pending"
            raise InvalidStateError(msg)
        if isinstance(self._result, Ok):
            return self._result.unwrap()
        raise self._result.err()

    def exception(self) -> Exception | None:
        if self._result is None:
            msg = "Future is still pending"
            raise InvalidStateError(msg)
        return self._result.err()

    # Settlement

    def _initialize(self, initializer: Initializer) -> None:
        try:
            initializer(self._fulfill, self._reject)
        except Exception as e:  # noqa: BLE001
            self._reject(e)

    def _claim(self) -> bool:
        with self._lock:
            if self._resolved:
                return False
            self._resolved = True
            return True

    def _fulfill(self, value: Any) -> None:  # noqa: ANN401
        if not self._claim():
            return

        if value is self:
            self._settle(Err(TypeError("Future cannot be fulfilled with itself")))
        elif isinstance(value, Future):
            # adopt the outcome of the other future
            value._subscribe(_Subscriber(self._settle, handles_rejection=True))
        else:
            self._settle(Ok(value))

    def _reject(self, error: Any) -> None:  # noqa: ANN401
        if not self._claim():
            return

        if not isinstance(error, Exception):
            error = RejectionError(error)
        self._settle(Err(error))

    def _settle(self, result: Result[T, Exception]) -> None:
        with self._lock:
            assert self._result is None, "Future must only settle once."
            self._result = result
            subscribers, self._subscribers = self._subscribers, []

        logger.debug("%r settled, notifying %s subscriber(s)", self, len(subscribers))
        self._dispatch(subscribers, result)

        if isinstance(result, Err) and self._opts.warn_unhandled:
            self._scheduler.schedule(self._check_handled)

    def _check_handled(self) -> None:
        if not self._handled:
            logger.warning("%r was rejected and no rejection handler is attached", self)

    def _subscribe(self, subscriber: _Subscriber) -> None:
        with self._lock:
            self._handled = self._handled or subscriber.handles_rejection
            result = self._result
            if result is None:
                self._subscribers.append(subscriber)
                return
            # subscribers left over by a failed dispatch go first
            subscribers, self._subscribers = [*self._subscribers, subscriber], []

        self._dispatch(subscribers, result)

    def _dispatch(self, subscribers: list[_Subscriber], result: Result[T, Exception]) -> None:
        for i, subscriber in enumerate(subscribers):
            try:
                self._scheduler.schedule(partial(subscriber.callback, result))
            except Exception:
                # keep the rest attached, the next subscription dispatches them again
                with self._lock:
                    self._subscribers[:0] = subscribers[i:]
                raise

    # Chaining

    def then(
        self,
        on_fulfilled: Callable[[T], Any] | None = None,
        on_rejected: Callable[[Exception], Any] | None = None,
    ) -> Future[Any]:
        """Return a future settled from this one's outcome and the given handlers.

        A missing handler passes the value or error through unchanged. The
        return value of a handler fulfills the new future (a returned future is
        adopted) and an exception raised by a handler rejects it.
        """
        child = Future._deferred(self._scheduler, self._opts)

        def callback(result: Result[T, Exception]) -> None:
            handler: Callable[[Any], Any]
            if isinstance(result, Ok):
                if on_fulfilled is None:
                    child._fulfill(result.unwrap())
                    return
                handler, arg = on_fulfilled, result.unwrap()
            elif isinstance(result, Err):
                if on_rejected is None:
                    child._reject(result.err())
                    return
                handler, arg = on_rejected, result.err()
            else:
                assert_never(result)

            try:
                value = handler(arg)
            except Exception as e:  # noqa: BLE001
                child._reject(e)
            else:
                child._fulfill(value)

        self._subscribe(_Subscriber(callback, handles_rejection=True))
        return child

    def catch(self, on_rejected: Callable[[Exception], Any]) -> Future[Any]:
        return self.then(None, on_rejected)

    def finally_(self, on_complete: Callable[[], Any]) -> None:
        """Call `on_complete` once the future settles, whatever the outcome."""
        self._subscribe(_Subscriber(lambda _: on_complete(), handles_rejection=False))

    # Construction helpers

    @classmethod
    def resolve(
        cls,
        value: U,
        *,
        scheduler: Scheduler | None = None,
        opts: Options | None = None,
    ) -> Future[U]:
        return cls(lambda fulfill, _: fulfill(value), scheduler=scheduler, opts=opts)

    @classmethod
    def reject(
        cls,
        error: Exception,
        *,
        scheduler: Scheduler | None = None,
        opts: Options | None = None,
    ) -> Future[Any]:
        return cls(lambda _, reject: reject(error), scheduler=scheduler, opts=opts)

