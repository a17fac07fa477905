from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from promissory import AggregateError, FifoScheduler, Fulfilled, Future, Options, Rejected, all_, all_settled, any_

if TYPE_CHECKING:
    from promissory.future import Fulfill, Reject


def deferred() -> tuple[Future[Any], Fulfill, Reject]:
    # settled by hand, after the scheduler ran the initializer
    callbacks: dict[str, Any] = {}

    def initializer(resolve: Fulfill, reject: Reject) -> None:
        callbacks["resolve"] = resolve
        callbacks["reject"] = reject

    f: Future[Any] = Future(initializer)
    return f, lambda v: callbacks["resolve"](v), lambda e: callbacks["reject"](e)


# all


def test_all_combines_futures(scheduler: FifoScheduler) -> None:
    f = Future.all([Future.resolve("foo"), Future.resolve("bar"), Future.resolve("foo")])
    scheduler.run()
    assert f.result() == ["foo", "bar", "foo"]


def test_all_rejects_with_first_rejection(scheduler: FifoScheduler) -> None:
    error = RuntimeError("bar")
    f = Future.all([Future.resolve("foo"), Future.reject(error), Future.reject(RuntimeError("baz"))])
    scheduler.run()
    assert f.exception() is error


def test_all_keeps_input_order(scheduler: FifoScheduler) -> None:
    a, resolve_a, _ = deferred()
    b, resolve_b, _ = deferred()
    c, resolve_c, _ = deferred()
    f = all_([a, b, c])
    scheduler.run()

    resolve_c("c")
    resolve_a("a")
    scheduler.run()
    assert f.pending

    resolve_b("b")
    scheduler.run()
    assert f.result() == ["a", "b", "c"]


def test_all_ignores_outcomes_after_rejection(scheduler: FifoScheduler) -> None:
    a, _, reject_a = deferred()
    b, resolve_b, reject_b = deferred()
    f = all_([a, b])
    scheduler.run()

    error = RuntimeError("first")
    reject_a(error)
    scheduler.run()
    reject_b(RuntimeError("second"))
    resolve_b("late")
    scheduler.run()

    assert f.exception() is error


def test_all_empty(scheduler: FifoScheduler) -> None:
    f = all_([])
    scheduler.run()
    assert f.result() == []


def test_all_accepts_plain_values(scheduler: FifoScheduler) -> None:
    f = all_(["foo", Future.resolve("bar"), 3])
    scheduler.run()
    assert f.result() == ["foo", "bar", 3]


def test_all_uses_scheduler_of_inputs() -> None:
    scheduler = FifoScheduler()
    f = all_([Future.resolve("foo", scheduler=scheduler), "bar"])
    assert f.scheduler is scheduler

    scheduler.run()
    assert f.result() == ["foo", "bar"]


# all_settled


def test_all_settled_statuses(scheduler: FifoScheduler) -> None:
    error = RuntimeError("bar")
    f = Future.all_settled([Future.resolve("foo"), Future.reject(error), Future.resolve("foo")])
    scheduler.run()

    assert f.result() == [Fulfilled("foo"), Rejected(error), Fulfilled("foo")]
    assert [s.to_dict() for s in f.result()] == [
        {"status": "fulfilled", "value": "foo"},
        {"status": "rejected", "reason": error},
        {"status": "fulfilled", "value": "foo"},
    ]


def test_all_settled_never_rejects(scheduler: FifoScheduler) -> None:
    errors = [RuntimeError("a"), RuntimeError("b")]
    f = all_settled([Future.reject(e) for e in errors])
    scheduler.run()

    assert f.fulfilled
    assert [s.status for s in f.result()] == ["rejected", "rejected"]


def test_all_settled_keeps_input_order(scheduler: FifoScheduler) -> None:
    a, resolve_a, _ = deferred()
    b, _, reject_b = deferred()
    f = all_settled([a, b])
    scheduler.run()

    error = RuntimeError("b")
    reject_b(error)
    scheduler.run()
    assert f.pending

    resolve_a("a")
    scheduler.run()
    assert f.result() == [Fulfilled("a"), Rejected(error)]


def test_all_settled_empty(scheduler: FifoScheduler) -> None:
    f = all_settled([])
    scheduler.run()
    assert f.result() == []


# any


def test_any_fulfills_with_first_value(scheduler: FifoScheduler) -> None:
    a, resolve_a, _ = deferred()
    b, resolve_b, _ = deferred()
    f = Future.any([Future.reject(RuntimeError("foo")), a, b])
    scheduler.run()

    resolve_b("b")
    resolve_a("a")
    scheduler.run()
    assert f.result() == "b"


@pytest.mark.parametrize("n", [1, 2, 5])
def test_any_rejects_with_aggregate_error(scheduler: FifoScheduler, n: int) -> None:
    errors = [RuntimeError(str(i)) for i in range(n)]
    f = Future.any([Future.reject(e) for e in errors])
    scheduler.run()

    error = f.exception()
    assert isinstance(error, AggregateError)
    assert str(error) == "All Promises rejected"
    assert error.code == "AGGREGATE"
    assert len(error.errors) == n
    assert error.errors == errors


def test_any_keeps_input_order_of_errors(scheduler: FifoScheduler) -> None:
    a, _, reject_a = deferred()
    b, _, reject_b = deferred()
    f = any_([a, b])
    scheduler.run()

    error_a, error_b = RuntimeError("a"), RuntimeError("b")
    reject_b(error_b)
    reject_a(error_a)
    scheduler.run()

    error = f.exception()
    assert isinstance(error, AggregateError)
    assert error.errors == [error_a, error_b]


def test_any_empty(scheduler: FifoScheduler) -> None:
    f = any_([])
    scheduler.run()

    error = f.exception()
    assert isinstance(error, AggregateError)
    assert error.errors == []


@pytest.mark.parametrize("combinator", [all_, all_settled, any_, Future.all, Future.all_settled, Future.any])
def test_combinators_inherit_options(scheduler: FifoScheduler, combinator: Any) -> None:  # noqa: ANN401
    opts = Options(name="root", warn_unhandled=True)
    f = combinator(["plain", Future.resolve(1, opts=opts)])
    assert f.opts is opts

    explicit = Options(name="explicit")
    assert combinator([Future.resolve(1, opts=opts)], opts=explicit).opts is explicit
    assert combinator(["plain"]).opts == Options()
    scheduler.run()
