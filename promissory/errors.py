from __future__ import annotations

from typing import Any, Literal

from typing_extensions import TypeAlias

PromissoryErrorCode: TypeAlias = Literal[
    "AGGREGATE",
    "REJECTION",
    "INVALID_STATE",
    "SCHEDULER",
]


class PromissoryError(Exception):
    def __init__(self, msg: str, code: PromissoryErrorCode) -> None:
        super().__init__(msg)
        self.msg = msg
        self.code = code


class AggregateError(PromissoryError):
    """Raised by `any` when every input future rejected."""

    def __init__(self, errors: list[Exception]) -> None:
        super().__init__("All Promises rejected", "AGGREGATE")
        self.errors = errors

    def __repr__(self) -> str:
        return f"AggregateError(errors={self.errors!r})"


class RejectionError(PromissoryError):
    """Wraps a rejection reason that is not an exception."""

    def __init__(self, reason: Any) -> None:  # noqa: ANN401
        super().__init__(f"Future rejected with a non-exception reason: {reason!r}", "REJECTION")
        self.reason = reason


class InvalidStateError(PromissoryError):
    def __init__(self, msg: str) -> None:
        super().__init__(msg, "INVALID_STATE")


class SchedulerError(PromissoryError):
    def __init__(self, msg: str) -> None:
        super().__init__(msg, "SCHEDULER")
