"""Settlement status entries produced by `all_settled`."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Literal, Union, final

from typing_extensions import TypeAlias, TypeVar

T = TypeVar("T")


@final
@dataclass(frozen=True)
class Fulfilled(Generic[T]):
    value: T
    status: Literal["fulfilled"] = field(default="fulfilled", init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status, "value": self.value}


@final
@dataclass(frozen=True)
class Rejected:
    reason: Exception
    status: Literal["rejected"] = field(default="rejected", init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status, "reason": self.reason}


SettledStatus: TypeAlias = Union[Fulfilled[T], Rejected]
