from __future__ import annotations

from enum import Enum


class State(Enum):
    PENDING = "PENDING"
    FULFILLED = "FULFILLED"
    REJECTED = "REJECTED"

    @property
    def settled(self) -> bool:
        return self is not State.PENDING
