from __future__ import annotations

from .combinators import all_, all_settled, any_
from .errors import AggregateError, InvalidStateError, PromissoryError, RejectionError, SchedulerError
from .future import Future
from .models.state import State
from .models.status import Fulfilled, Rejected, SettledStatus
from .options import Options
from .scheduler import AsyncioScheduler, FifoScheduler, Scheduler, default_scheduler, set_default_scheduler

__all__ = [
    "AggregateError",
    "AsyncioScheduler",
    "FifoScheduler",
    "Fulfilled",
    "Future",
    "InvalidStateError",
    "Options",
    "PromissoryError",
    "Rejected",
    "RejectionError",
    "Scheduler",
    "SchedulerError",
    "SettledStatus",
    "State",
    "all_",
    "all_settled",
    "any_",
    "default_scheduler",
    "set_default_scheduler",
]
