from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from promissory import FifoScheduler, set_default_scheduler

if TYPE_CHECKING:
    from collections.abc import Generator


def pytest_configure() -> None:
    logging.basicConfig(level=logging.ERROR)  # set log levels very high for tests


@pytest.fixture
def scheduler() -> Generator[FifoScheduler]:
    # futures created without an explicit scheduler land here too
    scheduler = FifoScheduler()
    previous = set_default_scheduler(scheduler)

    yield scheduler

    set_default_scheduler(previous)
