import time
from collections.abc import Callable, Iterator
from concurrent.futures import ThreadPoolExecutor
from typing import TypeAlias

import pytest

from framestep import FrameScheduler


@pytest.fixture
def scheduler() -> Iterator[FrameScheduler]:
    scheduler = FrameScheduler(name="test")
    yield scheduler
    scheduler.cancel_all()
    scheduler.close()


@pytest.fixture
def threadpool() -> Iterator[ThreadPoolExecutor]:
    executor = ThreadPoolExecutor(max_workers=2)
    yield executor
    executor.shutdown(wait=True)


@pytest.fixture
def pooled_scheduler(
    threadpool: ThreadPoolExecutor,
) -> Iterator[FrameScheduler]:
    scheduler = FrameScheduler(name="pooled", threadpool_executor=threadpool)
    yield scheduler
    scheduler.cancel_all()
    scheduler.close()


WaitUntil: TypeAlias = Callable[[Callable[[], bool]], None]


def _wait_until(predicate: Callable[[], bool], timeout: float = 5.0) -> None:
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            pytest.fail("condition was not met in time")
        time.sleep(0.001)


@pytest.fixture(scope="session")
def wait_until() -> WaitUntil:
    return _wait_until
