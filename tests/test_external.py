import asyncio
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

import pytest

from framestep import ExternalTask, FrameScheduler, TaskStatus
from framestep.errors import InvalidTaskStateError, TaskNotCompletedError


async def await_bridge(bridge: ExternalTask[str]) -> str:
    return await bridge


def test_resumption_is_deferred_to_frame_drain(
    pooled_scheduler: FrameScheduler,
    threadpool: ThreadPoolExecutor,
) -> None:
    worker_threads: list[str] = []
    resumed_on: list[str] = []

    def work() -> str:
        worker_threads.append(threading.current_thread().name)
        return "payload"

    async def body() -> str:
        value = await pooled_scheduler.run_task(work)
        resumed_on.append(threading.current_thread().name)
        return value

    task = pooled_scheduler.start_immediately(body)
    threadpool.shutdown(wait=True)

    assert worker_threads
    assert resumed_on == []
    assert task.status is TaskStatus.IN_PROGRESS
    assert pooled_scheduler.task_count == 1

    pooled_scheduler.run_next_frame()

    assert task.result == "payload"
    assert resumed_on == [threading.current_thread().name]
    assert worker_threads != resumed_on
    assert pooled_scheduler.task_count == 0


def test_bridge_finished_before_await(
    pooled_scheduler: FrameScheduler,
    threadpool: ThreadPoolExecutor,
) -> None:
    bridge = pooled_scheduler.run_task(str.upper, "ready")
    threadpool.shutdown(wait=True)
    assert bridge.is_done()
    assert pooled_scheduler.task_count == 0

    task = pooled_scheduler.start_immediately(await_bridge, bridge)
    assert task.status is TaskStatus.IN_PROGRESS
    assert pooled_scheduler.task_count == 1

    pooled_scheduler.run_next_frame()
    assert task.result == "READY"


def test_foreign_failure_is_raised_in_task(
    pooled_scheduler: FrameScheduler,
) -> None:
    error = OSError("disk unavailable")

    def broken() -> str:
        raise error

    task = pooled_scheduler.start_immediately(
        await_bridge,
        pooled_scheduler.run_task(broken),
    )
    pooled_scheduler.run_until_all_tasks_finish()

    assert task.status is TaskStatus.FAILED
    assert task.failure is error


def test_async_foreign_operation(pooled_scheduler: FrameScheduler) -> None:
    async def fetch(value: int) -> int:
        await asyncio.sleep(0)
        return value * 10

    async def body() -> int:
        return await pooled_scheduler.run_task(fetch, 4)

    task = pooled_scheduler.start_immediately(body)
    pooled_scheduler.run_until_all_tasks_finish()

    assert task.result == 40


def test_run_until_all_waits_for_external_work(
    pooled_scheduler: FrameScheduler,
) -> None:
    release = threading.Event()

    def slow() -> str:
        _ = release.wait(timeout=5)
        return "slow"

    task = pooled_scheduler.start_immediately(
        await_bridge,
        pooled_scheduler.run_task(slow),
    )
    timer = threading.Timer(0.05, release.set)
    timer.start()

    pooled_scheduler.run_until_all_tasks_finish()
    timer.join()

    assert task.result == "slow"
    assert pooled_scheduler.task_count == 0


def test_task_count_tracks_external_work(
    pooled_scheduler: FrameScheduler,
    wait_until: Callable[[Callable[[], bool]], None],
) -> None:
    release = threading.Event()
    bridge = pooled_scheduler.run_task(release.wait, 5)
    assert pooled_scheduler.task_count == 1
    with pytest.raises(TaskNotCompletedError, match="'result'"):
        _ = bridge.result()

    release.set()
    wait_until(lambda: pooled_scheduler.task_count == 0)

    assert bridge.result() is True


def test_bridge_accepts_a_single_awaiter(
    pooled_scheduler: FrameScheduler,
) -> None:
    release = threading.Event()

    def work() -> str:
        _ = release.wait(timeout=5)
        return "once"

    bridge = pooled_scheduler.run_task(work)
    first = pooled_scheduler.start_immediately(await_bridge, bridge)
    second = pooled_scheduler.start_immediately(await_bridge, bridge)

    assert second.status is TaskStatus.FAILED
    assert isinstance(second.failure, InvalidTaskStateError)

    release.set()
    pooled_scheduler.run_until_all_tasks_finish()
    assert first.result == "once"


def test_owned_pool_is_created_lazily() -> None:
    scheduler = FrameScheduler(name="lazy", max_workers=1)
    task = scheduler.start_immediately(
        await_bridge,
        scheduler.run_task(lambda: threading.current_thread().name),
    )
    scheduler.run_until_all_tasks_finish()
    scheduler.close()

    assert task.result.startswith("lazy-worker")
