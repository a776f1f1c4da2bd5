"""Framestep entrypoint."""

from __future__ import annotations

from typing import TYPE_CHECKING

from framestep._internal.configuration import (
    SchedulerConfiguration,
    WorkerPools,
)
from framestep._internal.scheduler import FrameScheduler as _FrameScheduler

if TYPE_CHECKING:
    from concurrent.futures import ThreadPoolExecutor


class FrameScheduler(_FrameScheduler):
    """FrameScheduler steps cooperative game tasks once per frame.

    Tasks run on the thread that calls ``run_next_frame()`` until they
    await ``next()``, ``delay(..)``, an external task started with
    ``run_task(..)`` or another game task. Independent instances share
    nothing, so one scheduler per game loop (or per test) is the norm.
    """

    def __init__(
        self,
        *,
        name: str = "framestep",
        threadpool_executor: ThreadPoolExecutor | None = None,
        max_workers: int | None = None,
        config: SchedulerConfiguration | None = None,
    ) -> None:
        """Initialize a `FrameScheduler` instance."""
        if config is None:
            config = SchedulerConfiguration(
                name=name,
                worker_pools=WorkerPools(
                    threadpool=threadpool_executor,
                    max_workers=max_workers,
                    thread_name_prefix=f"{name}-worker",
                ),
            )
        super().__init__(config=config)
