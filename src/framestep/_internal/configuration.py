from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass


@dataclass(slots=True, kw_only=True)
class WorkerPools:
    """Thread pool used by ``run_task``.

    A pool passed in by the application is borrowed and never shut down
    here; otherwise one is created on first use and owned.
    """

    threadpool: ThreadPoolExecutor | None = None
    max_workers: int | None = None
    thread_name_prefix: str = "framestep-worker"
    _owned: ThreadPoolExecutor | None = None

    @property
    def executor(self) -> ThreadPoolExecutor:
        if self.threadpool is not None:
            return self.threadpool
        if self._owned is None:
            self._owned = ThreadPoolExecutor(
                max_workers=self.max_workers,
                thread_name_prefix=self.thread_name_prefix,
            )
        return self._owned

    def close(self) -> None:
        if self._owned is not None:
            self._owned.shutdown(wait=True)
            self._owned = None


@dataclass(slots=True, kw_only=True)
class SchedulerConfiguration:
    worker_pools: WorkerPools
    name: str = "framestep"
