# pyright: reportPrivateUsage=false
from __future__ import annotations

import asyncio
import functools
import inspect
import logging
import threading
import warnings
from typing import TYPE_CHECKING, Any, Final, ParamSpec, TypeVar

from typing_extensions import Self, override

from framestep._internal.awaitables import ExternalTask, FrameYield
from framestep._internal.driver import start_task
from framestep._internal.exceptions import InvalidDelayError, TaskCancelledError
from framestep._internal.pending import PendingQueue

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine
    from types import TracebackType

    from framestep._internal.common.types import (
        Action,
        ErrorFactory,
        UncaughtHandler,
    )
    from framestep._internal.configuration import SchedulerConfiguration
    from framestep._internal.task import GameTask

_R = TypeVar("_R")
_P = ParamSpec("_P")

logger = logging.getLogger(__name__)


class FrameScheduler:
    """Runs game tasks forward one frame at a time.

    Everything except ``enqueue_future``, ``start_deferred``, ``frame``
    and ``task_count`` must be called from the single thread that drives
    the frames. External tasks hand their completion back through the
    pending queue, never by resuming a task directly.
    """

    def __init__(self, *, config: SchedulerConfiguration) -> None:
        self._config: Final = config
        self._cond: Final = threading.Condition()
        self._pending: Final = PendingQueue()
        self._frame: int = 0
        self._external_count: int = 0
        self._canceller: ErrorFactory | None = None
        self._issued_errors: dict[int, Exception] = {}

    @override
    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}("
            f"name={self.name!r}, frame={self.frame}, "
            f"task_count={self.task_count})"
        )

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def frame(self) -> int:
        with self._cond:
            return self._frame

    @property
    def task_count(self) -> int:
        with self._cond:
            return len(self._pending) + self._external_count

    def enqueue_future(self, action: Action, frames: int = 0) -> None:
        if frames < 0:
            raise InvalidDelayError(frames, minimum=0)
        with self._cond:
            _ = self._pending.push(self._frame + frames, action)
            self._cond.notify_all()

    def next(self) -> FrameYield:
        return FrameYield(self, 1)

    def delay(self, frames: int) -> FrameYield:
        if frames < 1:
            raise InvalidDelayError(frames)
        return FrameYield(self, frames)

    def start_immediately(
        self,
        entry: Callable[_P, Any],
        /,
        *args: _P.args,
        **kwargs: _P.kwargs,
    ) -> GameTask[Any]:
        return start_task(entry, *args, **kwargs)

    def start_deferred(
        self,
        entry: Callable[_P, Any],
        /,
        *args: _P.args,
        **kwargs: _P.kwargs,
    ) -> None:
        def start() -> None:
            _ = start_task(entry, *args, **kwargs)

        self.enqueue_future(start, 1)

    def run_next_frame(self) -> None:
        with self._cond:
            self._frame += 1
            frame = self._frame

        drained = 0
        while True:
            with self._cond:
                entry = self._pending.pop_due(frame)
            if entry is None:
                break
            entry.action()
            drained += 1

        logger.debug(
            "%s: frame %d ran %d resumption(s)",
            self.name,
            frame,
            drained,
        )

    def run_until_all_tasks_finish(self) -> None:
        drained = 0
        while True:
            with self._cond:
                entry = self._pending.pop()
                while entry is None and self._external_count:
                    _ = self._cond.wait()
                    entry = self._pending.pop()
                if entry is None:
                    break
                self._frame = max(self._frame, entry.frame)
            entry.action()
            drained += 1

        logger.debug(
            "%s: ran %d resumption(s) to completion, stopped at frame %d",
            self.name,
            drained,
            self.frame,
        )

    def run_task(
        self,
        func: Callable[_P, Coroutine[Any, Any, _R]] | Callable[_P, _R],
        /,
        *args: _P.args,
        **kwargs: _P.kwargs,
    ) -> ExternalTask[_R]:
        call: functools.partial[Any]
        if inspect.iscoroutinefunction(func):
            call = functools.partial(_run_coroutine, func, *args, **kwargs)
        else:
            call = functools.partial(func, *args, **kwargs)

        bridge: ExternalTask[_R] = ExternalTask(self)
        with self._cond:
            self._external_count += 1
        try:
            future = self._config.worker_pools.executor.submit(call)
        except BaseException:
            self._finish_external(None)
            raise
        future.add_done_callback(bridge._trigger)  # noqa: SLF001
        return bridge

    def cancel_all(
        self,
        make_error: ErrorFactory = TaskCancelledError,
        on_uncaught: UncaughtHandler | None = None,
    ) -> None:
        """Abort every suspended task by raising an error where it waits.

        Blocks until all external tasks have completed first; the scheduler
        cannot interrupt work running on a worker thread, so the caller is
        expected to make that work stop. Queued resumptions, including the
        ones queued while cancelling, are then run with each frame yield
        raising ``make_error()`` instead of returning.

        A cancellation error escaping a resumption is passed to
        ``on_uncaught`` if given and otherwise dropped. Any other exception
        propagates.
        """
        cancelled = 0
        self._canceller = make_error
        try:
            while True:
                with self._cond:
                    while self._external_count:
                        _ = self._cond.wait()
                    entry = self._pending.pop()
                if entry is None:
                    break
                self._run_cancelled(entry.action, on_uncaught)
                cancelled += 1
        finally:
            self._canceller = None
            self._issued_errors.clear()

        logger.debug("%s: cancelled %d resumption(s)", self.name, cancelled)

    def close(self) -> None:
        if count := self.task_count:
            warnings.warn(
                f"Scheduler {self.name!r} closed with {count} unfinished "
                "task(s). Call cancel_all() and run_until_all_tasks_finish() "
                "first to let them clean up.",
                category=RuntimeWarning,
                stacklevel=2,
            )
        self._config.worker_pools.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None = None,
        exc_val: BaseException | None = None,
        exc_tb: TracebackType | None = None,
    ) -> None:
        self.close()

    def _run_cancelled(
        self,
        action: Action,
        on_uncaught: UncaughtHandler | None,
    ) -> None:
        try:
            if on_uncaught is None:
                action()
            else:
                on_uncaught(action)
        except Exception as exc:
            if self._issued_errors.get(id(exc)) is not exc:
                raise
            logger.debug("%s: dropped uncaught cancellation %r", self.name, exc)

    def _raise_if_cancelling(self) -> None:
        if self._canceller is None:
            return
        error = self._canceller()
        self._issued_errors[id(error)] = error
        raise error

    def _finish_external(self, continuation: Action | None) -> None:
        with self._cond:
            if continuation is not None:
                _ = self._pending.push(self._frame, continuation)
            self._external_count -= 1
            self._cond.notify_all()


def _run_coroutine(
    func: Callable[_P, Coroutine[Any, Any, _R]],
    /,
    *args: _P.args,
    **kwargs: _P.kwargs,
) -> _R:
    return asyncio.run(func(*args, **kwargs))
