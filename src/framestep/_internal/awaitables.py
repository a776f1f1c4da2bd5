# pyright: reportPrivateUsage=false
from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Final, Generic, TypeVar, final

from typing_extensions import override

from framestep._internal.common.constants import EMPTY
from framestep._internal.exceptions import (
    TaskNotCompletedError,
    raise_external_already_awaited_error,
)

if TYPE_CHECKING:
    from collections.abc import Generator
    from concurrent.futures import Future

    from framestep._internal.common.types import Action
    from framestep._internal.scheduler import FrameScheduler

_T = TypeVar("_T")


@final
class FrameYield:
    """Suspend the awaiting task for a number of frames.

    Created by ``scheduler.next()`` and ``scheduler.delay(..)``; nothing
    is queued until a task actually awaits it.
    """

    __slots__: tuple[str, ...] = ("frames", "scheduler")

    def __init__(self, scheduler: FrameScheduler, frames: int) -> None:
        self.scheduler: Final = scheduler
        self.frames: Final = frames

    @override
    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(frames={self.frames})"

    def on_completed(self, callback: Action, /) -> None:
        self.scheduler.enqueue_future(callback, self.frames)

    def __await__(self) -> Generator[FrameYield, None, None]:
        yield self
        self.scheduler._raise_if_cancelling()  # noqa: SLF001


@final
class ExternalTask(Generic[_T]):
    """One-shot bridge between work on a worker thread and the frame queue.

    The worker thread only ever touches this object through ``_trigger``;
    the awaiting task is resumed on the scheduler's thread, on a frame
    drain that follows completion.
    """

    __slots__: tuple[str, ...] = (
        "_continuation",
        "_future",
        "_lock",
        "scheduler",
    )

    def __init__(self, scheduler: FrameScheduler) -> None:
        self._continuation: Action | None = None
        self._future: Future[_T] = EMPTY
        self._lock: Final = threading.Lock()
        self.scheduler: Final = scheduler

    @override
    def __repr__(self) -> str:
        state = "done" if self.is_done() else "pending"
        return f"{self.__class__.__qualname__}(state={state})"

    def is_done(self) -> bool:
        with self._lock:
            return self._future is not EMPTY

    def on_completed(self, callback: Action, /) -> None:
        with self._lock:
            if self._continuation is not None:
                raise_external_already_awaited_error()
            self._continuation = callback
            triggered = self._future is not EMPTY
        if triggered:
            self.scheduler.enqueue_future(callback, 0)

    def result(self) -> _T:
        with self._lock:
            future = self._future
        if future is EMPTY:
            raise TaskNotCompletedError(operation="result")
        return future.result()

    def __await__(self) -> Generator[ExternalTask[_T], None, _T]:
        yield self
        self.scheduler._raise_if_cancelling()  # noqa: SLF001
        return self.result()

    def _trigger(self, future: Future[_T]) -> None:
        with self._lock:
            self._future = future
            continuation = self._continuation
        self.scheduler._finish_external(continuation)  # noqa: SLF001
