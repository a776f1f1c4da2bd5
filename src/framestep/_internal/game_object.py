from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final, ParamSpec, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine

    from framestep._internal.awaitables import ExternalTask, FrameYield
    from framestep._internal.scheduler import FrameScheduler

_R = TypeVar("_R")
_P = ParamSpec("_P")


class AsyncGameObject:
    """Base class for objects whose behaviour is written as game tasks.

    Each instance is bound to the scheduler it was created with, so
    several schedulers can run side by side without sharing state.
    """

    __slots__: tuple[str, ...] = ("scheduler",)

    def __init__(self, scheduler: FrameScheduler) -> None:
        self.scheduler: Final = scheduler

    def next(self) -> FrameYield:
        return self.scheduler.next()

    def delay(self, frames: int) -> FrameYield:
        return self.scheduler.delay(frames)

    def run_task(
        self,
        func: Callable[_P, Coroutine[Any, Any, _R]] | Callable[_P, _R],
        /,
        *args: _P.args,
        **kwargs: _P.kwargs,
    ) -> ExternalTask[_R]:
        return self.scheduler.run_task(func, *args, **kwargs)
