from __future__ import annotations

import functools
import inspect
import logging
from typing import TYPE_CHECKING, Any, Final, Generic, ParamSpec, TypeVar

from framestep._internal.common.types import Suspension
from framestep._internal.exceptions import (
    FramestepBaseError,
    InvalidTaskTypeError,
    UnsupportedAwaitableError,
)
from framestep._internal.task import GameTask

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine

_T = TypeVar("_T")
_P = ParamSpec("_P")

logger = logging.getLogger(__name__)


class TaskDriver(Generic[_T]):
    """Steps a coroutine and reports its outcome on a ``GameTask``.

    Each step runs the coroutine until it finishes or yields a suspension
    object; the driver then hands its own ``_step`` to that object as the
    single resume callback.
    """

    __slots__: tuple[str, ...] = ("_coro", "task")

    def __init__(
        self,
        coro: Coroutine[Any, Any, _T],
        *,
        name: str | None = None,
    ) -> None:
        self._coro: Final = coro
        self.task: GameTask[_T] = GameTask(name=name)

    def start(self) -> GameTask[_T]:
        self._step()
        return self.task

    def _step(self) -> None:
        error: BaseException | None = None
        while True:
            try:
                if error is None:
                    awaited = self._coro.send(None)
                else:
                    awaited = self._coro.throw(error)
            except StopIteration as stop:
                self.task.complete_success(stop.value)
                return
            except Exception as exc:  # noqa: BLE001
                logger.debug("Task %s failed: %r", self.task.name, exc)
                self.task.complete_failure(exc)
                return

            if not isinstance(awaited, Suspension):
                error = UnsupportedAwaitableError(awaited=awaited)
                continue
            try:
                awaited.on_completed(self._step)
            except FramestepBaseError as exc:
                error = exc
                continue
            return


def start_coroutine(
    coro: Coroutine[Any, Any, _T],
    *,
    name: str | None = None,
) -> GameTask[_T]:
    return TaskDriver(coro, name=name).start()


def start_task(
    entry: Callable[_P, Any],
    /,
    *args: _P.args,
    **kwargs: _P.kwargs,
) -> GameTask[Any]:
    name = getattr(entry, "__qualname__", None)
    started = entry(*args, **kwargs)
    if isinstance(started, GameTask):
        return started
    if inspect.iscoroutine(started):
        return start_coroutine(started, name=name)
    raise InvalidTaskTypeError(
        func_type=type(started).__name__,
        func_name=name or repr(entry),
    )


def gametask(
    func: Callable[_P, Coroutine[Any, Any, _T]],
) -> Callable[_P, GameTask[_T]]:
    """Turn an ``async def`` function into a game task factory.

    Calling the decorated function runs its body right away, up to the
    first suspension point, and returns the ``GameTask`` tracking it.
    """

    @functools.wraps(func)
    def start(*args: _P.args, **kwargs: _P.kwargs) -> GameTask[_T]:
        return start_coroutine(func(*args, **kwargs), name=func.__qualname__)

    return start
