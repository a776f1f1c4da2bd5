from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, ParamSpec, TypeVar, cast

from typing_extensions import override

from framestep._internal.common.constants import EMPTY, TaskStatus
from framestep._internal.exceptions import (
    TaskNotCompletedError,
    raise_task_already_finished_error,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

    from framestep._internal.common.types import Action

_T = TypeVar("_T")
_P = ParamSpec("_P")


class GameTask(Generic[_T]):
    """Observable state of one suspendable computation.

    A task is created in progress and finishes exactly once, either with
    a value or with an exception. Continuations registered before that
    moment fire in registration order on the thread that finishes the
    task; continuations registered afterwards fire immediately.

    Game tasks are awaitable from other game tasks: awaiting returns the
    result or re-raises the captured failure.
    """

    __slots__: tuple[str, ...] = (
        "_continuations",
        "_failure",
        "_result",
        "name",
        "status",
    )

    def __init__(self, *, name: str | None = None) -> None:
        self._continuations: list[Action] = []
        self._failure: BaseException | None = None
        self._result: _T = EMPTY
        self.name: str = name or f"task-{id(self):x}"
        self.status: TaskStatus = TaskStatus.IN_PROGRESS

    @classmethod
    def completed(cls, value: _T, *, name: str | None = None) -> GameTask[_T]:
        task = cls(name=name)
        task.complete_success(value)
        return task

    @classmethod
    def failed(
        cls,
        error: BaseException,
        *,
        name: str | None = None,
    ) -> GameTask[Any]:
        task: GameTask[Any] = cls(name=name)
        task.complete_failure(error)
        return task

    @override
    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}("
            f"name={self.name!r}, status={self.status.value})"
        )

    def is_done(self) -> bool:
        return self.status.is_terminal

    def complete_success(self, value: _T = None) -> None:  # type: ignore[assignment]
        if self.status.is_terminal:
            raise_task_already_finished_error(
                "complete_success",
                self.status.value,
            )
        self._result = value
        self.status = TaskStatus.SUCCESS
        self._fire_continuations()

    def complete_failure(self, error: BaseException) -> None:
        if self.status.is_terminal:
            raise_task_already_finished_error(
                "complete_failure",
                self.status.value,
            )
        self._failure = error
        self.status = TaskStatus.FAILED
        self._fire_continuations()

    def register_continuation(self, callback: Action, /) -> None:
        if self.status.is_terminal:
            callback()
            return
        self._continuations.append(callback)

    def on_completed(self, callback: Action, /) -> None:
        self.register_continuation(callback)

    def then(
        self,
        entry: Callable[_P, Any],
        /,
        *args: _P.args,
        **kwargs: _P.kwargs,
    ) -> None:
        from framestep._internal.driver import start_task  # noqa: PLC0415

        def start_follow_up() -> None:
            _ = start_task(entry, *args, **kwargs)

        self.register_continuation(start_follow_up)

    def read_result(self) -> _T:
        if self.status is TaskStatus.SUCCESS:
            return self._result
        if self.status is TaskStatus.FAILED:
            raise cast("BaseException", self._failure)
        raise TaskNotCompletedError(operation="read_result")

    def read_failure(self) -> BaseException | None:
        if not self.status.is_terminal:
            raise TaskNotCompletedError(operation="read_failure")
        return self._failure

    @property
    def result(self) -> _T:
        return self.read_result()

    @property
    def failure(self) -> BaseException | None:
        return self.read_failure()

    def __await__(self) -> Generator[GameTask[_T], None, _T]:
        if not self.status.is_terminal:
            yield self
        return self.read_result()

    def _fire_continuations(self) -> None:
        continuations, self._continuations = self._continuations, []
        for callback in continuations:
            callback()
