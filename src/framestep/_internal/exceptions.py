from typing import NoReturn


class FramestepBaseError(Exception):
    pass


class InvalidTaskStateError(FramestepBaseError):
    """Raised when a task is driven through a transition it cannot make.

    Typical causes are completing a task that has already finished, or
    registering a second resume callback on a one-shot external task.
    """

    def __init__(
        self,
        *,
        operation: str,
        required_state: str,
        actual_state: str,
    ) -> None:
        message = (
            f"Cannot {operation!r} - task must be {required_state!r}, "
            f"but is currently {actual_state!r}."
        )
        super().__init__(message)
        self.operation: str = operation
        self.required_state: str = required_state
        self.actual_state: str = actual_state


class TaskNotCompletedError(InvalidTaskStateError):
    """Raised when trying to access result of incomplete task."""

    def __init__(self, *, operation: str = "read_result") -> None:
        super().__init__(
            operation=operation,
            required_state="finished",
            actual_state="in_progress",
        )


class InvalidDelayError(FramestepBaseError, ValueError):
    """Exception raised when a frame delay outside the allowed range is given."""

    def __init__(
        self,
        frames: int,
        *,
        minimum: int = 1,
        message: str = (
            "Frame delay ({frames}) is not supported. "
            "Please provide a value of at least {minimum}."
        ),
    ) -> None:
        super().__init__(message.format(frames=frames, minimum=minimum))
        self.frames: int = frames
        self.minimum: int = minimum


class InvalidTaskTypeError(FramestepBaseError, TypeError):
    """Raised when an entry point does not produce a suspendable computation.

    Entry points passed to the scheduler must be ``async def`` functions
    (or functions returning a coroutine) or functions returning a
    ``GameTask``.
    """

    def __init__(
        self,
        *,
        func_type: str,
        func_name: str,
        message: str | None = None,
    ) -> None:
        if message is None:
            message = (
                f"Expected coroutine or GameTask, got {func_type}. "
                f"Function {func_name!r} must be async or return a GameTask."
            )
        super().__init__(message)


class UnsupportedAwaitableError(FramestepBaseError, RuntimeError):
    """Raised inside a task that awaits something the scheduler cannot resume.

    Only frame yields, external tasks and other game tasks can be awaited
    from a game task. Awaiting an asyncio future, for example, is an error.
    """

    def __init__(self, *, awaited: object) -> None:
        message = (
            f"Game task yielded unsupported object {awaited!r}. "
            "Await scheduler.next(), scheduler.delay(..), "
            "scheduler.run_task(..) or another GameTask instead."
        )
        super().__init__(message)
        self.awaited: object = awaited


class TaskCancelledError(FramestepBaseError):
    """Default error injected into suspended tasks by ``cancel_all()``."""

    def __init__(self, message: str = "Task was cancelled.") -> None:
        super().__init__(message)


def raise_task_already_finished_error(
    operation: str,
    actual_state: str,
) -> NoReturn:
    raise InvalidTaskStateError(
        operation=operation,
        required_state="in_progress",
        actual_state=actual_state,
    )


def raise_external_already_awaited_error() -> NoReturn:
    raise InvalidTaskStateError(
        operation="on_completed",
        required_state="not awaited",
        actual_state="awaited",
    )
