"""Custom exceptions for the framestep library.

This module defines the exceptions the scheduler and task handles can
raise, plus the default error injected into tasks by ``cancel_all()``.
"""

__all__ = (
    "FramestepBaseError",
    "InvalidDelayError",
    "InvalidTaskStateError",
    "InvalidTaskTypeError",
    "TaskCancelledError",
    "TaskNotCompletedError",
    "UnsupportedAwaitableError",
)

from framestep._internal.exceptions import (
    FramestepBaseError,
    InvalidDelayError,
    InvalidTaskStateError,
    InvalidTaskTypeError,
    TaskCancelledError,
    TaskNotCompletedError,
    UnsupportedAwaitableError,
)
