from enum import Enum
from typing import Any, Final

EMPTY: Final[Any] = object()


class TaskStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    SUCCESS = "success"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not TaskStatus.IN_PROGRESS
