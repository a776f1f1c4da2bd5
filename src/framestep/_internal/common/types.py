from collections.abc import Callable
from typing import Protocol, TypeAlias, runtime_checkable

Action: TypeAlias = Callable[[], None]
ErrorFactory: TypeAlias = Callable[[], Exception]
UncaughtHandler: TypeAlias = Callable[[Action], None]


@runtime_checkable
class Suspension(Protocol):
    """Anything a game task can suspend on.

    The task driver hands its resume callback to ``on_completed`` exactly
    once per suspension point.
    """

    def on_completed(self, callback: Action, /) -> None: ...
