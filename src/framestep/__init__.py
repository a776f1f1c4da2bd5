"""Frame-stepped cooperative task scheduling.

This module exposes the scheduler that drives game tasks one frame at a
time, the task handle that reports their outcome, and the awaitables a
task suspends on.
"""

from framestep._internal.awaitables import ExternalTask, FrameYield
from framestep._internal.common.constants import TaskStatus
from framestep._internal.configuration import (
    SchedulerConfiguration,
    WorkerPools,
)
from framestep._internal.driver import gametask
from framestep._internal.game_object import AsyncGameObject
from framestep._internal.task import GameTask
from framestep.scheduler import FrameScheduler

__all__ = (
    "AsyncGameObject",
    "ExternalTask",
    "FrameScheduler",
    "FrameYield",
    "GameTask",
    "SchedulerConfiguration",
    "TaskStatus",
    "WorkerPools",
    "gametask",
)
__version__ = "0.1.0"
