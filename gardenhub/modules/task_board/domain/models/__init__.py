from .lane import LANES, Lane
from .task import DEFAULT_GARDEN_TASKS, PlotRef, ProfileSummary, Task, TaskPriority, TaskStatus

__all__ = [
    "DEFAULT_GARDEN_TASKS",
    "LANES",
    "Lane",
    "PlotRef",
    "ProfileSummary",
    "Task",
    "TaskPriority",
    "TaskStatus",
]
