"""Runtime primitives (background tasks, contract checks)."""

from .contracts import PreconditionReporter
from .tasks import BackgroundTask, TaskInstance, TaskState

__all__ = [
    "BackgroundTask",
    "PreconditionReporter",
    "TaskInstance",
    "TaskState",
]
