"""
chronoplan

Deadline-aware task scheduling kernel for a personal productivity assistant.
"""

from .exceptions import ChronoplanError, SchedulingError, TaskFileError
from .scheduling import (
    DeadlineMissed,
    Internal,
    NotEnoughTime,
    Schedule,
    ScheduledTask,
    Scheduler,
    SchedulingStrategy,
    Task,
    schedule,
)

__version__ = "1.0.0"

__all__ = [
    "ChronoplanError",
    "SchedulingError",
    "TaskFileError",
    "DeadlineMissed",
    "Internal",
    "NotEnoughTime",
    "Schedule",
    "ScheduledTask",
    "Scheduler",
    "SchedulingStrategy",
    "Task",
    "schedule",
]
