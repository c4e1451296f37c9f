"""
Scheduling kernel.

This package turns a list of deadline-bound tasks into:
- An interval placement (ScheduleTree) packed against the deadlines.
- A compacted placement, pulled towards the present by one of two strategies.
- A Schedule: the placement read back in start order.
"""

from .types import Schedule, ScheduledTask, SchedulingStrategy, Task, TaskHandle
from .errors import DeadlineMissed, Internal, NotEnoughTime, SchedulingFailure
from .schedule_tree import Entry, ScheduleTree
from .strategies import DEFAULT_MAX_PASSES, importance_first, urgency_first
from .scheduler import SCHEDULE_DELAY, Scheduler, schedule

__all__ = [
    "Schedule",
    "ScheduledTask",
    "SchedulingStrategy",
    "Task",
    "TaskHandle",
    "DeadlineMissed",
    "Internal",
    "NotEnoughTime",
    "SchedulingFailure",
    "Entry",
    "ScheduleTree",
    "DEFAULT_MAX_PASSES",
    "importance_first",
    "urgency_first",
    "SCHEDULE_DELAY",
    "Scheduler",
    "schedule",
]
