"""
scheduling/scheduler.py — Schedule Facade

Public entry point of the scheduling kernel.

    schedule(start, tasks, strategy)  -> Schedule        pure function
    Scheduler.from_settings(settings) -> Scheduler       closes over config

A run never places anything before `start + safety_delay`, so a schedule
computed "now" is still valid by the time the caller acts on it. Failures
raise SchedulingError; no partial schedule is ever returned.

Usage::

    from chronoplan import schedule, SchedulingStrategy
    result = schedule(datetime.now(timezone.utc), tasks, SchedulingStrategy.URGENCY)
    for item in result:
        print(item.when, item.task)
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Iterable, Optional

from chronoplan.exceptions import SchedulingError
from chronoplan.observability.logger import get_logger
from chronoplan.scheduling.schedule_tree import ScheduleTree
from chronoplan.scheduling.strategies import (
    DEFAULT_MAX_PASSES,
    importance_first,
    urgency_first,
)
from chronoplan.scheduling.types import (
    Schedule,
    ScheduledTask,
    SchedulingStrategy,
    Task,
    TaskHandle,
)

if TYPE_CHECKING:
    from chronoplan.config.settings import Settings

log = get_logger(__name__)

SCHEDULE_DELAY = timedelta(minutes=1)


def schedule(
    start: datetime,
    tasks: Iterable[Task],
    strategy: SchedulingStrategy | str = SchedulingStrategy.IMPORTANCE,
    *,
    safety_delay: timedelta = SCHEDULE_DELAY,
    max_passes: int = DEFAULT_MAX_PASSES,
) -> Schedule:
    """
    Assign a start time to every task so that all deadlines are met.

    Args:
        start:        The moment "now" for this computation.
        tasks:        Tasks to schedule, in any order.
        strategy:     IMPORTANCE or URGENCY (or their string values).
        safety_delay: Nothing is placed before start + safety_delay.
        max_passes:   Cap on the importance-first optimisation loop.

    Returns:
        A Schedule with one ScheduledTask per input task, ascending by start.

    Raises:
        SchedulingError: carrying DeadlineMissed, NotEnoughTime or Internal.
        ValueError:      `safety_delay` is negative.
    """
    if safety_delay < timedelta(0):
        raise ValueError("safety_delay must be non-negative")
    strategy = SchedulingStrategy.parse(strategy)
    earliest = start + safety_delay
    handles = [TaskHandle(task) for task in tasks]
    tree: ScheduleTree[TaskHandle] = ScheduleTree()

    log.info("schedule.start", strategy=strategy.value, tasks=len(handles), earliest=earliest.isoformat())
    try:
        if strategy is SchedulingStrategy.IMPORTANCE:
            importance_first(tree, earliest, handles, max_passes=max_passes, now=start)
        else:
            urgency_first(tree, earliest, handles, now=start)
    except SchedulingError as exc:
        level = "warning" if exc.is_user_actionable else "error"
        getattr(log, level)(
            "schedule.failed",
            strategy=strategy.value,
            reason=type(exc.failure).__name__,
            detail=str(exc),
        )
        raise

    result = Schedule(
        [ScheduledTask(entry.payload.task, entry.start) for entry in tree]
    )
    log.info("schedule.done", strategy=strategy.value, tasks=len(result))
    return result


class Scheduler:
    """
    Settings-bound front end to schedule().

    Holds the configured default strategy, safety delay and pass cap so
    callers (CLI, conversational front ends) only pass tasks.

        scheduler = Scheduler.from_settings(settings)
        result = scheduler.schedule(tasks)                    # start = now (UTC)
        result = scheduler.schedule(tasks, strategy="urgency", start=some_time)
    """

    def __init__(
        self,
        strategy: SchedulingStrategy | str = SchedulingStrategy.IMPORTANCE,
        safety_delay: timedelta = SCHEDULE_DELAY,
        max_passes: int = DEFAULT_MAX_PASSES,
    ) -> None:
        if safety_delay < timedelta(0):
            raise ValueError("safety_delay must be non-negative")
        if max_passes < 1:
            raise ValueError("max_passes must be >= 1")
        self.strategy = SchedulingStrategy.parse(strategy)
        self.safety_delay = safety_delay
        self.max_passes = max_passes

    @classmethod
    def from_settings(cls, settings: "Settings") -> "Scheduler":
        cfg = settings.scheduling
        return cls(
            strategy=cfg.strategy,
            safety_delay=timedelta(seconds=cfg.safety_delay_seconds),
            max_passes=cfg.max_optimisation_passes,
        )

    def schedule(
        self,
        tasks: Iterable[Task],
        strategy: SchedulingStrategy | str | None = None,
        start: Optional[datetime] = None,
    ) -> Schedule:
        return schedule(
            start or datetime.now(timezone.utc),
            tasks,
            strategy or self.strategy,
            safety_delay=self.safety_delay,
            max_passes=self.max_passes,
        )
