"""
scheduling/errors.py — Scheduling Failure Variants

A closed set of reasons a scheduling run can fail. The Facade raises
SchedulingError (see chronoplan.exceptions) carrying exactly one of these.

    DeadlineMissed   the task's deadline cannot be honoured at all
    NotEnoughTime    competing commitments leave no room before the deadline
    Internal         a placement invariant broke; a defect, never expected

The first two are user-actionable. Internal is a bug report.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from chronoplan.scheduling.types import Task


@dataclass(frozen=True)
class DeadlineMissed:
    task: Task
    already_missed: bool

    is_user_actionable = True

    @property
    def message(self) -> str:
        verb = "missed" if self.already_missed else "will miss"
        return (
            f"I could not schedule {self.task} because you {verb} the deadline.\n"
            f"You might want to postpone this task or remove it if it's no longer relevant"
        )


@dataclass(frozen=True)
class NotEnoughTime:
    task: Task

    is_user_actionable = True

    @property
    def message(self) -> str:
        return (
            f"I could not schedule {self.task} because you don't have enough time "
            f"to do everything.\n"
            f"You might want to decide not to do some things or relax their deadlines"
        )


@dataclass(frozen=True)
class Internal:
    detail: str

    is_user_actionable = False

    @property
    def message(self) -> str:
        return f"An internal error occurred (This shouldn't happen.): {self.detail}"


SchedulingFailure = Union[DeadlineMissed, NotEnoughTime, Internal]
