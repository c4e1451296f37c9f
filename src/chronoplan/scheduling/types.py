"""
scheduling/types.py — Scheduling Data Contracts

Dataclasses and enums shared across the scheduling layer.

  - Task:               what the caller wants done (read-only once scheduling starts)
  - TaskHandle:         identity-keyed handle the placement store keys entries by
  - ScheduledTask:      a task bound to its assigned start time
  - Schedule:           immutable, start-ordered result of one scheduling run
  - SchedulingStrategy: which placement algorithm to run
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Iterator, Sequence


# ─────────────────────────────────────────────────────────────────────────────
# Strategy
# ─────────────────────────────────────────────────────────────────────────────

class SchedulingStrategy(str, Enum):
    IMPORTANCE = "importance"
    URGENCY    = "urgency"

    @classmethod
    def parse(cls, value: str | SchedulingStrategy) -> SchedulingStrategy:
        """Accept an enum member or its value (case-insensitive). 'myrjam' means urgency."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        if text == "myrjam":
            return cls.URGENCY
        try:
            return cls(text)
        except ValueError:
            valid = ", ".join(s.value for s in cls)
            raise ValueError(
                f"Unknown scheduling strategy '{value}'. Valid strategies: {valid}"
            ) from None


# ─────────────────────────────────────────────────────────────────────────────
# Task
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Task:
    """
    One deadline-bound unit of work.

    Equality is by value: two tasks are equal iff every field matches.
    The placement store never keys by Task, it keys by TaskHandle.
    """
    id: int
    content: str
    deadline: datetime
    duration: timedelta
    importance: int

    def __post_init__(self) -> None:
        if self.duration < timedelta(0):
            raise ValueError(
                f"Task {self.id} ('{self.content}') has a negative duration: {self.duration}"
            )

    def __str__(self) -> str:
        return self.content


@dataclass(frozen=True, eq=False)
class TaskHandle:
    """Shared, identity-hashed reference to a Task."""
    task: Task

    @property
    def deadline(self) -> datetime:
        return self.task.deadline

    @property
    def duration(self) -> timedelta:
        return self.task.duration

    @property
    def importance(self) -> int:
        return self.task.importance

    def __repr__(self) -> str:
        return f"TaskHandle(id={self.task.id}, content={self.task.content!r})"


# ─────────────────────────────────────────────────────────────────────────────
# Result
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ScheduledTask:
    task: Task
    when: datetime

    @property
    def end(self) -> datetime:
        return self.when + self.task.duration

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.task.id,
            "content": self.task.content,
            "start": self.when.isoformat(),
            "end": self.end.isoformat(),
            "deadline": self.task.deadline.isoformat(),
            "duration_seconds": int(self.task.duration.total_seconds()),
            "importance": self.task.importance,
        }


class Schedule(Sequence[ScheduledTask]):
    """
    Ordered sequence of ScheduledTask, ascending by assigned start time.

    Produced once per scheduling run and never mutated afterwards. It holds
    no reference back into the placement store.
    """

    __slots__ = ("_items",)

    def __init__(self, items: Sequence[ScheduledTask] = ()) -> None:
        self._items: tuple[ScheduledTask, ...] = tuple(items)

    def __getitem__(self, index):
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[ScheduledTask]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Schedule):
            return self._items == other._items
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._items)

    def __repr__(self) -> str:
        return f"Schedule({list(self._items)!r})"

    def tasks(self) -> list[Task]:
        return [item.task for item in self._items]

    def to_records(self) -> list[dict[str, Any]]:
        return [item.to_record() for item in self._items]
