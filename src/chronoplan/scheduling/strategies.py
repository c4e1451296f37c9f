"""
scheduling/strategies.py — Placement Algorithms

Both strategies run in two phases over a ScheduleTree:

  Phase 1 (deadline packing) — least important task first, each one placed as
  close to its deadline as it fits. This proves feasibility: a task that
  cannot be placed fails the whole run with DeadlineMissed or NotEnoughTime.

  Phase 2 (compaction) — tasks are pulled towards the present without ever
  ending later than they did. Phase 1 already proved a valid arrangement
  exists, so any failure here is an Internal defect.

importance_first():
    Ties on importance go to the more urgent task (placed later in phase 1,
    earlier in phase 2). Phase 2 walks from the most important task down and
    restarts from the top each time a task moves, until a full walk moves
    nothing. Bounded by `max_passes`.

urgency_first():
    Myrjam Van de Vijver's way of scheduling. Phase 2 is a single pass in
    current start order, so the phase 1 order is kept. Robust against
    contingencies such as falling sick, at the price of favouring urgent but
    less important tasks over important but less urgent ones.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from chronoplan.exceptions import SchedulingError
from chronoplan.observability.logger import get_logger
from chronoplan.scheduling.errors import DeadlineMissed, Internal, NotEnoughTime
from chronoplan.scheduling.schedule_tree import ScheduleTree
from chronoplan.scheduling.types import TaskHandle

log = get_logger(__name__)

DEFAULT_MAX_PASSES = 10_000


# ─────────────────────────────────────────────────────────────────────────────
# Shared phases
# ─────────────────────────────────────────────────────────────────────────────

def _pack_before_deadlines(
    tree: ScheduleTree[TaskHandle],
    start: datetime,
    ordered: Sequence[TaskHandle],
    now: Optional[datetime] = None,
) -> None:
    # `now` is the caller's clock before any safety delay; `start` is the placement floor.
    for handle in ordered:
        if handle.deadline <= start + handle.duration:
            raise SchedulingError(
                DeadlineMissed(handle.task, already_missed=handle.deadline <= (now or start))
            )
        if not tree.schedule_close_before(handle.deadline, handle.duration, start, handle):
            raise SchedulingError(NotEnoughTime(handle.task))
        log.debug(
            "schedule.placed",
            phase=1,
            task_id=handle.task.id,
            when=tree.when_scheduled(handle).isoformat(),
        )


def _pull_forward(
    tree: ScheduleTree[TaskHandle],
    start: datetime,
    handle: TaskHandle,
) -> bool:
    """Re-place `handle` as early as possible. Returns True if its start moved."""
    previous = tree.unschedule(handle)
    if previous is None:
        raise SchedulingError(Internal(f"I couldn't unschedule task {handle.task.id}"))
    if not tree.schedule_close_after(start, handle.duration, previous.end, handle):
        raise SchedulingError(Internal(f"I couldn't reschedule task {handle.task.id}"))
    when = tree.when_scheduled(handle)
    if when is None:
        raise SchedulingError(
            Internal(f"I couldn't find task {handle.task.id} that was just scheduled")
        )
    return when != previous.start


# ─────────────────────────────────────────────────────────────────────────────
# Strategies
# ─────────────────────────────────────────────────────────────────────────────

def importance_first(
    tree: ScheduleTree[TaskHandle],
    start: datetime,
    handles: Sequence[TaskHandle],
    max_passes: int = DEFAULT_MAX_PASSES,
    *,
    now: Optional[datetime] = None,
) -> None:
    ordered = sorted(handles, key=lambda h: (h.importance, start - h.deadline))
    _pack_before_deadlines(tree, start, ordered, now)

    passes = 0
    changed = not tree.is_empty()
    while changed:
        passes += 1
        if passes > max_passes:
            raise SchedulingError(
                Internal(f"Optimisation did not settle after {max_passes} passes")
            )
        changed = False
        for handle in reversed(ordered):
            if _pull_forward(tree, start, handle):
                log.debug("schedule.pass", strategy="importance", passes=passes, moved=handle.task.id)
                changed = True
                break


def urgency_first(
    tree: ScheduleTree[TaskHandle],
    start: datetime,
    handles: Sequence[TaskHandle],
    *,
    now: Optional[datetime] = None,
) -> None:
    ordered = sorted(handles, key=lambda h: h.importance)
    _pack_before_deadlines(tree, start, ordered, now)

    for entry in list(tree):
        _pull_forward(tree, start, entry.payload)
    log.debug("schedule.pass", strategy="urgency", passes=1)
