"""
tasks/loader.py — Task List Loader

Reads the task list a caller wants scheduled from YAML (or JSON, which YAML
parses too) and validates it into Task objects.

File shape::

    tasks:
      - id: 1
        content: make onion soup
        deadline: 2026-10-18T20:00:00Z
        duration: 1h           # or 3600, "01:00:00", "PT1H"
        importance: 3

A bare top-level list of tasks is accepted as well. Naive deadlines are UTC.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from chronoplan.exceptions import TaskFileError
from chronoplan.observability.logger import get_logger
from chronoplan.scheduling.types import Task

log = get_logger(__name__)

MIN_IMPORTANCE = 0
MAX_IMPORTANCE = 10

_SHORTHAND_DURATION = re.compile(
    r"^\s*(?:(?P<d>\d+)\s*d)?\s*(?:(?P<h>\d+)\s*h)?\s*(?:(?P<m>\d+)\s*m)?\s*(?:(?P<s>\d+)\s*s)?\s*$",
    re.IGNORECASE,
)


def parse_duration_shorthand(value: str) -> Optional[timedelta]:
    """Parse '1d2h30m10s' style strings. Returns None if `value` isn't one."""
    match = _SHORTHAND_DURATION.match(value)
    if match is None or not any(match.groupdict().values()):
        return None
    parts = {k: int(v) for k, v in match.groupdict().items() if v}
    return timedelta(
        days=parts.get("d", 0),
        hours=parts.get("h", 0),
        minutes=parts.get("m", 0),
        seconds=parts.get("s", 0),
    )


# ─────────────────────────────────────────────────────────────────────────────
# Validation models
# ─────────────────────────────────────────────────────────────────────────────

class TaskSpec(BaseModel):
    id: Optional[int] = None
    content: str = Field(min_length=1)
    deadline: datetime
    duration: timedelta
    importance: int = Field(ge=MIN_IMPORTANCE, le=MAX_IMPORTANCE)

    @field_validator("content")
    @classmethod
    def _non_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("content must not be blank")
        return v.strip()

    @field_validator("duration", mode="before")
    @classmethod
    def _shorthand(cls, v: Any) -> Any:
        if isinstance(v, str):
            parsed = parse_duration_shorthand(v)
            if parsed is not None:
                return parsed
        return v

    @field_validator("duration")
    @classmethod
    def _non_negative(cls, v: timedelta) -> timedelta:
        if v < timedelta(0):
            raise ValueError("duration must not be negative")
        return v

    @field_validator("deadline")
    @classmethod
    def _assume_utc(cls, v: datetime) -> datetime:
        return v.replace(tzinfo=timezone.utc) if v.tzinfo is None else v

    def to_task(self, default_id: int) -> Task:
        return Task(
            id=self.id if self.id is not None else default_id,
            content=self.content,
            deadline=self.deadline,
            duration=self.duration,
            importance=self.importance,
        )


class TaskFile(BaseModel):
    tasks: list[TaskSpec] = Field(default_factory=list)


# ─────────────────────────────────────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────────────────────────────────────

def _describe(exc: ValidationError) -> list[str]:
    problems = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"]) or "?"
        problems.append(f"{loc}: {err['msg']}")
    return problems


def parse_tasks(data: Any, source: str = "<data>") -> list[Task]:
    """Validate already-loaded data (a mapping with 'tasks' or a bare list)."""
    if data is None:
        data = {}
    if isinstance(data, list):
        data = {"tasks": data}
    if not isinstance(data, dict):
        raise TaskFileError(source, ["top level must be a mapping with 'tasks' or a list of tasks"])

    try:
        parsed = TaskFile.model_validate(data)
    except ValidationError as exc:
        raise TaskFileError(source, _describe(exc)) from exc

    tasks = [spec.to_task(default_id=i) for i, spec in enumerate(parsed.tasks, start=1)]

    seen: dict[int, int] = {}
    duplicates = []
    for position, task in enumerate(tasks):
        if task.id in seen:
            duplicates.append(f"tasks.{position}.id: duplicate id {task.id} (also at tasks.{seen[task.id]})")
        else:
            seen[task.id] = position
    if duplicates:
        raise TaskFileError(source, duplicates)

    return tasks


def load_tasks(path: str | Path) -> list[Task]:
    """Read and validate a task list file."""
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as exc:
        raise TaskFileError(str(path), ["file not found"]) from exc
    except (OSError, yaml.YAMLError) as exc:
        raise TaskFileError(str(path), [f"{type(exc).__name__}: {exc}"]) from exc

    tasks = parse_tasks(data, source=str(path))
    log.info("tasks.loaded", path=str(path), count=len(tasks))
    return tasks
