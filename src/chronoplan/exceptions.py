"""
exceptions.py — Chronoplan Unified Error Hierarchy

All chronoplan-specific exceptions live here. Every layer raises typed
subclasses of ChronoplanError, never bare Exception.

Import from here, not from individual modules:
    from chronoplan.exceptions import SchedulingError, TaskFileError

Hierarchy:
    ChronoplanError
    ├── SchedulingError   (carries one SchedulingFailure variant)
    ├── TaskFileError
    └── ConfigError
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chronoplan.scheduling.errors import SchedulingFailure


# ─────────────────────────────────────────────────────────────────────────────
# Root
# ─────────────────────────────────────────────────────────────────────────────

class ChronoplanError(Exception):
    """Base class for all chronoplan exceptions."""


# ─────────────────────────────────────────────────────────────────────────────
# Scheduling
# ─────────────────────────────────────────────────────────────────────────────

class SchedulingError(ChronoplanError):
    """
    A scheduling run failed. No partial schedule exists.

    `failure` is one of DeadlineMissed, NotEnoughTime or Internal from
    chronoplan.scheduling.errors; match on it to decide how to react.
    """

    def __init__(self, failure: "SchedulingFailure") -> None:
        self.failure = failure
        super().__init__(failure.message)

    @property
    def is_user_actionable(self) -> bool:
        return self.failure.is_user_actionable


# ─────────────────────────────────────────────────────────────────────────────
# Task input
# ─────────────────────────────────────────────────────────────────────────────

class TaskFileError(ChronoplanError):
    """A task list file could not be read or failed validation."""

    def __init__(self, path: str, problems: list[str]) -> None:
        self.path = path
        self.problems = problems
        listed = "\n".join(f"  • {p}" for p in problems)
        super().__init__(f"Invalid task file '{path}':\n{listed}")


# ─────────────────────────────────────────────────────────────────────────────
# Config
# ─────────────────────────────────────────────────────────────────────────────

class ConfigError(ChronoplanError):
    """Raised by Settings.validate_all() when one or more config problems are found."""


__all__ = [
    "ChronoplanError",
    "SchedulingError",
    "TaskFileError",
    "ConfigError",
]
