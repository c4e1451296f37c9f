"""
main.py — Chronoplan Entry Point

Usage:
    chronoplan tasks.yaml                          # schedule with configured strategy
    chronoplan tasks.yaml --strategy urgency       # keep deadline order
    chronoplan tasks.yaml --start 2026-10-19T08:00:00Z
    chronoplan tasks.yaml --json                   # machine-readable output
    chronoplan tasks.yaml --log-level DEBUG --config path/to/config.yaml

Exit codes:
    0  schedule printed
    1  config or task file problem
    2  tasks cannot be scheduled (missed deadline / not enough time)
    3  internal scheduling error (a bug)
"""

from __future__ import annotations

import argparse
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INFEASIBLE = 2
EXIT_INTERNAL = 3


def _find_env_file() -> Path | None:
    """Walk up from CWD looking for .env file."""
    cwd = Path.cwd()
    for d in [cwd, *cwd.parents]:
        candidate = d / ".env"
        if candidate.is_file():
            return candidate
    return None


def _parse_start(value: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"invalid start time '{value}' (expected ISO-8601, e.g. 2026-10-19T08:00:00Z)"
        ) from None
    return parsed.replace(tzinfo=timezone.utc) if parsed.tzinfo is None else parsed


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="chronoplan",
        description="Chronoplan — schedule deadline-bound tasks so every deadline is met",
    )
    parser.add_argument(
        "tasks_file",
        help="YAML or JSON file with the tasks to schedule.",
    )
    parser.add_argument(
        "--strategy",
        choices=["importance", "urgency", "myrjam"],
        default=None,
        help=(
            "importance = important tasks get the earliest slots once deadlines are safe. "
            "urgency (alias myrjam) = keep deadline-driven order, compacted to the present. "
            "Default: scheduling.strategy from config."
        ),
    )
    parser.add_argument(
        "--start",
        type=_parse_start,
        default=None,
        help="Treat this ISO-8601 instant as 'now' (default: current UTC time).",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: $CHRONOPLAN_CONFIG or config/config.yaml).",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override logging.level from config.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the schedule as JSON instead of a table.",
    )
    return parser.parse_args(argv)


def bootstrap(args: argparse.Namespace):
    """
    Load config, validate it fully, and set up logging.
    Returns (settings, log) ready for use.

    Exits with code 1 (after printing a clear message) if config.yaml has
    invalid values or cross-field problems.
    """
    from chronoplan.config.settings import load_settings
    from chronoplan.exceptions import ConfigError
    from chronoplan.observability.logger import get_logger, setup_logging
    from pydantic import ValidationError

    env_path = _find_env_file()
    if env_path:
        load_dotenv(dotenv_path=env_path)

    # -- Load and parse -------------------------------------------------------
    try:
        settings = load_settings(args.config)
    except ValidationError as exc:
        problems = "\n".join(
            f"  • {'.'.join(str(p) for p in e['loc']) or '?'}: {e['msg']}"
            for e in exc.errors()
        )
        print(
            f"\n❌  Config validation failed:\n\n{problems}\n\n"
            f"    Fix config/config.yaml or your environment and try again.\n",
            file=sys.stderr,
        )
        sys.exit(EXIT_ERROR)
    except (OSError, ValueError, TypeError) as exc:
        print(
            f"\n❌  Failed to load config: {type(exc).__name__}: {exc}\n",
            file=sys.stderr,
        )
        sys.exit(EXIT_ERROR)

    # -- Cross-field validation -----------------------------------------------
    try:
        settings.validate_all()
    except ConfigError as exc:
        print(str(exc), file=sys.stderr)
        sys.exit(EXIT_ERROR)

    # -- Logging --------------------------------------------------------------
    setup_logging(
        level=args.log_level or settings.log_level,
        log_dir=settings.log_dir,
        json_format=settings.logging.json_format,
        console_output=settings.logging.console_output,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.logging.backup_count,
    )

    log = get_logger("chronoplan.main")
    return settings, log


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    settings, log = bootstrap(args)

    from rich.console import Console

    from chronoplan.exceptions import SchedulingError, TaskFileError
    from chronoplan.interfaces.cli import render_failure, render_schedule, render_schedule_json
    from chronoplan.observability.logger import bind_run, clear_run
    from chronoplan.scheduling.scheduler import Scheduler
    from chronoplan.scheduling.types import SchedulingStrategy
    from chronoplan.tasks.loader import load_tasks

    out = Console()
    err = Console(stderr=True)

    try:
        tasks = load_tasks(args.tasks_file)
    except TaskFileError as exc:
        err.print(f"[red]✗[/red] {exc}")
        return EXIT_ERROR

    scheduler = Scheduler.from_settings(settings)
    strategy = SchedulingStrategy.parse(args.strategy) if args.strategy else scheduler.strategy

    bind_run(uuid.uuid4().hex[:12])
    try:
        result = scheduler.schedule(tasks, strategy=strategy, start=args.start)
    except SchedulingError as exc:
        render_failure(err, exc)
        return EXIT_INFEASIBLE if exc.is_user_actionable else EXIT_INTERNAL
    finally:
        clear_run()

    if args.json:
        print(render_schedule_json(result))
    else:
        render_schedule(out, result, strategy)
    log.debug("cli.done", tasks=len(result))
    return EXIT_OK


def main_sync() -> None:
    """Synchronous entry point for console_scripts (pyproject.toml)."""
    sys.exit(main())


if __name__ == "__main__":
    main_sync()
