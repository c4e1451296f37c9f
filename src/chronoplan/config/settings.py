"""
config/settings.py — Chronoplan Runtime Settings

Merges config.yaml (defaults/structure) with environment variables and an
optional .env file. Pydantic-powered — all fields are validated and typed.

  - SchedulingConfig validates the strategy name, safety delay and pass cap
  - LoggingConfig validates the log level
  - validate_all() performs cross-field startup validation and raises
    ConfigError with a clear, numbered list of every problem found
  - load_settings() respects CHRONOPLAN_CONFIG as a fallback when no
    explicit config_path argument is given
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from chronoplan.exceptions import ConfigError


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

_VALID_STRATEGIES = {"importance", "urgency"}
_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

_BLOCKED_PATH_PREFIXES: tuple[str, ...] = (
    "/etc", "/proc", "/sys", "/dev", "/boot",
    "/private/etc",
    "/usr", "/bin", "/sbin", "/lib", "/lib64",
)


def _is_blocked_system_path(p: str) -> bool:
    try:
        resolved = str(Path(p).expanduser().resolve())
    except (ValueError, OSError):
        return False
    return any(
        resolved == prefix or resolved.startswith(prefix + "/")
        for prefix in _BLOCKED_PATH_PREFIXES
    )


# ─────────────────────────────────────────────────────────────────────────────
# Sub-models
# ─────────────────────────────────────────────────────────────────────────────

class SchedulingConfig(BaseModel):
    strategy: str = "importance"
    safety_delay_seconds: int = 60
    max_optimisation_passes: int = 10_000

    @field_validator("strategy")
    @classmethod
    def _valid_strategy(cls, v: str) -> str:
        lowered = v.strip().lower()
        if lowered == "myrjam":
            lowered = "urgency"
        if lowered not in _VALID_STRATEGIES:
            raise ValueError(
                f"scheduling.strategy must be one of "
                f"{sorted(_VALID_STRATEGIES)}, got '{v}'"
            )
        return lowered

    @field_validator("safety_delay_seconds")
    @classmethod
    def _non_negative_delay(cls, v: int) -> int:
        if v < 0:
            raise ValueError("scheduling.safety_delay_seconds must be >= 0")
        return v

    @field_validator("max_optimisation_passes")
    @classmethod
    def _positive_passes(cls, v: int) -> int:
        if v < 1:
            raise ValueError("scheduling.max_optimisation_passes must be >= 1")
        return v


class LoggingConfig(BaseModel):
    level: str = "INFO"
    log_dir: str = "./data/logs"
    max_file_size_mb: int = 10
    backup_count: int = 5
    console_output: bool = False
    json_format: bool = True

    @field_validator("level")
    @classmethod
    def _valid_log_level(cls, v: str) -> str:
        upper = v.upper()
        if upper not in _VALID_LOG_LEVELS:
            raise ValueError(
                f"logging.level '{v}' is not valid. "
                f"Must be one of: {sorted(_VALID_LOG_LEVELS)}"
            )
        return upper


# ─────────────────────────────────────────────────────────────────────────────
# Root Settings
# ─────────────────────────────────────────────────────────────────────────────

class Settings(BaseSettings):
    """
    Chronoplan runtime settings.

    Priority (highest to lowest):
      1. Environment variables (nested with '__', e.g. SCHEDULING__STRATEGY)
      2. .env file
      3. config.yaml
      4. Field defaults
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    scheduling: SchedulingConfig = Field(default_factory=SchedulingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # config.yaml arrives as init kwargs; the environment overrides it.
        return env_settings, dotenv_settings, init_settings, file_secret_settings

    @field_validator("scheduling", mode="before")
    @classmethod
    def _coerce_scheduling(cls, v: Any) -> Any:
        return SchedulingConfig(**v) if isinstance(v, dict) else v

    @field_validator("logging", mode="before")
    @classmethod
    def _coerce_logging(cls, v: Any) -> Any:
        return LoggingConfig(**v) if isinstance(v, dict) else v

    # -- Convenience properties ----------------------------------------------

    @property
    def log_level(self) -> str:
        return self.logging.level.upper()

    @property
    def log_dir(self) -> Path:
        return Path(self.logging.log_dir)

    @property
    def log_max_bytes(self) -> int:
        return self.logging.max_file_size_mb * 1024 * 1024

    def validate_all(self) -> None:
        """
        Full startup validation. Raises ConfigError listing every problem found.

        Pydantic field validators catch type/value errors at parse time; this
        catches what they can't see on a single field.
        """
        errors: list[str] = []

        if _is_blocked_system_path(self.logging.log_dir):
            errors.append(
                f"logging.log_dir '{self.logging.log_dir}' points to a protected "
                f"system directory. Use './data/logs'."
            )

        if self.logging.max_file_size_mb < 1:
            errors.append("logging.max_file_size_mb must be >= 1.")

        if self.logging.backup_count < 0:
            errors.append("logging.backup_count must be >= 0.")

        if self.scheduling.safety_delay_seconds > 24 * 60 * 60:
            errors.append(
                f"scheduling.safety_delay_seconds is "
                f"{self.scheduling.safety_delay_seconds}s (more than a day). "
                f"Nothing could be scheduled for today; use a value like 60."
            )

        if errors:
            numbered = "\n".join(f"  {i+1}. {e}" for i, e in enumerate(errors))
            raise ConfigError(
                f"\n\nChronoplan startup failed — {len(errors)} configuration "
                f"problem(s) found:\n\n{numbered}\n\n"
                f"Fix the issues above in config/config.yaml or your environment "
                f"and try again.\n"
            )


# ─────────────────────────────────────────────────────────────────────────────
# Loader
# ─────────────────────────────────────────────────────────────────────────────

_KNOWN_SECTIONS = {"scheduling", "logging"}


def _load_yaml(path: Path) -> dict:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _resolve_config_path(config_path: str | Path | None) -> Path:
    """
    Resolve the config file path with this priority:
      1. Explicit config_path argument (from --config CLI flag)
      2. CHRONOPLAN_CONFIG environment variable
      3. Default: config/config.yaml
    """
    if config_path is not None:
        return Path(config_path)
    env_path = os.environ.get("CHRONOPLAN_CONFIG")
    if env_path:
        return Path(env_path)
    return Path("config/config.yaml")


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings by merging config.yaml with environment variables."""
    resolved_path = _resolve_config_path(config_path)
    yaml_data = _load_yaml(resolved_path)
    if not isinstance(yaml_data, dict):
        raise ValueError(f"{resolved_path} must contain a mapping at the top level")

    init_kwargs = {k: v for k, v in yaml_data.items() if k in _KNOWN_SECTIONS}

    return Settings(**init_kwargs)


__all__ = [
    "ConfigError",
    "LoggingConfig",
    "SchedulingConfig",
    "Settings",
    "load_settings",
]
