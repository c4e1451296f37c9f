"""
tests/unit/test_config.py — Config Tests

Covers:
  - Defaults load cleanly
  - Strategy names are validated and normalised ('myrjam' -> 'urgency')
  - Negative safety delay / zero pass cap / bad log level are rejected
  - validate_all() raises ConfigError with a numbered list
  - load_settings(): explicit path > CHRONOPLAN_CONFIG > default path
  - Environment variables override config.yaml
  - load_settings() builds a fresh Settings on every call
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from chronoplan.config.settings import (
    LoggingConfig,
    SchedulingConfig,
    Settings,
    load_settings,
)
from chronoplan.exceptions import ConfigError


def _write_yaml(path: Path, body: str) -> Path:
    path.write_text(textwrap.dedent(body), encoding="utf-8")
    return path


# ── SchedulingConfig ─────────────────────────────────────────────────────────

class TestSchedulingConfig:
    def test_defaults(self):
        cfg = SchedulingConfig()
        assert cfg.strategy == "importance"
        assert cfg.safety_delay_seconds == 60
        assert cfg.max_optimisation_passes == 10_000

    @pytest.mark.parametrize("name, expected", [
        ("Urgency", "urgency"),
        ("importance", "importance"),
        ("myrjam", "urgency"),
    ])
    def test_strategy_normalised(self, name, expected):
        assert SchedulingConfig(strategy=name).strategy == expected

    def test_unknown_strategy_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            SchedulingConfig(strategy="alphabetical")
        assert "scheduling.strategy" in str(exc_info.value)

    def test_negative_delay_rejected(self):
        with pytest.raises(ValidationError):
            SchedulingConfig(safety_delay_seconds=-1)

    def test_zero_delay_allowed(self):
        assert SchedulingConfig(safety_delay_seconds=0).safety_delay_seconds == 0

    def test_zero_passes_rejected(self):
        with pytest.raises(ValidationError):
            SchedulingConfig(max_optimisation_passes=0)


# ── LoggingConfig ────────────────────────────────────────────────────────────

class TestLoggingConfig:
    def test_level_upper_cased(self):
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_bad_level_rejected(self):
        with pytest.raises(ValidationError):
            LoggingConfig(level="LOUD")


# ── validate_all ─────────────────────────────────────────────────────────────

class TestValidateAll:
    def test_defaults_pass(self):
        Settings().validate_all()

    def test_protected_log_dir(self):
        settings = Settings(logging={"log_dir": "/etc/chronoplan"})
        with pytest.raises(ConfigError, match="protected"):
            settings.validate_all()

    def test_lists_every_problem(self):
        settings = Settings(
            logging={"log_dir": "/proc/x", "max_file_size_mb": 0},
            scheduling={"safety_delay_seconds": 2 * 24 * 60 * 60},
        )
        with pytest.raises(ConfigError) as exc_info:
            settings.validate_all()
        message = str(exc_info.value)
        assert "3 configuration problem(s)" in message
        assert "  1. " in message and "  3. " in message


# ── load_settings ────────────────────────────────────────────────────────────

class TestLoadSettings:
    def test_missing_file_gives_defaults(self, tmp_path):
        settings = load_settings(tmp_path / "nope.yaml")
        assert settings.scheduling.strategy == "importance"

    def test_explicit_path(self, tmp_path):
        path = _write_yaml(tmp_path / "c.yaml", """
            scheduling:
              strategy: urgency
              safety_delay_seconds: 120
            logging:
              level: warning
            unrelated_section:
              ignored: true
        """)
        settings = load_settings(path)
        assert settings.scheduling.strategy == "urgency"
        assert settings.scheduling.safety_delay_seconds == 120
        assert settings.log_level == "WARNING"

    def test_env_var_path(self, tmp_path, monkeypatch):
        path = _write_yaml(tmp_path / "env.yaml", """
            scheduling:
              strategy: urgency
        """)
        monkeypatch.setenv("CHRONOPLAN_CONFIG", str(path))
        assert load_settings().scheduling.strategy == "urgency"

    def test_explicit_path_beats_env_var(self, tmp_path, monkeypatch):
        env_path = _write_yaml(tmp_path / "env.yaml", "scheduling:\n  strategy: urgency\n")
        explicit = _write_yaml(tmp_path / "explicit.yaml", "scheduling:\n  strategy: importance\n")
        monkeypatch.setenv("CHRONOPLAN_CONFIG", str(env_path))
        assert load_settings(explicit).scheduling.strategy == "importance"

    def test_environment_overrides_yaml(self, tmp_path, monkeypatch):
        path = _write_yaml(tmp_path / "c.yaml", """
            scheduling:
              strategy: importance
              safety_delay_seconds: 30
        """)
        monkeypatch.setenv("SCHEDULING__STRATEGY", "urgency")
        settings = load_settings(path)
        assert settings.scheduling.strategy == "urgency"
        assert settings.scheduling.safety_delay_seconds == 30

    def test_invalid_yaml_value(self, tmp_path):
        path = _write_yaml(tmp_path / "bad.yaml", "scheduling:\n  max_optimisation_passes: 0\n")
        with pytest.raises(ValidationError):
            load_settings(path)

    def test_non_mapping_rejected(self, tmp_path):
        path = _write_yaml(tmp_path / "list.yaml", "- 1\n- 2\n")
        with pytest.raises(ValueError, match="mapping"):
            load_settings(path)

    def test_each_call_reloads(self, tmp_path):
        path = _write_yaml(tmp_path / "c.yaml", "scheduling:\n  strategy: importance\n")
        first = load_settings(path)
        _write_yaml(path, "scheduling:\n  strategy: urgency\n")
        second = load_settings(path)
        assert first is not second
        assert first.scheduling.strategy == "importance"
        assert second.scheduling.strategy == "urgency"

    def test_log_properties(self):
        settings = Settings(logging={"log_dir": "./somewhere", "max_file_size_mb": 2})
        assert settings.log_dir == Path("./somewhere")
        assert settings.log_max_bytes == 2 * 1024 * 1024
