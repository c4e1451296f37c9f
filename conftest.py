"""
Test conftest — isolate configuration environment variables so that
Settings() behaves the same on every machine.
"""
import pytest

_CONFIG_ENV_VARS = [
    "CHRONOPLAN_CONFIG",
    "SCHEDULING",
    "SCHEDULING__STRATEGY",
    "SCHEDULING__SAFETY_DELAY_SECONDS",
    "SCHEDULING__MAX_OPTIMISATION_PASSES",
    "LOGGING",
    "LOGGING__LEVEL",
    "LOGGING__LOG_DIR",
    "LOGGING__CONSOLE_OUTPUT",
    "LOGGING__JSON_FORMAT",
]


@pytest.fixture(autouse=True)
def _isolate_config_env(monkeypatch):
    """Remove config env vars for every test and disable .env file loading,
    so a developer's local environment never leaks into Settings()."""
    for var in _CONFIG_ENV_VARS:
        monkeypatch.delenv(var, raising=False)

    import chronoplan.config.settings as settings_module
    from pydantic_settings import SettingsConfigDict
    patched_config = SettingsConfigDict(
        env_file=None,
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )
    monkeypatch.setattr(settings_module.Settings, "model_config", patched_config)
