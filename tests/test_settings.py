import pytest

from envelog.config import ConfigStore, default_store
from envelog.levels import Level
from envelog.masking import RedactionStrategy
from envelog.settings import configure_from_env


def test_empty_environment_changes_nothing():
    store = ConfigStore()
    before = store.settings

    configure_from_env({}, store)

    assert store.settings is before


def test_reads_every_variable():
    store = ConfigStore()
    environ = {
        "ENVELOG_LEVEL": "debug",
        "ENVELOG_PRETTY": "true",
        "ENVELOG_COLORS": "1",
        "ENVELOG_TRACE_CALLER": "yes",
        "ENVELOG_SINGLE_POINT_TRACING": "on",
        "ENVELOG_OBSCURE": "TRUE",
        "ENVELOG_SENSITIVE_PARAMS": "password, token,,",
        "ENVELOG_REDACTION": "structural",
    }

    settings = configure_from_env(environ, store)

    assert settings.log_level is Level.DEBUG
    assert settings.json_pretty_print
    assert settings.colors
    assert settings.trace_caller
    assert settings.single_point_tracing
    assert settings.obscure_sensitive_data
    assert settings.sensitive_params == frozenset({"password", "token"})
    assert settings.redaction_strategy is RedactionStrategy.STRUCTURAL


@pytest.mark.parametrize("raw", ["0", "false", "no", "off", "maybe"])
def test_falsy_flags_disable(raw):
    store = ConfigStore()
    store.enable_colors()

    configure_from_env({"ENVELOG_COLORS": raw}, store)

    assert store.settings.colors is False


def test_bad_values_degrade():
    store = ConfigStore()

    settings = configure_from_env(
        {"ENVELOG_LEVEL": "loudest", "ENVELOG_REDACTION": "magic"}, store
    )

    assert settings.log_level is Level.INFO
    assert settings.redaction_strategy is RedactionStrategy.PATTERN


def test_defaults_to_process_environment_and_store(monkeypatch):
    monkeypatch.setenv("ENVELOG_LEVEL", "warn")

    configure_from_env()

    assert default_store.settings.log_level is Level.WARN
