"""Tests for settings loading."""

import pytest

from statement_analyzer import config
from statement_analyzer.config import ConfigError, Settings, get_config, require_api_key


def test_defaults(monkeypatch):
    for var in ("ANTHROPIC_API_KEY", "MODEL", "TEMPERATURE", "MAX_TOKENS", "PORT", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    s = Settings(_env_file=None)
    assert s.anthropic_api_key == ""
    assert s.model == "claude-sonnet-4-20250514"
    assert s.temperature == 0.2
    assert s.max_tokens == 4096
    assert s.port == 8877
    assert s.log_level == "INFO"


@pytest.mark.parametrize("raw", ['  sk-abc  ', '"sk-abc"', "'sk-abc'", ' "sk-abc" \n'])
def test_key_whitespace_and_quotes_stripped(raw):
    assert Settings(_env_file=None, anthropic_api_key=raw).anthropic_api_key == "sk-abc"


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", " sk-env ")
    monkeypatch.setenv("PORT", "9001")
    monkeypatch.setenv("TEMPERATURE", "0")
    s = Settings(_env_file=None)
    assert s.anthropic_api_key == "sk-env"
    assert s.port == 9001
    assert s.temperature == 0.0


def test_get_config_is_singleton(monkeypatch):
    monkeypatch.setattr(config, "_config", None)
    first = get_config()
    assert get_config() is first


def test_require_api_key():
    assert require_api_key(Settings(_env_file=None, anthropic_api_key="sk-x")) == "sk-x"
    with pytest.raises(ConfigError, match="ANTHROPIC_API_KEY"):
        require_api_key(Settings(_env_file=None, anthropic_api_key="   "))
