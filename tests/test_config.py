"""Tests for environment-driven configuration and logging setup."""

import logging

import pytest

from habitgem.config import Environment, HabitGemConfig, LogLevel
from habitgem.utils.logger import setup_logging

ENV_KEYS = (
    "ENVIRONMENT", "MIN_RECORDS", "TREND_MIN_RECORDS", "PATTERN_CONFIDENCE_THRESHOLD",
    "ANOMALY_SENSITIVITY", "CLUSTER_COUNT", "CORRELATION_THRESHOLD", "AI_SERVICE_URL",
    "AI_SERVICE_API_KEY", "AI_TIMEOUT", "AI_SERVICE_ENABLED", "RECOMMENDATION_CACHE_SIZE",
    "LOG_LEVEL", "LOG_TO_FILE", "LOG_DIR", "TIMEZONE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults():
    cfg = HabitGemConfig()

    assert cfg.environment == Environment.DEVELOPMENT
    assert cfg.is_development()
    assert cfg.analytics.min_records_for_patterns == 7
    assert cfg.analytics.min_records_for_trend == 14
    assert cfg.analytics.correlation_threshold == 0.3
    assert cfg.cache.recommendation_cache_size == 10
    assert cfg.cache.evidence_cache_size == 20
    assert cfg.timezone == "UTC"
    assert not cfg.ai.is_configured


def test_env_override(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("MIN_RECORDS", "10")
    monkeypatch.setenv("AI_SERVICE_URL", "https://ai.example.com")
    monkeypatch.setenv("AI_SERVICE_API_KEY", "secret-key")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    cfg = HabitGemConfig()

    assert cfg.is_production()
    assert cfg.analytics.min_records_for_patterns == 10
    assert cfg.ai.is_configured
    assert cfg.log_level == LogLevel.DEBUG
    assert cfg.to_dict()["ai"]["api_key"] == "secret..."


def test_ai_can_be_disabled(monkeypatch):
    monkeypatch.setenv("AI_SERVICE_URL", "https://ai.example.com")
    monkeypatch.setenv("AI_SERVICE_ENABLED", "false")
    assert not HabitGemConfig().ai.is_configured


@pytest.mark.parametrize("key,value", [
    ("MIN_RECORDS", "0"),
    ("TREND_MIN_RECORDS", "3"),
    ("PATTERN_CONFIDENCE_THRESHOLD", "1.5"),
    ("ANOMALY_SENSITIVITY", "0"),
    ("CLUSTER_COUNT", "0"),
    ("CORRELATION_THRESHOLD", "-0.1"),
    ("RECOMMENDATION_CACHE_SIZE", "0"),
    ("AI_TIMEOUT", "0"),
    ("AI_SERVICE_URL", "ftp://ai.example.com"),
])
def test_invalid_values_rejected(monkeypatch, key, value):
    monkeypatch.setenv(key, value)
    with pytest.raises(ValueError):
        HabitGemConfig()


def test_logging_config_console_only():
    logging_config = HabitGemConfig().get_logging_config()
    assert logging_config["loggers"][""]["handlers"] == ["console"]
    assert "file" not in logging_config["handlers"]


def test_setup_logging_with_file(monkeypatch, tmp_path):
    log_dir = tmp_path / "logs"
    monkeypatch.setenv("LOG_TO_FILE", "true")
    monkeypatch.setenv("LOG_DIR", str(log_dir))
    monkeypatch.setenv("ENVIRONMENT", "testing")
    cfg = HabitGemConfig()

    logging_config = cfg.get_logging_config()
    assert logging_config["handlers"]["file"]["filename"] == str(log_dir / "habitgem_testing.log")

    logger = setup_logging(cfg)

    assert logger.name == "habitgem"
    assert log_dir.is_dir()
    for handler in logging.getLogger().handlers:
        handler.close()
