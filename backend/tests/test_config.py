import logging

import pytest
from pydantic import ValidationError
from pythonjsonlogger.json import JsonFormatter

from studio_pricing.core.config import Settings, coercion_policy_from_config
from studio_pricing.core.observability import setup_logging
from studio_pricing.models import CoercionPolicy


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)


def test_settings_normalize_case():
    cfg = Settings(LOG_LEVEL=" debug ", PACKAGE_ROUNDING_MODE="Charm", NUMERIC_COERCION="STRICT")
    assert cfg.LOG_LEVEL == "DEBUG"
    assert cfg.PACKAGE_ROUNDING_MODE == "charm"
    assert coercion_policy_from_config(cfg) is CoercionPolicy.STRICT


def test_settings_reject_unknown_choices():
    with pytest.raises(ValidationError):
        Settings(PACKAGE_ROUNDING_MODE="floor")
    with pytest.raises(ValidationError):
        Settings(NUMERIC_COERCION="maybe")


def test_settings_read_prefixed_env(monkeypatch):
    monkeypatch.setenv("STUDIO_PRICING_PACKAGE_ALLOW_RECALC", "false")
    assert Settings().PACKAGE_ALLOW_RECALC is False


def test_setup_logging_json(restore_root_logger, monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    setup_logging(Settings(LOG_JSON=True, LOG_LEVEL="warning"))
    assert isinstance(restore_root_logger.handlers[0].formatter, JsonFormatter)
    assert restore_root_logger.level == logging.WARNING


def test_setup_logging_env_override(restore_root_logger, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "error")
    setup_logging(Settings(LOG_JSON=False))
    assert not isinstance(restore_root_logger.handlers[0].formatter, JsonFormatter)
    assert restore_root_logger.level == logging.ERROR
