"""Application logger setup."""

import logging

import pytest

from medischedule.config import settings
from medischedule.core.logging import QUIET_LOGGERS, setup_logging


@pytest.fixture(autouse=True)
def restore_level():
    logger = logging.getLogger("medischedule")
    level = logger.level
    yield
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)


def test_single_handler_across_setups(monkeypatch):
    monkeypatch.setattr(settings, "LOG_LEVEL", "warning")

    setup_logging()
    logger = setup_logging()

    assert logger.name == "medischedule"
    assert logger.level == logging.WARNING
    assert len(logger.handlers) == 1


def test_library_loggers_are_quiet_outside_debug(monkeypatch):
    monkeypatch.setattr(settings, "LOG_LEVEL", "INFO")

    setup_logging()

    assert all(logging.getLogger(name).level == logging.WARNING for name in QUIET_LOGGERS)


def test_unknown_level_falls_back_to_info(monkeypatch):
    monkeypatch.setattr(settings, "LOG_LEVEL", "chatty")

    assert setup_logging().level == logging.INFO
