from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

import pytest

from auralis.config import LoggingSettings, Settings
from auralis.utils.logging_setup import setup_logging


@pytest.fixture()
def fresh_logger():
    logger = logging.getLogger("auralis")
    saved = (logger.handlers, logger.level, logger.propagate, getattr(logger, "_auralis_configured", False))
    if hasattr(logger, "_auralis_configured"):
        delattr(logger, "_auralis_configured")
    yield logger
    logger.handlers, logger.level, logger.propagate = saved[0], saved[1], saved[2]
    setattr(logger, "_auralis_configured", saved[3])


def test_setup_logging_is_idempotent(tmp_path, fresh_logger) -> None:
    settings = Settings(
        data_dir=str(tmp_path / "data"),
        log_dir=str(tmp_path / "logs"),
        logging=LoggingSettings(level="debug", file="auralis.log"),
    )
    logger = setup_logging(settings)
    handlers = list(logger.handlers)

    assert logger is fresh_logger
    assert logger.level == logging.DEBUG
    assert any(isinstance(h, RotatingFileHandler) for h in handlers)
    assert (tmp_path / "logs").is_dir()
    assert logging.getLogger("botocore").level == logging.WARNING

    assert setup_logging(settings).handlers == handlers
