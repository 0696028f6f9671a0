"""Logging initialization helpers."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from auralis.config import LoggingSettings, Settings

# AWS SDK loggers; capped at WARNING.
_NOISY_LOGGERS = ("botocore", "boto3", "s3transfer", "urllib3")


def _build_handlers(cfg: LoggingSettings, *, log_dir: str, level: int) -> list[logging.Handler]:
    formatter = logging.Formatter(fmt=str(cfg.format), datefmt=str(cfg.datefmt))
    handlers: list[logging.Handler] = []

    if cfg.console:
        handlers.append(logging.StreamHandler())

    if cfg.file:
        file_path = Path(str(cfg.file))
        if not file_path.is_absolute():
            file_path = Path(log_dir) / file_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                file_path,
                maxBytes=int(cfg.max_bytes),
                backupCount=int(cfg.backup_count),
                encoding="utf-8",
            )
        )

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(settings: Settings) -> logging.Logger:
    """Configure the `auralis` logger tree and return its root.

    Only `auralis.*` gets handlers; AWS SDK loggers are capped at WARNING.
    Calling this more than once is a no-op.
    """
    logger = logging.getLogger("auralis")
    if getattr(logger, "_auralis_configured", False):
        return logger

    level = logging.getLevelName(str(settings.logging.level or "INFO").upper())
    if not isinstance(level, int):
        level = logging.INFO

    logger.setLevel(level)
    logger.handlers = _build_handlers(settings.logging, log_dir=settings.log_dir, level=level)
    logger.propagate = False

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    setattr(logger, "_auralis_configured", True)
    return logger
