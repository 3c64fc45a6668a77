"""Shared utility helpers for logging configuration."""

import logging
from typing import Optional

from pythonjsonlogger import jsonlogger


def setup_logger(name: str = "relay_logger", level_name: Optional[str] = None) -> logging.Logger:
    """Configure and return a structured logger instance.

    Parameters
    ----------
    name: str, optional
        Logger name to create or retrieve. Defaults to ``"relay_logger"``.
    level_name: str, optional
        Logging level such as ``"DEBUG"``. Defaults to ``settings.LOG_LEVEL``.

    Returns
    -------
    logging.Logger
        The configured logger with JSON formatting applied.
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger  # Already configured

    if level_name is None:
        from config.settings import settings
        level_name = settings.LOG_LEVEL

    level = getattr(logging, str(level_name).upper(), logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO

    logger.setLevel(level)

    handler = logging.StreamHandler()
    formatter = jsonlogger.JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger
