"""
Logging configuration for the founder_finance package

Library modules only call ``get_logger("founder_finance.<module>")``.
Entrypoints call ``configure_logging()`` once to attach a stream handler to
the package root logger.
"""
import logging
import os
import sys
from typing import Optional, Union

_PKG_LOGGER_NAME = 'founder_finance'
_CONFIGURED = False
_LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


def _level_from_name(name: str) -> Optional[int]:
    name = name.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = getattr(logging, name, None)
    return numeric if isinstance(numeric, int) else None


def _parse_level(level: Optional[Union[int, str]]) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        parsed = _level_from_name(level)
        if parsed is not None:
            return parsed
    # Env override when the explicit level is missing or unrecognised
    env_val = os.getenv('FOUNDER_FINANCE_LOG_LEVEL')
    if env_val:
        parsed = _level_from_name(env_val)
        if parsed is not None:
            return parsed
    return logging.INFO


def configure_logging(level: Optional[Union[int, str]] = None) -> None:
    """
    Attach a stderr handler to the package root logger, once

    Args:
        level: Level as int or name; falls back to FOUNDER_FINANCE_LOG_LEVEL, then INFO
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    resolved = _parse_level(level)
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    logger.setLevel(resolved)
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger, attaching a NullHandler to the package root until configured"""
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
