"""Centralized logging configuration."""

import sys

from loguru import logger

from src.config import settings


log_format = ' | '.join(
    (
        '<lk>{time:YYYY-MM-DD HH:mm:ss.SSS}</>',
        '<lvl>{level:<8}</>',
        '<c>{name}::{function}:{line}</>',
        '{message}',
    )
)

# Replace the default handler so every module shares one format
logger.remove()
logger.add(sys.stderr, format=log_format, level=settings.LOG_LEVEL, backtrace=False)

__all__ = ['logger']
