"""
Logging utilities for regauth.
"""

import logging
import sys
from typing import Any, Optional

import structlog

from regauth.utils.config import Config, get_config


def setup_logging(config: Optional[Config] = None) -> None:
    """
    Setup structured logging for regauth.
    
    Args:
        config: Configuration object (uses global config if None)
    """
    config = config or get_config()
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    
    logging.basicConfig(
        level=level,
        format="%(message)s",
        stream=sys.stderr,
    )
    
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]
    
    if config.log_format.lower() == "json":
        processors.extend([
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer()
        ])
    else:
        processors.extend([
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.dev.ConsoleRenderer()
        ])
    
    # Logs go to stderr so CLI output on stdout stays clean
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.WriteLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def add_context(**context: Any) -> None:
    """Add context to all loggers in the current context."""
    structlog.contextvars.bind_contextvars(**context)
