"""
Core Infrastructure - Logging

Usage:
    from delivery_metrics.core import get_logger, setup_logging

    setup_logging(level="DEBUG")
    logger = get_logger(__name__)
"""

from .logging_config import JSONFormatter, get_logger, log_with_context, setup_logging

__all__ = [
    "JSONFormatter",
    "get_logger",
    "log_with_context",
    "setup_logging",
]
