#!/usr/bin/env python3
"""
Error Handling Utility Module

Provides reusable error handling patterns with structured logging:
1. log_and_continue() - Log error and continue execution (for expected failures)
2. log_and_return_default() - Log error and return a default value
3. log_and_raise() - Log error with context and re-raise (for infrastructure failures)

Context is attached under the "extra_fields" key so the JSON log formatter
emits it as top-level fields.
"""

import logging
from typing import Any, NoReturn


def _error_fields(error: Exception, context: dict[str, Any], error_type: str) -> dict[str, Any]:
    return {
        "extra_fields": {
            "error_type": error_type,
            "exception_class": error.__class__.__name__,
            "context": context,
        }
    }


def log_and_continue(
    logger: logging.Logger,
    error: Exception,
    context: dict[str, Any],
    error_type: str = "Operation",
) -> None:
    """
    Log an error with structured context and continue execution gracefully.

    Use this for expected errors that should not halt execution, such as one
    unreadable record in a batch import.

    Args:
        logger: Logger instance from logging.getLogger(__name__)
        error: The caught exception
        context: Structured data about what failed (build number, file, etc.)
        error_type: Human-readable description of the operation

    Example:
        for raw in documents:
            try:
                builds.append(Build.from_dict(raw))
            except (KeyError, TypeError, ValueError) as e:
                log_and_continue(logger, e, {"document": raw}, "Build parsing")
    """
    logger.warning(f"{error_type} failed: {error}", extra=_error_fields(error, context, error_type))


def log_and_return_default(
    logger: logging.Logger,
    error: Exception,
    context: dict[str, Any],
    default_value: Any = None,
    error_type: str = "Operation",
) -> Any:
    """
    Log an error and return a default value.

    Args:
        logger: Logger instance
        error: The caught exception
        context: Structured data about what failed
        default_value: Value to return on error (None, [], {}, etc.)
        error_type: Human-readable description

    Returns:
        default_value

    Example:
        try:
            return json.loads(path.read_text())
        except json.JSONDecodeError as e:
            return log_and_return_default(logger, e, {"path": str(path)}, {"builds": []}, "Build file loading")
    """
    logger.warning(
        f"{error_type} failed, using default value: {error}",
        extra=_error_fields(error, context, error_type),
    )
    return default_value


def log_and_raise(
    logger: logging.Logger,
    error: Exception,
    context: dict[str, Any],
    error_type: str = "Operation",
) -> NoReturn:
    """
    Log an error with context and re-raise it unchanged.

    Use this for failures that must reach the caller, such as an unavailable
    build store. The exception is neither wrapped nor retried.

    Args:
        logger: Logger instance
        error: The caught exception
        context: Structured data about what failed
        error_type: Human-readable description

    Raises:
        The original exception after logging

    Example:
        try:
            builds = store.get_all_builds(pipeline_id)
        except Exception as e:
            log_and_raise(logger, e, {"pipeline_id": pipeline_id}, "Build store query")
    """
    logger.error(
        f"{error_type} failed critically: {error}",
        exc_info=True,
        extra=_error_fields(error, context, error_type),
    )
    raise error
