#!/usr/bin/env python3
"""
Utility functions for atomic JSON file operations.

Prevents corruption by ensuring files are never left in a half-written state.
"""

import json
import logging
import os
import shutil
import tempfile
from typing import Any

from delivery_metrics.utils.error_handling import log_and_return_default

logger = logging.getLogger(__name__)


def atomic_json_save(data: dict, output_file: str) -> None:
    """
    Save JSON data to file using atomic write operations.

    1. Write to a temporary file in the target directory
    2. Validate that the temporary file holds correct JSON
    3. Atomically move the temporary file to the final location

    Args:
        data: Dictionary to save as JSON
        output_file: Target file path

    Raises:
        OSError: If the file cannot be written
        TypeError: If data is not JSON serializable
    """
    directory = os.path.dirname(os.path.abspath(output_file))
    os.makedirs(directory, exist_ok=True)

    # Temp file in the same directory so the move stays on one filesystem
    temp_fd, temp_path = tempfile.mkstemp(suffix=".json", dir=directory, text=True)

    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        with open(temp_path, encoding="utf-8") as f:
            json.load(f)

        shutil.move(temp_path, output_file)

    except Exception:
        if os.path.exists(temp_path):
            os.remove(temp_path)
        raise


def load_json_with_recovery(file_path: str, default_value: dict[Any, Any] | None = None) -> dict[Any, Any]:
    """
    Load JSON file with automatic recovery from corruption.

    A missing file returns default_value silently; a corrupted or unreadable
    file is logged and also returns default_value.

    Args:
        file_path: Path to JSON file
        default_value: Value to return if file is missing or invalid (defaults to {})

    Returns:
        Loaded JSON data or default_value
    """
    if default_value is None:
        default_value = {}

    if not os.path.exists(file_path):
        return default_value

    try:
        with open(file_path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        return log_and_return_default(logger, e, {"file_path": file_path}, default_value, "JSON file loading")

    if not isinstance(data, dict):
        return log_and_return_default(
            logger,
            ValueError(f"expected a JSON object, got {type(data).__name__}"),
            {"file_path": file_path},
            default_value,
            "JSON file loading",
        )

    return data
