#!/usr/bin/env python3
"""
Tests for Error Handling Utility Module

Verifies the log-and-continue, log-and-default and log-and-raise patterns
attach structured context for the JSON formatter.
"""

from unittest.mock import MagicMock

import pytest

from delivery_metrics.utils.error_handling import log_and_continue, log_and_raise, log_and_return_default


@pytest.fixture
def mock_logger():
    return MagicMock()


class TestLogAndContinue:
    """Test log_and_continue()"""

    def test_logs_warning_with_message(self, mock_logger):
        log_and_continue(mock_logger, ValueError("bad number"), {"build": 7}, "Build parsing")

        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args[0][0] == "Build parsing failed: bad number"

    def test_attaches_structured_context(self, mock_logger):
        log_and_continue(mock_logger, KeyError("pipelineId"), {"build": 7}, "Build parsing")

        fields = mock_logger.warning.call_args[1]["extra"]["extra_fields"]
        assert fields["error_type"] == "Build parsing"
        assert fields["exception_class"] == "KeyError"
        assert fields["context"] == {"build": 7}

    def test_default_error_type(self, mock_logger):
        log_and_continue(mock_logger, RuntimeError("boom"), {})

        assert mock_logger.warning.call_args[0][0] == "Operation failed: boom"

    def test_returns_none(self, mock_logger):
        assert log_and_continue(mock_logger, RuntimeError("boom"), {}) is None


class TestLogAndReturnDefault:
    """Test log_and_return_default()"""

    def test_returns_default_value(self, mock_logger):
        default = {"builds": []}

        result = log_and_return_default(mock_logger, ValueError("corrupt"), {"path": "x"}, default, "File loading")

        assert result is default

    def test_logs_warning(self, mock_logger):
        log_and_return_default(mock_logger, ValueError("corrupt"), {"path": "x"}, None, "File loading")

        message = mock_logger.warning.call_args[0][0]
        assert message == "File loading failed, using default value: corrupt"
        assert mock_logger.warning.call_args[1]["extra"]["extra_fields"]["context"] == {"path": "x"}

    def test_default_is_none(self, mock_logger):
        assert log_and_return_default(mock_logger, ValueError("x"), {}) is None


class TestLogAndRaise:
    """Test log_and_raise()"""

    def test_reraises_same_exception(self, mock_logger):
        error = ConnectionError("store unavailable")

        with pytest.raises(ConnectionError) as exc_info:
            log_and_raise(mock_logger, error, {"pipeline_ids": ["P"]}, "Build store query")

        assert exc_info.value is error

    def test_logs_error_with_traceback(self, mock_logger):
        with pytest.raises(OSError):
            log_and_raise(mock_logger, OSError("disk"), {"path": "builds.json"}, "Build store query")

        mock_logger.error.assert_called_once()
        args, kwargs = mock_logger.error.call_args
        assert args[0] == "Build store query failed critically: disk"
        assert kwargs["exc_info"] is True
        assert kwargs["extra"]["extra_fields"]["exception_class"] == "OSError"
