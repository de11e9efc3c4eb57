"""Unit tests for infrastructure.logging.setup module.

Tests cover:
- configure_logging function
- get_module_logger function
- Test logging suppression in test environment
"""

import logging
from unittest.mock import patch

import pytest
import structlog

from infrastructure.logging.setup import (
    configure_logging,
    get_module_logger,
    _is_test_environment,
)


@pytest.mark.unit
class TestIsTestEnvironment:
    """Test suite for _is_test_environment helper."""

    def test_detects_pytest_in_sys_modules(self):
        """Returns True when pytest is in sys.modules."""
        assert _is_test_environment() is True


@pytest.mark.unit
class TestConfigureLogging:
    """Test suite for configure_logging function."""

    def test_returns_bound_logger(self, mock_settings):
        result = configure_logging(settings=mock_settings)

        assert hasattr(result, "info")
        assert hasattr(result, "error")

    def test_suppresses_logging_in_tests(self, mock_settings):
        configure_logging(settings=mock_settings, log_level="DEBUG")

        assert logging.root.level > logging.CRITICAL

    def test_production_uses_json_renderer(self, mock_settings):
        with patch(
            "infrastructure.logging.setup._is_test_environment", return_value=False
        ), patch("infrastructure.logging.setup.structlog.configure") as configure:
            configure_logging(settings=mock_settings, is_production=True)

        processors = configure.call_args.kwargs["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_development_uses_console_renderer(self, mock_settings):
        with patch(
            "infrastructure.logging.setup._is_test_environment", return_value=False
        ), patch("infrastructure.logging.setup.structlog.configure") as configure:
            configure_logging(settings=mock_settings, is_production=False)

        processors = configure.call_args.kwargs["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_extra_processors_run_before_renderer(self, mock_settings):
        def extra(logger, method_name, event_dict):
            return event_dict

        with patch(
            "infrastructure.logging.setup._is_test_environment", return_value=False
        ), patch("infrastructure.logging.setup.structlog.configure") as configure:
            configure_logging(
                settings=mock_settings, is_production=True, extra_processors=[extra]
            )

        processors = configure.call_args.kwargs["processors"]
        assert processors[-2] is extra


@pytest.mark.unit
class TestGetModuleLogger:
    def test_binds_calling_module(self):
        logger = get_module_logger()

        assert logger is not None
        assert hasattr(logger, "info")

    def test_binds_component_and_module_path(self):
        with patch("infrastructure.logging.setup.structlog.stdlib.get_logger") as get_logger:
            get_module_logger()

        get_logger.return_value.bind.assert_called_once_with(
            component="test_setup",
            module_path=__name__,
        )
