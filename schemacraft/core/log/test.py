"""Tests for core logging module."""

import logging
from io import StringIO

import pytest

from .lib import get_logger, resolve_level, setup_logging


class TestLogging:
    """Test core logging API."""

    @pytest.mark.unit
    def test_get_logger(self) -> None:
        """Verify logger instance creation."""
        logger = get_logger("schemacraft.test")
        assert logger.name == "schemacraft.test"
        assert isinstance(logger, logging.Logger)

    @pytest.mark.unit
    def test_get_logger_default_name(self) -> None:
        """Verify default logger name."""
        assert get_logger().name == "schemacraft"

    @pytest.mark.unit
    def test_setup_logging_accepts_level_name(self) -> None:
        """Level names are accepted as well as numbers."""
        stream = StringIO()
        setup_logging(level="debug", stream=stream)
        logger = get_logger("schemacraft.test_setup")
        logger.debug("test message")

        # basicConfig is a no-op once the root logger has handlers
        assert logger.level == logging.NOTSET


class TestResolveLevel:
    """Tests for level name resolution."""

    @pytest.mark.unit
    def test_numeric_passthrough(self) -> None:
        assert resolve_level(logging.INFO) == logging.INFO

    @pytest.mark.unit
    def test_case_insensitive_names(self) -> None:
        assert resolve_level("warning") == logging.WARNING
        assert resolve_level(" Error ") == logging.ERROR

    @pytest.mark.unit
    def test_unknown_name_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown log level"):
            resolve_level("chatty")
