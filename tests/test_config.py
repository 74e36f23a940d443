"""Tests for the config module."""
import logging
import time

import pytest

from config.constants import BACKEND, MARKERS, STORAGE
from config.exceptions import ConfigurationError, ShareBudgetError, StorageError
from config.logging_config import (
    EnvironmentFilter,
    LogContext,
    get_logger,
    set_log_environment,
    setup_logging,
)


class TestConstants:
    """Tests for constants module."""

    def test_storage_namespaces_are_distinct(self):
        """Testing must never share a namespace with other environments."""
        assert STORAGE.NAMESPACE_TESTING
        assert STORAGE.NAMESPACE_DEFAULT
        assert STORAGE.NAMESPACE_TESTING != STORAGE.NAMESPACE_DEFAULT

    def test_backend_values(self):
        assert BACKEND.API_VERSION == "v1"
        assert BACKEND.LOCAL_HOST == "127.0.0.1"
        assert BACKEND.LOCAL_PORT == 5000
        assert BACKEND.REMOTE_SCHEME == "https"
        assert BACKEND.DEFAULT_HTTPS_PORT == 443

    def test_markers_have_names(self):
        assert MARKERS.TEST_CONFIGURATION_VAR
        assert MARKERS.TEST_CONFIGURATION_SUFFIX.startswith(".")

    def test_constants_are_frozen(self):
        with pytest.raises(Exception):
            STORAGE.NAMESPACE_DEFAULT = "Other"


class TestExceptions:
    """Tests for custom exceptions."""

    def test_base_exception(self):
        """ShareBudgetError should work with message and details."""
        exc = ShareBudgetError("Test error", {"key": "value"})
        assert exc.message == "Test error"
        assert exc.details == {"key": "value"}
        assert "Test error" in str(exc)
        assert "key" in str(exc)

    def test_exception_without_details(self):
        exc = StorageError("Storage failed")
        assert exc.details == {}
        assert str(exc) == "Storage failed"

    def test_exception_inheritance(self):
        assert issubclass(ConfigurationError, ShareBudgetError)
        assert issubclass(StorageError, ShareBudgetError)


class TestLogging:
    """Tests for logging configuration."""

    def test_setup_logging_creates_logger(self, temp_data_dir):
        logger = setup_logging(data_dir=temp_data_dir, console_output=False)
        assert logger.name == 'sharebudget'

    def test_setup_logging_writes_log_file(self, temp_data_dir):
        logger = setup_logging(data_dir=temp_data_dir, console_output=False)
        logger.info("hello")
        for handler in logger.handlers:
            handler.flush()
        assert (temp_data_dir / STORAGE.LOG_FILE).exists()

    def test_setup_logging_is_reentrant(self, temp_data_dir):
        """Calling setup twice should not stack handlers."""
        setup_logging(data_dir=temp_data_dir, console_output=False)
        logger = setup_logging(data_dir=temp_data_dir, console_output=False)
        assert len(logger.handlers) == 1

    def test_get_logger_returns_child(self, temp_data_dir):
        setup_logging(data_dir=temp_data_dir, console_output=False)
        logger = get_logger("config.registry")
        assert logger.name == 'sharebudget.config.registry'

    def test_get_logger_shortens_long_names(self):
        logger = get_logger("a.b.c.d")
        assert logger.name == 'sharebudget.c.d'

    def test_log_lines_carry_environment(self, temp_data_dir):
        logger = setup_logging(data_dir=temp_data_dir, console_output=False)
        logger.info("before")
        set_log_environment("testing")
        logger.info("after")
        for handler in logger.handlers:
            handler.flush()

        lines = (temp_data_dir / STORAGE.LOG_FILE).read_text().splitlines()
        assert "[unresolved] sharebudget - INFO - before" in lines[-2]
        assert "[testing] sharebudget - INFO - after" in lines[-1]

    def test_set_log_environment_none_resets(self, temp_data_dir):
        set_log_environment(None)
        record = logging.makeLogRecord({"msg": "x"})
        EnvironmentFilter().filter(record)
        assert record.environment == "unresolved"

    def test_log_context_measures_duration(self, temp_data_dir):
        setup_logging(data_dir=temp_data_dir, console_output=False)
        logger = get_logger(__name__)

        with LogContext(logger, "Test operation") as ctx:
            time.sleep(0.01)

        assert ctx.start_time is not None

    def test_log_context_does_not_suppress(self):
        logger = get_logger(__name__)
        with pytest.raises(RuntimeError):
            with LogContext(logger, "Failing operation"):
                raise RuntimeError("boom")
