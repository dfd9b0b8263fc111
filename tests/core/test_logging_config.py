"""Tests for logging configuration."""

import json
import logging

import pytest

from taskresolver.core.logging_config import (
    PACKAGE_LOGGER,
    JsonFormatter,
    add_file_handler,
    configure_logging,
    get_logger,
    reset_logging,
    set_level,
)


@pytest.fixture(autouse=True)
def _reset_logging():
    reset_logging()
    yield
    reset_logging()


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_configures_package_logger_only(self, clean_env):
        root_handlers = list(logging.getLogger().handlers)

        logger = configure_logging(level="DEBUG")

        assert logger.name == PACKAGE_LOGGER
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert logging.getLogger().handlers == root_handlers

    def test_second_call_ignored_without_force(self, clean_env):
        configure_logging(level="DEBUG")
        configure_logging(level="ERROR")
        assert logging.getLogger(PACKAGE_LOGGER).level == logging.DEBUG

        configure_logging(level="ERROR", force=True)
        assert logging.getLogger(PACKAGE_LOGGER).level == logging.ERROR
        assert len(logging.getLogger(PACKAGE_LOGGER).handlers) == 1

    def test_environment_defaults(self, clean_env, tmp_path):
        log_file = tmp_path / "resolver.log"
        clean_env.setenv("TASKRESOLVER_LOG_LEVEL", "info")
        clean_env.setenv("TASKRESOLVER_LOG_FORMAT", "json")
        clean_env.setenv("TASKRESOLVER_LOG_FILE", str(log_file))

        logger = configure_logging()
        logging.getLogger(f"{PACKAGE_LOGGER}.test").info("hello: x=%d", 1)
        for handler in logger.handlers:
            handler.flush()

        record = json.loads(log_file.read_text().splitlines()[-1])
        assert record["message"] == "hello: x=1"
        assert record["level"] == "INFO"

    def test_unknown_level_raises(self, clean_env):
        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging(level="LOUD")

    def test_unknown_format_raises(self, clean_env):
        with pytest.raises(ValueError, match="Unknown log format"):
            configure_logging(format="xml")  # type: ignore[arg-type]


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def _record(self, **extra):
        record = logging.LogRecord(
            name="taskresolver.core.dag.resolution",
            level=logging.DEBUG,
            pathname=__file__,
            lineno=1,
            msg="task_completed: task_id=%s",
            args=("A",),
            exc_info=None,
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_basic_fields(self):
        data = json.loads(JsonFormatter().format(self._record()))
        assert data["level"] == "DEBUG"
        assert data["logger"] == "taskresolver.core.dag.resolution"
        assert data["message"] == "task_completed: task_id=A"
        assert "extra" not in data

    def test_context_fields_promoted(self):
        data = json.loads(
            JsonFormatter().format(self._record(resolution_id="r1", task_id="A", attempt=1))
        )
        assert data["resolution_id"] == "r1"
        assert data["task_id"] == "A"
        assert data["extra"] == {"attempt": 1}


class TestHelpers:
    """Tests for get_logger, set_level and add_file_handler."""

    def test_get_logger(self):
        assert get_logger("taskresolver.core.dag") is logging.getLogger("taskresolver.core.dag")

    def test_set_level_defaults_to_package_logger(self):
        set_level("info")
        assert logging.getLogger(PACKAGE_LOGGER).level == logging.INFO

    def test_set_level_named_logger(self):
        child = logging.getLogger(f"{PACKAGE_LOGGER}.core.dag.graph")
        try:
            set_level("ERROR", child.name)
            assert child.level == logging.ERROR
        finally:
            child.setLevel(logging.NOTSET)

    def test_set_level_unknown_raises(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            set_level("LOUD")

    def test_add_file_handler_text(self, tmp_path):
        """Records below the handler level are dropped."""
        log_file = tmp_path / "dag.log"
        set_level("DEBUG")
        handler = add_file_handler(str(log_file), level="INFO")

        logger = logging.getLogger(f"{PACKAGE_LOGGER}.core.dag.graph")
        logger.debug("task_registered: task_id=%s", "A")
        logger.info("resolution_started: tasks=%d", 3)
        handler.flush()

        lines = log_file.read_text().splitlines()
        assert len(lines) == 1
        assert "INFO" in lines[0]
        assert "resolution_started: tasks=3" in lines[0]
        assert handler in logging.getLogger(PACKAGE_LOGGER).handlers

    def test_add_file_handler_json(self, tmp_path):
        log_file = tmp_path / "dag.jsonl"
        set_level("DEBUG")
        handler = add_file_handler(str(log_file), json_format=True)

        logging.getLogger(PACKAGE_LOGGER).debug(
            "task_completed: task_id=%s", "A", extra={"task_id": "A"}
        )
        handler.flush()

        record = json.loads(log_file.read_text().splitlines()[-1])
        assert record["message"] == "task_completed: task_id=A"
        assert record["task_id"] == "A"
