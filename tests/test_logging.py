"""Tests for diagnostic logging setup."""

import logging

import pytest
from rich.logging import RichHandler

from s3deploy.core.logging import (
    COMMAND_LOGGER,
    ROOT_LOGGER,
    LogLevel,
    StructuredLogger,
    get_command_logger,
    get_logger,
    level_for_verbosity,
    setup_logging,
)
from s3deploy.deploy import executor


@pytest.fixture(autouse=True)
def restore_logger():
    logger = logging.getLogger(ROOT_LOGGER)
    handlers, level, propagate = logger.handlers[:], logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


class TestLevelForVerbosity:
    """Tests for mapping -v/-q flags to a level."""

    @pytest.mark.parametrize(
        "verbose,quiet,expected",
        [
            (0, False, LogLevel.WARNING),
            (1, False, LogLevel.INFO),
            (2, False, LogLevel.INFO),
            (3, False, LogLevel.DEBUG),
            (0, True, LogLevel.ERROR),
            (3, True, LogLevel.DEBUG),
        ],
    )
    def test_levels(self, verbose, quiet, expected):
        assert level_for_verbosity(verbose, quiet, default=LogLevel.WARNING) == expected


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_single_handler_after_repeated_setup(self):
        setup_logging(LogLevel.INFO)
        logger = setup_logging(LogLevel.DEBUG)

        assert logger.name == ROOT_LOGGER
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)
        assert logger.level == logging.DEBUG

    def test_plain_output_goes_to_stderr(self, capsys):
        logger = setup_logging(LogLevel.INFO, rich_output=False)
        logger.info("hello")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "s3deploy - INFO - hello" in captured.err

    def test_leaves_root_logger_alone(self):
        root_handlers = logging.getLogger().handlers[:]
        setup_logging(LogLevel.DEBUG)
        assert logging.getLogger().handlers == root_handlers


class TestLoggerNames:
    """Tests for the s3deploy logger namespace."""

    def test_prefixes_short_names(self):
        assert get_logger("deploy").name == "s3deploy.deploy"

    def test_keeps_qualified_names(self):
        assert get_logger("s3deploy.core.reporter").name == "s3deploy.core.reporter"

    def test_command_logger(self):
        assert get_command_logger().name == COMMAND_LOGGER == "s3deploy.aws"
        assert executor.logger is get_command_logger()

    def test_command_logger_level_is_independent(self):
        setup_logging(LogLevel.INFO)
        get_command_logger().setLevel(logging.WARNING)
        try:
            assert get_logger("deploy").isEnabledFor(logging.INFO)
            assert not get_command_logger().isEnabledFor(logging.INFO)
        finally:
            get_command_logger().setLevel(logging.NOTSET)


class TestStructuredLogger:
    """Tests for StructuredLogger context binding."""

    def test_plain_message(self):
        assert StructuredLogger("deploy").format("Deployment finished") == "Deployment finished"

    def test_bound_context(self):
        log = StructuredLogger("deploy").bind(state="syncing")
        assert log.format("Entered state") == "Entered state [state=syncing]"

    def test_bind_does_not_mutate_parent(self):
        parent = StructuredLogger("deploy")
        parent.bind(state="syncing")
        assert parent.format("x") == "x"

    def test_call_kwargs_extend_context(self):
        log = StructuredLogger("deploy").bind(state="reporting_success")
        assert log.format("done", s3_url="s3://b") == "done [state=reporting_success s3_url=s3://b]"

    def test_emits_through_namespaced_logger(self, capsys):
        setup_logging(LogLevel.DEBUG, rich_output=False)
        StructuredLogger("deploy").bind(state="validating").debug("Entered state")

        err = capsys.readouterr().err
        assert "s3deploy.deploy - DEBUG - Entered state [state=validating]" in err
