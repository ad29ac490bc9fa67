"""
Tests for logging configuration module.
"""

import logging

from global_up.logging_config import ColoredFormatter, get_logger, setup_logging


class TestSetupLogging:
    """Test logging setup and configuration."""

    def test_setup_logging_default(self):
        """Test default logging setup only shows warnings."""
        logger = setup_logging()
        assert logger.name == "global_up"
        assert logger.level == logging.WARNING
        assert logger.propagate is False

    def test_setup_logging_verbose(self):
        """Test verbose logging enables DEBUG level."""
        logger = setup_logging(verbose=True)
        assert logger.level == logging.DEBUG

    def test_console_handler_alongside_file(self, tmp_path):
        """Test the stderr handler stays at the console level when a log file is set."""
        logger = setup_logging(log_file=str(tmp_path / "up.log"))
        console_handlers = [
            h for h in logger.handlers
            if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        ]
        assert len(console_handlers) == 1
        assert console_handlers[0].level == logging.WARNING
        assert logger.level == logging.DEBUG

    def test_setup_logging_with_file(self, tmp_path):
        """Test the log file receives debug records."""
        log_file = tmp_path / "logs" / "up.log"
        logger = setup_logging(log_file=str(log_file))

        logging.getLogger("global_up.registry").debug("registry lookup detail")
        for handler in logger.handlers:
            handler.flush()

        assert log_file.exists()
        assert "registry lookup detail" in log_file.read_text()

    def test_child_loggers_use_configuration(self):
        """Test module loggers are children of the package logger."""
        setup_logging(verbose=True)
        assert logging.getLogger("global_up.package_managers").getEffectiveLevel() == logging.DEBUG

    def test_get_logger_reuses_instance(self):
        logger = setup_logging()
        assert get_logger() is logger


class TestColoredFormatter:
    """Tests for ColoredFormatter."""

    def _record(self, level):
        return logging.LogRecord("global_up", level, __file__, 1, "hello", None, None)

    def test_plain(self):
        formatter = ColoredFormatter("%(levelname_colored)s %(message)s", use_colors=False)
        assert formatter.format(self._record(logging.WARNING)) == "! warning hello"

    def test_colored(self):
        formatter = ColoredFormatter("%(levelname_colored)s %(message)s", use_colors=True)
        formatted = formatter.format(self._record(logging.ERROR))
        assert formatted.startswith("\033[31m")
        assert formatted.endswith("hello")
