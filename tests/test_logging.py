"""Tests for structured logging and the event sink."""

import pytest
import logging
import tempfile
from pathlib import Path

from i18n_excel.utils.logging import (
    Logger,
    ColoredFormatter,
    get_logger,
    configure_logging,
    reset_logger,
)
from i18n_excel.utils.colors import Colors
from i18n_excel.utils.events import EventSink, SyncEvent


def _record(level, msg='Test message'):
    return logging.LogRecord(
        name='test',
        level=level,
        pathname='',
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None
    )


class TestColoredFormatter:
    """Test cases for ColoredFormatter."""

    def test_format_without_colors(self):
        """Formatter without colors should return plain text."""
        formatter = ColoredFormatter(fmt='%(message)s', use_colors=False, use_prefixes=False)
        result = formatter.format(_record(logging.INFO))
        assert result == 'Test message'
        assert Colors.OKCYAN not in result

    def test_format_with_colors(self):
        """Formatter with colors should include ANSI codes."""
        formatter = ColoredFormatter(fmt='%(message)s', use_colors=True, use_prefixes=False)
        result = formatter.format(_record(logging.INFO))
        assert Colors.OKCYAN in result
        assert result.endswith(Colors.ENDC)

    def test_different_levels_have_different_colors(self):
        """Different log levels should use different colors."""
        formatter = ColoredFormatter(fmt='%(message)s', use_colors=True, use_prefixes=False)

        levels = [
            (logging.DEBUG, Colors.DIM),
            (logging.INFO, Colors.OKCYAN),
            (logging.WARNING, Colors.WARNING),
            (logging.ERROR, Colors.FAIL),
        ]

        for level, expected_color in levels:
            result = formatter.format(_record(level, 'Test'))
            assert expected_color in result, f"Level {level} should use color {expected_color}"

    def test_prefixes(self):
        """Warnings and errors get a marker, info does not."""
        formatter = ColoredFormatter(fmt='%(message)s', use_colors=False)
        assert formatter.format(_record(logging.WARNING, 'careful')) == '⚠️  careful'
        assert formatter.format(_record(logging.ERROR, 'broken')) == '❌ broken'
        assert formatter.format(_record(logging.INFO, 'fine')) == 'fine'


class TestLogger:
    """Test cases for Logger class."""

    def setup_method(self):
        """Reset logger before each test."""
        reset_logger()

    def teardown_method(self):
        """Clean up after each test."""
        reset_logger()

    def test_singleton_pattern(self):
        """Logger should be a singleton."""
        assert Logger() is Logger()

    def test_get_logger_returns_same_instance(self):
        assert get_logger() is get_logger()
        assert get_logger().name == 'i18n_excel'

    def test_get_module_logger(self):
        """Named loggers are children of the package logger."""
        assert get_logger('exporter').name == 'i18n_excel.exporter'
        assert get_logger('i18n_excel.features.watcher').name == 'i18n_excel.features.watcher'

    def test_configure_verbose(self):
        """Verbose mode should set DEBUG level."""
        configure_logging(verbose=True)
        assert Logger().console_level == logging.DEBUG

    def test_configure_quiet(self):
        """Quiet mode should set WARNING level, even with verbose."""
        configure_logging(quiet=True, verbose=True)
        assert Logger().console_level == logging.WARNING

    def test_configure_default(self):
        """Default mode should set INFO level."""
        configure_logging()
        assert Logger()._console_handler.level == logging.INFO

    def test_configure_file_logging(self):
        """File logging should create a file handler."""
        with tempfile.TemporaryDirectory() as tmpdir:
            log_file = Path(tmpdir) / 'logs' / 'i18n.log'
            configure_logging(log_file=log_file)
            instance = Logger()

            assert instance._file_handler is not None

            get_logger('exporter').debug("Debug goes to file")

            instance._file_handler.close()

            content = log_file.read_text(encoding='utf-8')
            assert "Debug goes to file" in content
            assert "[DEBUG] i18n_excel.exporter" in content
            assert '\033[' not in content

    def test_debug_hidden_by_default(self, capfd):
        configure_logging(use_colors=False)
        get_logger('sync').debug("Debug message")
        captured = capfd.readouterr()
        assert "Debug message" not in captured.out

    def test_debug_shown_when_verbose(self, capfd):
        configure_logging(verbose=True, use_colors=False)
        get_logger('sync').debug("Debug message")
        captured = capfd.readouterr()
        assert "Debug message" in captured.out

    def test_warning_written_to_stdout(self, capfd):
        configure_logging(use_colors=False)
        get_logger('sync').warning("Warning message")
        captured = capfd.readouterr()
        assert "⚠️  Warning message" in captured.out

    def test_quiet_hides_info(self, capfd):
        configure_logging(quiet=True)
        get_logger('sync').info("Info message")
        captured = capfd.readouterr()
        assert "Info message" not in captured.out


class TestEventSink:
    """Test cases for EventSink."""

    def test_records_events(self):
        sink = EventSink(forward=False)

        sink.info("Detected locales", locales=['en'])
        sink.warning("Locale file not found")
        sink.error("Failed to parse JSON")

        assert [e.level_name for e in sink.events] == ['INFO', 'WARNING', 'ERROR']
        assert sink.events[0].context == {'locales': ['en']}
        assert [e.message for e in sink.warnings] == ["Locale file not found"]
        assert [e.message for e in sink.errors] == ["Failed to parse JSON"]

    def test_messages_filter(self):
        sink = EventSink(forward=False)
        sink.debug("d")
        sink.info("i")
        sink.warning("w")

        assert sink.messages() == ['d', 'i', 'w']
        assert sink.messages(logging.INFO) == ['i', 'w']

    def test_forwards_to_logger(self, caplog):
        sink = EventSink(logger=logging.getLogger('i18n_excel.test_events'))

        with caplog.at_level(logging.INFO, logger='i18n_excel.test_events'):
            sink.info("forwarded")

        assert caplog.records[-1].getMessage() == "forwarded"
        assert caplog.records[-1].levelno == logging.INFO

    def test_default_logger(self):
        reset_logger()
        assert EventSink().logger.name == 'i18n_excel.sync'

    def test_emit_returns_event(self):
        event = EventSink(forward=False).emit(logging.WARNING, "x", path='p')
        assert isinstance(event, SyncEvent)
        assert event.context == {'path': 'p'}
