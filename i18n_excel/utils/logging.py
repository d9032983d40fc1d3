"""Structured logging for i18n-excel."""

import logging
import sys
from pathlib import Path
from typing import Optional

from .colors import Colors

ROOT_LOGGER_NAME = 'i18n_excel'


class ColoredFormatter(logging.Formatter):
    """
    Formatter that colors console output by level.

    File handlers use a plain ``logging.Formatter`` so log files stay free
    of escape codes.
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.DIM,
        logging.INFO: Colors.OKCYAN,
        logging.WARNING: Colors.WARNING,
        logging.ERROR: Colors.FAIL,
        logging.CRITICAL: Colors.FAIL + Colors.BOLD,
    }

    LEVEL_PREFIXES = {
        logging.WARNING: '⚠️  ',
        logging.ERROR: '❌ ',
        logging.CRITICAL: '❌ ',
    }

    def __init__(self, fmt: Optional[str] = None, use_colors: bool = True, use_prefixes: bool = True):
        super().__init__(fmt)
        self.use_colors = use_colors
        self.use_prefixes = use_prefixes

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)

        if self.use_prefixes:
            message = self.LEVEL_PREFIXES.get(record.levelno, '') + message

        if self.use_colors:
            color = self.LEVEL_COLORS.get(record.levelno, '')
            message = f"{color}{message}{Colors.ENDC}"

        return message


class Logger:
    """
    Process-wide logger setup for the ``i18n_excel`` hierarchy.

    Owns one console handler (stdout) and an optional file handler.
    Modules log through ``get_logger(__name__)``-style children, which
    propagate here.
    """

    _instance: Optional['Logger'] = None
    _initialized: bool = False

    def __new__(cls) -> 'Logger':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if Logger._initialized:
            return

        self._logger = logging.getLogger(ROOT_LOGGER_NAME)
        self._logger.setLevel(logging.DEBUG)
        self._logger.handlers = []

        self._console_handler = self._create_console_handler()
        self._logger.addHandler(self._console_handler)
        self._file_handler: Optional[logging.FileHandler] = None

        Logger._initialized = True

    def _create_console_handler(self, level: int = logging.INFO, use_colors: bool = True) -> logging.StreamHandler:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(ColoredFormatter(fmt='%(message)s', use_colors=use_colors))
        return handler

    def _create_file_handler(self, file_path: Path, level: int = logging.DEBUG) -> logging.FileHandler:
        file_path.parent.mkdir(parents=True, exist_ok=True)

        handler = logging.FileHandler(file_path, encoding='utf-8')
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(
            fmt='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        return handler

    def configure(
        self,
        verbose: bool = False,
        quiet: bool = False,
        log_file: Optional[Path] = None,
        use_colors: bool = True
    ) -> None:
        """
        Reconfigure handlers.

        Args:
            verbose: Show DEBUG messages on the console
            quiet: Only WARNING and above on the console (wins over verbose)
            log_file: Also log everything to this file
            use_colors: Use ANSI colors on the console
        """
        if quiet:
            console_level = logging.WARNING
        elif verbose:
            console_level = logging.DEBUG
        else:
            console_level = logging.INFO

        self._logger.removeHandler(self._console_handler)
        self._console_handler = self._create_console_handler(level=console_level, use_colors=use_colors)
        self._logger.addHandler(self._console_handler)

        if log_file:
            if self._file_handler:
                self._logger.removeHandler(self._file_handler)
                self._file_handler.close()
            self._file_handler = self._create_file_handler(log_file)
            self._logger.addHandler(self._file_handler)

    @property
    def console_level(self) -> int:
        return self._console_handler.level

    def get_logger(self, name: Optional[str] = None) -> logging.Logger:
        """Return the root package logger or a named child of it."""
        if name:
            if name.startswith(ROOT_LOGGER_NAME):
                return logging.getLogger(name)
            return logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}')
        return self._logger


_logger: Optional[Logger] = None


def _get_instance() -> Logger:
    global _logger
    if _logger is None:
        _logger = Logger()
    return _logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger in the ``i18n_excel`` hierarchy.

    Args:
        name: Child name such as ``"exporter"`` or a full module name

    Returns:
        logging.Logger
    """
    return _get_instance().get_logger(name)


def configure_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[Path] = None,
    use_colors: bool = True
) -> None:
    """Configure the package logger; see ``Logger.configure``."""
    _get_instance().configure(verbose=verbose, quiet=quiet, log_file=log_file, use_colors=use_colors)


def reset_logger() -> None:
    """Drop all handlers and the singleton (used by tests)."""
    global _logger
    if _logger is not None:
        for handler in _logger._logger.handlers[:]:
            handler.close()
            _logger._logger.removeHandler(handler)
    _logger = None
    Logger._instance = None
    Logger._initialized = False
