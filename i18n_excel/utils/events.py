"""Event sink for synchronization runs.

The exporter and importer never print. They report what happened to an
``EventSink``, which keeps the records for the caller (tests, reporters)
and forwards each one to the package logger.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .logging import get_logger


@dataclass
class SyncEvent:
    """One thing worth telling the user about."""
    level: int
    message: str
    context: Dict[str, Any] = field(default_factory=dict)

    @property
    def level_name(self) -> str:
        return logging.getLevelName(self.level)


class EventSink:
    """Collects ``SyncEvent`` records and mirrors them to logging."""

    def __init__(self, logger: Optional[logging.Logger] = None, forward: bool = True):
        """
        Args:
            logger: Logger to forward to (default: the package logger)
            forward: Set False to only record events
        """
        self.events: List[SyncEvent] = []
        self.forward = forward
        self._logger = logger

    @property
    def logger(self) -> logging.Logger:
        if self._logger is None:
            self._logger = get_logger('sync')
        return self._logger

    def emit(self, level: int, message: str, **context: Any) -> SyncEvent:
        event = SyncEvent(level=level, message=message, context=context)
        self.events.append(event)
        if self.forward:
            self.logger.log(level, message)
        return event

    def debug(self, message: str, **context: Any) -> SyncEvent:
        return self.emit(logging.DEBUG, message, **context)

    def info(self, message: str, **context: Any) -> SyncEvent:
        return self.emit(logging.INFO, message, **context)

    def warning(self, message: str, **context: Any) -> SyncEvent:
        return self.emit(logging.WARNING, message, **context)

    def error(self, message: str, **context: Any) -> SyncEvent:
        return self.emit(logging.ERROR, message, **context)

    @property
    def warnings(self) -> List[SyncEvent]:
        return [e for e in self.events if e.level == logging.WARNING]

    @property
    def errors(self) -> List[SyncEvent]:
        return [e for e in self.events if e.level >= logging.ERROR]

    def messages(self, min_level: int = logging.DEBUG) -> List[str]:
        return [e.message for e in self.events if e.level >= min_level]
