"""Utility modules."""

from .colors import Colors
from .config import Config, ExportConfig, ImportConfig, WatchConfig, create_default_config
from .events import EventSink, SyncEvent
from .validators import is_valid_locale_code, parse_sheet_selector

__all__ = [
    'Colors',
    'Config',
    'ExportConfig',
    'ImportConfig',
    'WatchConfig',
    'create_default_config',
    'EventSink',
    'SyncEvent',
    'is_valid_locale_code',
    'parse_sheet_selector',
]
