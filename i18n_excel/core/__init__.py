"""Synchronization engine: flattening, merging, sheet I/O."""

from .deep_merge import deep_merge
from .flatten import (
    ShapeConflictPolicy,
    flatten_object,
    is_array_index,
    set_nested_key,
    set_top_level_key,
    unflatten,
)
from .sheet_reader import SheetData, read_sheet, read_existing_snapshot
from .sheet_writer import write_sheet

__all__ = [
    'deep_merge',
    'ShapeConflictPolicy',
    'flatten_object',
    'is_array_index',
    'set_nested_key',
    'set_top_level_key',
    'unflatten',
    'SheetData',
    'read_sheet',
    'read_existing_snapshot',
    'write_sheet',
]
