"""
i18n-excel
==========

Keep per-locale JSON translation files and one translation spreadsheet in
sync.

Usage:
    from i18n_excel import json_to_excel, excel_to_json, ExportConfig

    result = json_to_excel(ExportConfig(locales_dir='src/locales'))
    print(f"{result.total_keys} keys, {result.missing_count} missing")

CLI:
    i18n-excel export --mode merge
    i18n-excel import --sheet 0 --ignore-rows 2
    i18n-excel watch
"""

from .__version__ import __version__, __author__, __description__

# Core
from .core.deep_merge import deep_merge
from .core.flatten import ShapeConflictPolicy, flatten_object, set_nested_key, unflatten
from .core.errors import (
    I18nExcelError,
    ExcelNotFoundError,
    SheetNotFoundError,
    NoLocaleColumnsError,
    KeyShapeConflictError,
    WorkbookReadError,
)

# Features
from .features.exporter import JsonToExcelExporter, ExportResult, json_to_excel
from .features.importer import ExcelToJsonImporter, ImportResult, GeneratedFile, excel_to_json, parse_excel

# Config
from .utils.config import Config, ExportConfig, ImportConfig

__all__ = [
    '__version__',
    '__author__',
    '__description__',
    'deep_merge',
    'ShapeConflictPolicy',
    'flatten_object',
    'set_nested_key',
    'unflatten',
    'I18nExcelError',
    'ExcelNotFoundError',
    'SheetNotFoundError',
    'NoLocaleColumnsError',
    'KeyShapeConflictError',
    'WorkbookReadError',
    'JsonToExcelExporter',
    'ExportResult',
    'json_to_excel',
    'ExcelToJsonImporter',
    'ImportResult',
    'GeneratedFile',
    'excel_to_json',
    'parse_excel',
    'Config',
    'ExportConfig',
    'ImportConfig',
]
