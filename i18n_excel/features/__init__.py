"""Feature modules."""

from .exporter import JsonToExcelExporter, ExportResult, json_to_excel
from .importer import ExcelToJsonImporter, ImportResult, GeneratedFile, excel_to_json, parse_excel
from .watcher import ExcelWatcher

__all__ = [
    'JsonToExcelExporter',
    'ExportResult',
    'json_to_excel',
    'ExcelToJsonImporter',
    'ImportResult',
    'GeneratedFile',
    'excel_to_json',
    'parse_excel',
    'ExcelWatcher',
]
