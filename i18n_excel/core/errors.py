"""Exceptions raised by the synchronization engine."""

from pathlib import Path
from typing import List, Union


class I18nExcelError(Exception):
    """Base class for all i18n-excel errors."""


class ExcelNotFoundError(I18nExcelError, FileNotFoundError):
    """The workbook to import does not exist."""

    def __init__(self, excel_path: Union[str, Path]):
        self.excel_path = Path(excel_path)
        super().__init__(f"Excel file not found: {self.excel_path}")


class SheetNotFoundError(I18nExcelError):
    """The requested sheet name or index is not in the workbook."""

    def __init__(self, sheet: Union[int, str], available: List[str]):
        self.sheet = sheet
        self.available = list(available)
        if isinstance(sheet, int):
            what = f"Sheet index {sheet} does not exist"
        else:
            what = f'Sheet "{sheet}" does not exist'
        super().__init__(f"{what} (available: {', '.join(self.available) or 'none'})")


class NoLocaleColumnsError(I18nExcelError):
    """The header row holds no locale column besides the key column."""

    def __init__(self, key_column: str):
        self.key_column = key_column
        super().__init__(
            f'No locale columns found; the first row must contain locale '
            f'identifiers besides the "{key_column}" column'
        )


class KeyShapeConflictError(I18nExcelError):
    """A flat key disagrees with the object/array shape built so far."""

    def __init__(self, key: str, path: str, expected: str, found: str):
        self.key = key
        self.path = path
        self.expected = expected
        self.found = found
        super().__init__(
            f'Key "{key}" needs {expected} at "{path}" but {found} is already there'
        )


class WorkbookReadError(I18nExcelError):
    """The workbook bytes are not a readable .xlsx file."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Could not read workbook: {reason}")
