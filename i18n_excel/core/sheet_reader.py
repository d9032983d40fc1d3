"""Excel reading: workbook bytes in, string rows out.

Cells are returned as display text so that translators' numbers and dates
round-trip as they were typed. Never modifies the workbook.
"""

import datetime
import zipfile
from dataclasses import dataclass, field
from io import BytesIO
from typing import Any, Dict, List, Union

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from .constants import LABEL_ROW_MARKER, MISSING_PLACEHOLDER
from .errors import SheetNotFoundError, WorkbookReadError

SheetSelector = Union[int, str]


@dataclass
class SheetData:
    """Rows of one worksheet, keyed by header title."""
    name: str
    headers: List[str] = field(default_factory=list)
    rows: List[Dict[str, str]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.rows


def cell_to_text(value: Any) -> str:
    """Convert an openpyxl cell value to its display string."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    return str(value)


def _unique_headers(raw: List[Any]) -> List[str]:
    """Header titles per column; "" for untitled columns, duplicates suffixed."""
    headers: List[str] = []
    seen: Dict[str, int] = {}
    for value in raw:
        title = cell_to_text(value).strip()
        if not title:
            headers.append("")
            continue
        if title in seen:
            seen[title] += 1
            title = f"{title}_{seen[title]}"
        else:
            seen[title] = 0
        headers.append(title)
    return headers


def _select_sheet(workbook, sheet: SheetSelector):
    names = workbook.sheetnames
    if isinstance(sheet, int):
        if sheet < 0 or sheet >= len(names):
            raise SheetNotFoundError(sheet, names)
        return workbook[names[sheet]]
    if sheet not in names:
        raise SheetNotFoundError(sheet, names)
    return workbook[sheet]


def read_sheet(buffer: bytes, sheet: SheetSelector = 0) -> SheetData:
    """
    Decode a workbook and return one sheet as header-keyed rows.

    The first row is the header. Every following non-blank row becomes a
    dict with one entry per titled column; absent cells read as "".

    Args:
        buffer: Raw .xlsx bytes
        sheet: Zero-based sheet index or sheet name

    Returns:
        SheetData

    Raises:
        SheetNotFoundError: If ``sheet`` does not resolve
        WorkbookReadError: If ``buffer`` is not a readable .xlsx file
    """
    try:
        workbook = openpyxl.load_workbook(BytesIO(buffer), read_only=True, data_only=True)
    except (zipfile.BadZipFile, InvalidFileException, KeyError, ValueError) as e:
        raise WorkbookReadError(str(e) or type(e).__name__) from e
    try:
        worksheet = _select_sheet(workbook, sheet)
        data = SheetData(name=worksheet.title)

        row_iter = worksheet.iter_rows(values_only=True)
        header_row = next(row_iter, None)
        if header_row is None:
            return data

        headers = _unique_headers(list(header_row))
        data.headers = [h for h in headers if h]

        for values in row_iter:
            cells = [cell_to_text(v) for v in values]
            if not any(cells):
                continue
            row: Dict[str, str] = {}
            for index, title in enumerate(headers):
                if title:
                    row[title] = cells[index] if index < len(cells) else ""
            data.rows.append(row)

        return data
    finally:
        workbook.close()


def read_existing_snapshot(buffer: bytes, key_column: str) -> Dict[str, Dict[str, str]]:
    """
    Read a previously exported workbook as ``{key: {column: value}}``.

    Only the first sheet is used. Rows with an empty key and the locale
    label row are skipped. Missing-translation placeholders read back as "".

    Args:
        buffer: Raw .xlsx bytes
        key_column: Header title of the key column

    Returns:
        Snapshot in sheet row order
    """
    snapshot: Dict[str, Dict[str, str]] = {}

    for row in read_sheet(buffer, 0).rows:
        key = row.get(key_column, "").strip()
        if not key or key == LABEL_ROW_MARKER:
            continue
        snapshot[key] = {
            column: ("" if value == MISSING_PLACEHOLDER else value)
            for column, value in row.items()
            if column != key_column
        }

    return snapshot
