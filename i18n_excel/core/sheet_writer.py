"""Excel writing: ordered translation rows in, workbook bytes out."""

from io import BytesIO
from typing import Dict, List, Sequence

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.utils import get_column_letter

from .constants import (
    DEFAULT_SHEET_TITLE,
    KEY_COLUMN_WIDTH,
    LOCALE_COLUMN_WIDTH,
    MISSING_PLACEHOLDER,
)


def has_illegal_characters(text: str) -> bool:
    """True if ``text`` holds control characters that XML cannot store."""
    return bool(ILLEGAL_CHARACTERS_RE.search(text))


def strip_illegal_characters(text: str) -> str:
    """Remove control characters that cannot be written to a worksheet."""
    return ILLEGAL_CHARACTERS_RE.sub("", text)


def write_sheet(
    rows: Sequence[Dict[str, str]],
    key_column: str,
    locales: Sequence[str],
    highlight_missing: bool = True,
    sheet_title: str = DEFAULT_SHEET_TITLE,
) -> bytes:
    """
    Build a single-sheet workbook from translation rows.

    The header is ``[key_column, *locales]``; each row dict supplies one
    data row, looked up by column title. With ``highlight_missing`` every
    empty data cell outside the key column gets ``MISSING_PLACEHOLDER``.
    This is plain text, not cell styling.

    Every value is stored as a text cell, so translations starting with
    ``=`` stay text instead of becoming formulas. Control characters that
    XML cannot hold are dropped.

    Args:
        rows: Data rows in output order (label row included, if any)
        key_column: Title of the first column
        locales: Locale columns, in order
        highlight_missing: Mark empty translation cells
        sheet_title: Worksheet name

    Returns:
        The .xlsx file as bytes
    """
    header: List[str] = [key_column, *locales]

    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = sheet_title

    for row_index, row in enumerate([dict(zip(header, header)), *rows], start=1):
        for column_index, column in enumerate(header, start=1):
            value = strip_illegal_characters(str(row.get(column, "") or ""))
            if not value and column_index > 1 and row_index > 1 and highlight_missing:
                value = MISSING_PLACEHOLDER
            # openpyxl leaves cells it never touched out of the file
            if not value:
                continue
            cell = worksheet.cell(row=row_index, column=column_index, value=value)
            cell.data_type = 's'

    worksheet.column_dimensions[get_column_letter(1)].width = KEY_COLUMN_WIDTH
    for index in range(2, len(header) + 1):
        worksheet.column_dimensions[get_column_letter(index)].width = LOCALE_COLUMN_WIDTH

    output = BytesIO()
    workbook.save(output)
    return output.getvalue()
