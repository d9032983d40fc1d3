"""Shared test helpers."""

import json
from io import BytesIO
from pathlib import Path

import openpyxl
import pytest


def build_workbook(sheets):
    """
    Build .xlsx bytes from ``{sheet_name: [row, ...]}``.

    Rows are lists of cell values; the first row is the header.
    """
    workbook = openpyxl.Workbook()
    workbook.remove(workbook.active)
    for name, rows in sheets.items():
        worksheet = workbook.create_sheet(title=name)
        for row in rows:
            worksheet.append(row)
    output = BytesIO()
    workbook.save(output)
    return output.getvalue()


def write_locales(directory: Path, locales):
    """Write ``{locale: data}`` as ``<directory>/<locale>.json`` files."""
    directory.mkdir(parents=True, exist_ok=True)
    for locale, data in locales.items():
        (directory / f"{locale}.json").write_text(json.dumps(data, ensure_ascii=False), encoding='utf-8')
    return directory


@pytest.fixture
def workbook_factory():
    return build_workbook
