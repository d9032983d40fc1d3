"""Validation utilities."""

import re

_LOCALE_PATTERN = re.compile(r'^[A-Za-z]{2,3}([-_][A-Za-z0-9]{2,8})*$')


def is_valid_locale_code(code: str) -> bool:
    """
    Loosely validate a locale identifier.

    Accepts ISO 639 language codes with optional subtags joined by ``-``
    or ``_``: en, zh-Hant, pt_BR, sr-Latn-RS.
    """
    if not code or not isinstance(code, str):
        return False
    return bool(_LOCALE_PATTERN.match(code))


def parse_sheet_selector(value: str):
    """
    Interpret a sheet selector given as text.

    All-digit strings are zero-based indexes, anything else is a sheet
    name. ``"0"`` -> 0, ``"Sheet1"`` -> "Sheet1".
    """
    text = str(value).strip()
    if text.isdigit():
        return int(text)
    return text
