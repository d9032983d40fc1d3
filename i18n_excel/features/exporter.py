"""JSON locale files -> Excel export."""

import json
import shutil
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..core.constants import LABEL_ROW_MARKER, MERGE_MODE_MERGE
from ..core.flatten import flatten_object
from ..core.sheet_reader import read_existing_snapshot
from ..core.sheet_writer import has_illegal_characters, strip_illegal_characters, write_sheet
from ..utils.config import ExportConfig
from ..utils.events import EventSink

FlatLocale = Dict[str, str]
Snapshot = Dict[str, Dict[str, str]]


@dataclass
class ExportResult:
    """Outcome of one export run."""
    excel_path: Path
    merge_mode: str
    locales: List[str] = field(default_factory=list)
    keys: List[str] = field(default_factory=list)
    rows: List[Dict[str, str]] = field(default_factory=list)
    label_row: Optional[Dict[str, str]] = None
    new_key_count: int = 0
    missing_count: int = 0
    existing_key_count: int = 0
    written: bool = False
    backup_path: Optional[Path] = None

    @property
    def total_keys(self) -> int:
        return len(self.keys)

    @property
    def total_cells(self) -> int:
        return len(self.keys) * len(self.locales)

    @property
    def completion(self) -> float:
        """Share of translated cells, in percent."""
        if not self.total_cells:
            return 100.0
        return round((self.total_cells - self.missing_count) / self.total_cells * 100, 1)

    def missing_by_locale(self) -> Dict[str, List[str]]:
        """Keys with an empty cell, per locale (locales with none omitted)."""
        missing: Dict[str, List[str]] = {}
        for locale in self.locales:
            keys = [key for key, row in zip(self.keys, self.rows) if not row.get(locale)]
            if keys:
                missing[locale] = keys
        return missing


def detect_locales(locales_dir: Path) -> List[str]:
    """Locale names of every ``*.json`` file in ``locales_dir``, sorted."""
    if not locales_dir.is_dir():
        return []
    return sorted(p.stem for p in locales_dir.iterdir() if p.is_file() and p.suffix == '.json')


def order_locales(locales: Sequence[str], order: Optional[Sequence[str]]) -> List[str]:
    """
    Put locales named in ``order`` first, in that order.

    Locales not in ``order`` follow in their original order; names in
    ``order`` that are not in ``locales`` are ignored.

    Example:
        >>> order_locales(['de', 'en', 'zh'], ['zh', 'fr', 'en'])
        ['zh', 'en', 'de']
    """
    if not order:
        return list(locales)

    available = set(locales)
    ordered: List[str] = []
    for locale in order:
        if locale in available and locale not in ordered:
            ordered.append(locale)

    rest = [locale for locale in locales if locale not in ordered]
    return ordered + rest


def read_locale_json(locales_dir: Path, locale: str, events: EventSink) -> FlatLocale:
    """
    Load ``<locales_dir>/<locale>.json`` and flatten it.

    A missing or unparsable file yields ``{}`` and an event; the export
    continues with an empty column for that locale.
    """
    file_path = locales_dir / f"{locale}.json"
    if not file_path.exists():
        events.warning(f"Locale file not found: {file_path}, the column will be empty",
                       locale=locale, path=str(file_path))
        return {}

    try:
        data = json.loads(file_path.read_text(encoding='utf-8'))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        events.error(f"Failed to parse JSON: {file_path} ({e})", locale=locale, path=str(file_path))
        return {}

    if not isinstance(data, (dict, list)):
        events.error(f"Failed to parse JSON: {file_path} (top level must be an object or array)",
                     locale=locale, path=str(file_path))
        return {}

    return clean_illegal_characters(flatten_object(data), locale, events)


def clean_illegal_characters(flat: FlatLocale, locale: str, events: EventSink) -> FlatLocale:
    """
    Drop control characters that a worksheet cannot store.

    Each affected key is reported as a warning; keys and values are
    cleaned alike.
    """
    cleaned: FlatLocale = {}
    for key, value in flat.items():
        if has_illegal_characters(key) or has_illegal_characters(value):
            events.warning(f"Removed control characters from {locale}: {key!r}", locale=locale, key=key)
            key = strip_illegal_characters(key)
            value = strip_illegal_characters(value)
        cleaned[key] = value
    return cleaned


def load_existing_snapshot(excel_path: Path, key_column: str, events: EventSink) -> Snapshot:
    """Read the workbook from a previous export; ``{}`` if absent or unreadable."""
    if not excel_path.exists():
        events.info(f"No existing Excel at {excel_path}, starting fresh", path=str(excel_path))
        return {}

    try:
        return read_existing_snapshot(excel_path.read_bytes(), key_column)
    except Exception as e:  # corrupt workbooks fail inside openpyxl/zipfile
        events.warning(f"Could not read existing Excel {excel_path}, it will be regenerated ({e})",
                       path=str(excel_path))
        return {}


def collect_keys(locale_data: Mapping[str, FlatLocale], locales: Sequence[str]) -> List[str]:
    """
    Master key order: the primary locale's keys first, then keys that only
    later locales have, in first-seen order.
    """
    ordered: List[str] = []
    seen = set()
    for locale in locales:
        for key in locale_data.get(locale, {}):
            if key not in seen:
                ordered.append(key)
                seen.add(key)
    return ordered


def build_rows(
    keys: Sequence[str],
    locales: Sequence[str],
    locale_data: Mapping[str, FlatLocale],
    existing: Mapping[str, Mapping[str, str]],
    merge_mode: str,
    key_column: str,
) -> Tuple[List[Dict[str, str]], int, int]:
    """
    Build one row per key.

    In merge mode a value from the JSON files wins, then the value from
    the existing sheet, then "". In overwrite mode only JSON values count.

    Returns:
        (rows, new_key_count, missing_count)
    """
    merging = merge_mode == MERGE_MODE_MERGE
    rows: List[Dict[str, str]] = []
    new_key_count = 0
    missing_count = 0

    for key in keys:
        row: Dict[str, str] = {key_column: key}
        if merging and key not in existing:
            new_key_count += 1

        for locale in locales:
            json_value = locale_data.get(locale, {}).get(key)
            if merging:
                excel_value = existing.get(key, {}).get(locale, "")
                value = json_value if json_value is not None else excel_value
            else:
                value = json_value if json_value is not None else ""

            row[locale] = value
            if not value:
                missing_count += 1

        rows.append(row)

    return rows, new_key_count, missing_count


def build_label_row(locales: Sequence[str], labels: Mapping[str, str], key_column: str) -> Dict[str, str]:
    """Label row: the marker in the key column, a display name per locale."""
    row = {key_column: LABEL_ROW_MARKER}
    for locale in locales:
        row[locale] = labels.get(locale) or locale
    return row


class JsonToExcelExporter:
    """
    Export manager.

    Flattens every locale JSON file into one column of a translation
    workbook, optionally merging with the workbook already on disk so
    existing translations and removed keys survive.
    """

    def __init__(
        self,
        options: Optional[ExportConfig] = None,
        root_dir: Optional[Union[str, Path]] = None,
        events: Optional[EventSink] = None
    ):
        """
        Args:
            options: Export settings (defaults if omitted)
            root_dir: Base for relative paths (default: cwd)
            events: Event sink (a fresh one if omitted)
        """
        self.options = options or ExportConfig()
        self.root_dir = Path(root_dir) if root_dir is not None else Path.cwd()
        self.events = events or EventSink()

    @property
    def locales_dir(self) -> Path:
        return (self.root_dir / self.options.locales_dir).resolve()

    @property
    def excel_path(self) -> Path:
        return (self.root_dir / self.options.excel_path).resolve()

    def resolve_locales(self) -> List[str]:
        """Explicit locale list or discovered files, then reordered."""
        opts = self.options
        if opts.locales is not None:
            locales = list(opts.locales)
        else:
            locales = detect_locales(self.locales_dir)
        return order_locales(locales, opts.locale_order)

    def run(self) -> ExportResult:
        """
        Run the export and write the workbook.

        Returns:
            ExportResult; ``written`` is False when no locale was found
        """
        opts = self.options
        events = self.events
        result = ExportResult(excel_path=self.excel_path, merge_mode=opts.merge_mode)

        locales = self.resolve_locales()
        if not locales:
            events.warning(f"No .json files found in {self.locales_dir}, nothing to export",
                           path=str(self.locales_dir))
            return result

        result.locales = locales
        events.info(f"Detected locales: {', '.join(locales)}", locales=locales)

        locale_data = {locale: read_locale_json(self.locales_dir, locale, events) for locale in locales}
        keys = collect_keys(locale_data, locales)

        existing: Snapshot = {}
        if opts.merge_mode == MERGE_MODE_MERGE:
            existing = load_existing_snapshot(self.excel_path, opts.key_column, events)
            result.existing_key_count = len(existing)
            events.info(f"Merge mode: existing Excel has {len(existing)} keys", existing=len(existing))

            seen = set(keys)
            for key in existing:
                if key not in seen:
                    keys.append(key)
                    seen.add(key)

        rows, result.new_key_count, result.missing_count = build_rows(
            keys, locales, locale_data, existing, opts.merge_mode, opts.key_column
        )
        result.keys = keys
        result.rows = rows

        sheet_rows = list(rows)
        if opts.locale_labels:
            result.label_row = build_label_row(locales, opts.locale_labels, opts.key_column)
            sheet_rows.insert(0, result.label_row)

        buffer = write_sheet(sheet_rows, opts.key_column, locales, highlight_missing=opts.highlight_missing)

        if opts.backup:
            result.backup_path = self._create_backup(self.excel_path)

        self.excel_path.parent.mkdir(parents=True, exist_ok=True)
        self.excel_path.write_bytes(buffer)
        result.written = True

        events.info(f"Excel generated: {self.excel_path}", path=str(self.excel_path))
        events.info(
            f"Stats: {result.total_keys} keys, {result.new_key_count} new, "
            f"{result.missing_count} missing translations",
            total=result.total_keys, new=result.new_key_count, missing=result.missing_count,
        )
        return result

    def _create_backup(self, file_path: Path) -> Optional[Path]:
        """Copy the workbook aside before it is overwritten."""
        if not file_path.exists():
            return None

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup_path = file_path.parent / f"{file_path.stem}_backup_{timestamp}{file_path.suffix}"

        try:
            shutil.copy2(file_path, backup_path)
        except OSError as e:
            self.events.warning(f"Backup failed for {file_path}: {e}", path=str(file_path))
            return None

        self.events.info(f"Backup created: {backup_path}", path=str(backup_path))
        return backup_path


def json_to_excel(
    options: Optional[ExportConfig] = None,
    root_dir: Optional[Union[str, Path]] = None,
    events: Optional[EventSink] = None
) -> ExportResult:
    """Export JSON locale files to Excel (see ``JsonToExcelExporter``)."""
    return JsonToExcelExporter(options, root_dir=root_dir, events=events).run()
