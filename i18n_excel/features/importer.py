"""Excel -> JSON locale files import."""

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from ..core.errors import ExcelNotFoundError, NoLocaleColumnsError
from ..core.flatten import ShapeConflictPolicy, set_nested_key, set_top_level_key
from ..core.sheet_reader import SheetData, read_sheet
from ..utils.config import ImportConfig
from ..utils.events import EventSink

LocaleTree = Dict[str, Any]


@dataclass
class GeneratedFile:
    """One locale file written by an import."""
    locale: str
    file_path: Path
    data: LocaleTree


@dataclass
class ImportResult:
    """Outcome of one import run."""
    excel_path: Path
    sheet_name: str = ""
    locales: List[str] = field(default_factory=list)
    row_count: int = 0
    files: List[GeneratedFile] = field(default_factory=list)

    @property
    def total_files(self) -> int:
        return len(self.files)


def build_fallbacks(locale_map: Mapping[str, str]) -> Dict[str, List[str]]:
    """
    Invert ``{alternate: canonical}`` into ``{canonical: [alternates]}``.

    Alternates keep their declaration order.
    """
    fallbacks: Dict[str, List[str]] = {}
    for alternate, canonical in locale_map.items():
        fallbacks.setdefault(canonical, []).append(alternate)
    return fallbacks


def detect_locale_columns(headers: List[str], key_column: str, locale_map: Mapping[str, str]) -> List[str]:
    """Every header except the key column and remapped (alternate) columns."""
    return [h for h in headers if h != key_column and h not in locale_map]


def parse_sheet(
    sheet: SheetData,
    key_column: str = "key",
    nested_keys: bool = True,
    ignore_rows: int = 1,
    locale_map: Optional[Mapping[str, str]] = None,
    policy: ShapeConflictPolicy = ShapeConflictPolicy.OVERWRITE,
    events: Optional[EventSink] = None,
) -> Dict[str, LocaleTree]:
    """
    Turn sheet rows into one nested tree per locale column.

    Args:
        sheet: Rows from ``read_sheet``
        key_column: Header title of the key column
        nested_keys: Split dotted keys into nested objects/arrays
        ignore_rows: Leading non-data rows, header row included
        locale_map: ``{alternate: canonical}``; an empty canonical cell
            falls back to the alternate column, which gets no output of
            its own
        policy: Key shape conflict policy
        events: Event sink

    Returns:
        ``{locale: tree}`` in header order

    Raises:
        NoLocaleColumnsError: If no locale column remains
        KeyShapeConflictError: On conflicting keys under ``STRICT``
    """
    events = events or EventSink()
    locale_map = dict(locale_map or {})

    if sheet.is_empty:
        events.warning("The sheet has no data rows, no locale files generated", sheet=sheet.name)
        return {}

    locales = detect_locale_columns(sheet.headers, key_column, locale_map)
    if not locales:
        raise NoLocaleColumnsError(key_column)

    fallbacks = build_fallbacks(locale_map)
    for canonical, alternates in fallbacks.items():
        if canonical not in locales:
            events.warning(
                f"locale_map target '{canonical}' has no column; "
                f"{', '.join(alternates)} will not be imported",
                locale=canonical,
            )

    result: Dict[str, LocaleTree] = {locale: {} for locale in locales}

    for row in sheet.rows[max(ignore_rows - 1, 0):]:
        key = row.get(key_column, "").strip()
        if not key:
            continue

        for locale in locales:
            value = row.get(locale, "")
            if not value:
                for alternate in fallbacks.get(locale, ()):
                    value = row.get(alternate, "")
                    if value:
                        break

            tree = result[locale]
            if nested_keys and '.' in key:
                set_nested_key(tree, key, value, policy)
            else:
                set_top_level_key(tree, key, value, policy)

    return result


def write_locale_files(
    translations: Mapping[str, LocaleTree],
    output_dir: Path,
    events: Optional[EventSink] = None
) -> List[GeneratedFile]:
    """Write ``<output_dir>/<locale>.json`` for every locale."""
    events = events or EventSink()
    output_dir.mkdir(parents=True, exist_ok=True)

    generated: List[GeneratedFile] = []
    for locale, data in translations.items():
        file_path = output_dir / f"{locale}.json"
        file_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding='utf-8')
        generated.append(GeneratedFile(locale=locale, file_path=file_path, data=data))
        events.info(f"Generated: {file_path}", locale=locale, path=str(file_path))

    return generated


class ExcelToJsonImporter:
    """
    Import manager.

    Reads the translation workbook and writes one JSON file per locale
    column.
    """

    def __init__(
        self,
        options: Optional[ImportConfig] = None,
        root_dir: Optional[Union[str, Path]] = None,
        events: Optional[EventSink] = None,
        on_generated: Optional[Callable[[List[GeneratedFile]], None]] = None
    ):
        """
        Args:
            options: Import settings (defaults if omitted)
            root_dir: Base for relative paths (default: cwd)
            events: Event sink (a fresh one if omitted)
            on_generated: Called with the written files after each run
        """
        self.options = options or ImportConfig()
        self.root_dir = Path(root_dir) if root_dir is not None else Path.cwd()
        self.events = events or EventSink()
        self.on_generated = on_generated

    @property
    def excel_path(self) -> Path:
        return (self.root_dir / self.options.excel_path).resolve()

    @property
    def output_dir(self) -> Path:
        return (self.root_dir / self.options.output_dir).resolve()

    def parse(self) -> Dict[str, LocaleTree]:
        """
        Read and parse the workbook without writing anything.

        Raises:
            ExcelNotFoundError: If the workbook does not exist
            SheetNotFoundError: If the configured sheet does not exist
            WorkbookReadError: If the file is not a readable workbook
            NoLocaleColumnsError: If no locale column is found
        """
        return self._parse()[1]

    def _parse(self) -> Tuple[SheetData, Dict[str, LocaleTree]]:
        opts = self.options
        if not self.excel_path.exists():
            raise ExcelNotFoundError(self.excel_path)

        self.events.info(f"Reading Excel: {self.excel_path}", path=str(self.excel_path))
        sheet = read_sheet(self.excel_path.read_bytes(), opts.sheet)
        translations = parse_sheet(
            sheet,
            key_column=opts.key_column,
            nested_keys=opts.nested_keys,
            ignore_rows=opts.ignore_rows,
            locale_map=opts.locale_map,
            policy=opts.conflict_policy,
            events=self.events,
        )
        return sheet, translations

    def run(self) -> ImportResult:
        """Parse the workbook, write locale files and fire ``on_generated``."""
        sheet, translations = self._parse()

        result = ImportResult(
            excel_path=self.excel_path,
            sheet_name=sheet.name,
            locales=list(translations),
            row_count=len(sheet.rows),
        )
        result.files = write_locale_files(translations, self.output_dir, self.events)

        if self.on_generated is not None:
            self.on_generated(result.files)

        return result


def parse_excel(
    excel_path: Union[str, Path],
    options: Optional[ImportConfig] = None,
    events: Optional[EventSink] = None
) -> Dict[str, LocaleTree]:
    """Parse a workbook into ``{locale: tree}`` (see ``ExcelToJsonImporter.parse``)."""
    opts = replace(options or ImportConfig(), excel_path=str(excel_path))
    return ExcelToJsonImporter(opts, events=events).parse()


def excel_to_json(
    options: Optional[ImportConfig] = None,
    root_dir: Optional[Union[str, Path]] = None,
    on_generated: Optional[Callable[[List[GeneratedFile]], None]] = None,
    events: Optional[EventSink] = None
) -> ImportResult:
    """Import a workbook into JSON locale files (see ``ExcelToJsonImporter``)."""
    return ExcelToJsonImporter(options, root_dir=root_dir, events=events, on_generated=on_generated).run()
