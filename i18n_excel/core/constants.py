"""Fixed markers shared by the sheet reader and writer."""

# Key cell of the optional locale label row (second row of the sheet).
LABEL_ROW_MARKER = "语言"

# Written into empty cells when missing translations are highlighted.
MISSING_PLACEHOLDER = "【待翻译】"

DEFAULT_KEY_COLUMN = "key"
DEFAULT_SHEET_TITLE = "translations"
DEFAULT_LOCALES_DIR = "src/locales"
DEFAULT_EXCEL_PATH = "src/locales/translations.xlsx"

KEY_COLUMN_WIDTH = 35
LOCALE_COLUMN_WIDTH = 20

MERGE_MODE_MERGE = "merge"
MERGE_MODE_OVERWRITE = "overwrite"
MERGE_MODES = (MERGE_MODE_OVERWRITE, MERGE_MODE_MERGE)
