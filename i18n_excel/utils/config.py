"""Configuration management for i18n-excel."""

import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union
from dataclasses import asdict, dataclass, field

from ..core.constants import (
    DEFAULT_EXCEL_PATH,
    DEFAULT_KEY_COLUMN,
    DEFAULT_LOCALES_DIR,
    MERGE_MODE_MERGE,
    MERGE_MODES,
)
from ..core.flatten import ShapeConflictPolicy
from .validators import is_valid_locale_code

CONFIG_FILE_NAME = '.i18n-excel.yml'


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__(f"Configuration validation failed: {'; '.join(errors)}")


class ConfigValidationWarning:
    """Represents a configuration warning (non-fatal)."""

    def __init__(self, message: str):
        self.message = message

    def __str__(self):
        return self.message


@dataclass
class ExportConfig:
    """JSON locale files -> Excel."""
    locales_dir: str = DEFAULT_LOCALES_DIR
    excel_path: str = DEFAULT_EXCEL_PATH
    key_column: str = DEFAULT_KEY_COLUMN
    # None: every *.json file in locales_dir
    locales: Optional[List[str]] = None
    merge_mode: str = MERGE_MODE_MERGE  # overwrite | merge
    highlight_missing: bool = True
    # Listed locales first, the rest in discovery order
    locale_order: List[str] = field(default_factory=list)
    # Adds a label row under the header when non-empty
    locale_labels: Dict[str, str] = field(default_factory=dict)
    backup: bool = False


@dataclass
class ImportConfig:
    """Excel -> JSON locale files."""
    excel_path: str = DEFAULT_EXCEL_PATH
    output_dir: str = DEFAULT_LOCALES_DIR
    sheet: Union[int, str] = 0
    key_column: str = DEFAULT_KEY_COLUMN
    nested_keys: bool = True
    # Leading rows that are not data, header row included
    ignore_rows: int = 1
    # alternate column -> canonical locale, e.g. {"en_old": "en"}
    locale_map: Dict[str, str] = field(default_factory=dict)
    on_conflict: str = ShapeConflictPolicy.OVERWRITE.value  # overwrite | strict

    @property
    def conflict_policy(self) -> ShapeConflictPolicy:
        return ShapeConflictPolicy(self.on_conflict)


@dataclass
class WatchConfig:
    """Settings for the watch command."""
    debounce_seconds: float = 0.5


@dataclass
class Config:
    """Main configuration class."""
    export_options: ExportConfig = field(default_factory=ExportConfig)
    import_options: ImportConfig = field(default_factory=ImportConfig)
    watch: WatchConfig = field(default_factory=WatchConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        return cls(
            export_options=ExportConfig(**(data.get('export') or {})),
            import_options=ImportConfig(**(data.get('import') or {})),
            watch=WatchConfig(**(data.get('watch') or {})),
        )

    @classmethod
    def from_file(cls, config_path: Optional[Path] = None) -> 'Config':
        """Load configuration from YAML file."""
        if config_path is None:
            config_path = Path.cwd() / CONFIG_FILE_NAME

            if not config_path.exists():
                return cls()

        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary (YAML section names)."""
        return {
            'export': asdict(self.export_options),
            'import': asdict(self.import_options),
            'watch': asdict(self.watch),
        }

    def save(self, config_path: Optional[Path] = None):
        """Save configuration to YAML file."""
        if config_path is None:
            config_path = Path.cwd() / CONFIG_FILE_NAME

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    def validate(self, raise_on_error: bool = False) -> Tuple[List[str], List[ConfigValidationWarning]]:
        """
        Validate configuration and return errors and warnings.

        Args:
            raise_on_error: If True, raise ConfigValidationError on validation errors

        Returns:
            Tuple of (errors, warnings) lists
        """
        errors: List[str] = []
        warnings: List[ConfigValidationWarning] = []

        export = self.export_options
        imp = self.import_options

        if export.merge_mode not in MERGE_MODES:
            errors.append(
                f"Invalid export.merge_mode '{export.merge_mode}'. "
                f"Valid options: {', '.join(MERGE_MODES)}"
            )

        if not export.key_column:
            errors.append("export.key_column cannot be empty")
        if not imp.key_column:
            errors.append("import.key_column cannot be empty")

        if not Path(export.locales_dir).exists():
            warnings.append(ConfigValidationWarning(
                f"Locales directory does not exist: {export.locales_dir}"
            ))

        for code in (export.locales or []) + list(export.locale_order):
            if not is_valid_locale_code(code):
                warnings.append(ConfigValidationWarning(
                    f"Unusual locale code: '{code}'"
                ))

        if export.locales:
            unknown_labels = set(export.locale_labels) - set(export.locales)
            if unknown_labels:
                warnings.append(ConfigValidationWarning(
                    f"Labels given for locales that are not exported: {', '.join(sorted(unknown_labels))}"
                ))

        if export.locale_labels and isinstance(imp.ignore_rows, int) and imp.ignore_rows < 2:
            warnings.append(ConfigValidationWarning(
                "export.locale_labels adds a label row, but import.ignore_rows < 2 "
                "imports it as translations"
            ))

        if isinstance(imp.sheet, bool) or not isinstance(imp.sheet, (int, str)):
            errors.append(f"import.sheet must be a sheet name or index, got {imp.sheet!r}")
        elif isinstance(imp.sheet, int) and imp.sheet < 0:
            errors.append(f"import.sheet index must be >= 0, got {imp.sheet}")

        if not isinstance(imp.ignore_rows, int) or imp.ignore_rows < 0:
            errors.append(f"import.ignore_rows must be a non-negative integer, got {imp.ignore_rows!r}")

        valid_policies = [p.value for p in ShapeConflictPolicy]
        if imp.on_conflict not in valid_policies:
            errors.append(
                f"Invalid import.on_conflict '{imp.on_conflict}'. "
                f"Valid options: {', '.join(valid_policies)}"
            )

        for alternate, canonical in imp.locale_map.items():
            if alternate == canonical:
                errors.append(f"import.locale_map maps '{alternate}' onto itself")
            if alternate == imp.key_column or canonical == imp.key_column:
                errors.append(f"import.locale_map cannot use the key column '{imp.key_column}'")

        if self.watch.debounce_seconds < 0:
            errors.append(f"watch.debounce_seconds must be >= 0, got {self.watch.debounce_seconds}")

        if raise_on_error and errors:
            raise ConfigValidationError(errors)

        return errors, warnings


def create_default_config(locales_dir: str = DEFAULT_LOCALES_DIR) -> Config:
    """
    Create the configuration written by ``i18n-excel init``.

    Locale files already present in ``locales_dir`` seed the column order
    and the label row so the generated file is a useful starting point;
    import then skips that label row.
    """
    config = Config()
    config.export_options.locales_dir = locales_dir
    config.import_options.output_dir = locales_dir

    directory = Path(locales_dir)
    if directory.is_dir():
        found = sorted(p.stem for p in directory.glob('*.json') if p.is_file())
        config.export_options.locale_order = found
        config.export_options.locale_labels = {code: code for code in found}
        if found:
            # header row plus the label row
            config.import_options.ignore_rows = 2

    return config
