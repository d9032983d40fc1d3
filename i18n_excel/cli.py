"""Command-line interface for i18n-excel."""

import sys
import argparse
from pathlib import Path

from .__version__ import __version__
from .core.errors import I18nExcelError
from .utils.colors import Colors
from .utils.config import CONFIG_FILE_NAME, Config, ConfigValidationError, create_default_config
from .utils.events import EventSink
from .utils.logging import configure_logging
from .utils.validators import parse_sheet_selector
from .features.exporter import JsonToExcelExporter
from .features.importer import ExcelToJsonImporter
from .features.watcher import ExcelWatcher
from .reports.console_reporter import ConsoleReporter
from .reports.json_reporter import JSONReporter


def load_and_validate_config(config_path=None, apply=None, validate: bool = True, verbose: bool = False) -> Config:
    """
    Load configuration, apply command-line overrides and validate it.

    Args:
        config_path: Explicit config file (default: ./.i18n-excel.yml if present)
        apply: Optional callable that edits the loaded Config in place
        validate: Whether to validate the config
        verbose: Whether to print warnings

    Returns:
        Loaded Config object

    Raises:
        ConfigValidationError: If validation fails with errors
    """
    config = Config.from_file(Path(config_path) if config_path else None)
    if apply is not None:
        apply(config)

    if validate:
        errors, warnings = config.validate()

        if verbose and warnings:
            for warning in warnings:
                print(f"{Colors.warning('⚠️')}  Config warning: {warning}")

        if errors:
            print(f"{Colors.error('❌')} Configuration errors:")
            for error in errors:
                print(f"   • {error}")
            raise ConfigValidationError(errors)

    return config


def _setup_logging(args):
    configure_logging(
        verbose=getattr(args, 'verbose', False),
        quiet=getattr(args, 'quiet', False),
        log_file=Path(args.log_file) if getattr(args, 'log_file', None) else None,
    )


def apply_export_overrides(config: Config, args) -> None:
    """Copy command-line flags over the export section."""
    opts = config.export_options
    if args.locales_dir:
        opts.locales_dir = args.locales_dir
    if args.excel:
        opts.excel_path = args.excel
    if args.key_column:
        opts.key_column = args.key_column
    if args.locales:
        opts.locales = [code.strip() for code in args.locales.split(',') if code.strip()]
    if args.order:
        opts.locale_order = [code.strip() for code in args.order.split(',') if code.strip()]
    if args.mode:
        opts.merge_mode = args.mode
    if args.no_highlight:
        opts.highlight_missing = False
    if args.backup:
        opts.backup = True


def apply_import_overrides(config: Config, args) -> None:
    """Copy command-line flags over the import section."""
    opts = config.import_options
    if args.excel:
        opts.excel_path = args.excel
    if args.output_dir:
        opts.output_dir = args.output_dir
    if args.sheet is not None:
        opts.sheet = parse_sheet_selector(args.sheet)
    if args.key_column:
        opts.key_column = args.key_column
    if args.flat_keys:
        opts.nested_keys = False
    if args.ignore_rows is not None:
        opts.ignore_rows = args.ignore_rows
    if args.strict:
        opts.on_conflict = 'strict'
    for mapping in args.map or []:
        alternate, _, canonical = mapping.partition('=')
        if alternate and canonical:
            opts.locale_map[alternate.strip()] = canonical.strip()


def cmd_init(args):
    """Initialize configuration file."""
    config_path = Path.cwd() / CONFIG_FILE_NAME

    if config_path.exists() and not args.force:
        print(f"{Colors.error('❌')} Config already exists: {config_path}")
        print(f"   Use --force to overwrite")
        return 1

    config = create_default_config(args.locales_dir)
    config.save(config_path)

    print(f"{Colors.success('✅')} Created: {config_path}")
    print(f"\n{Colors.bold('Next steps:')}")
    print(f"1. Edit {CONFIG_FILE_NAME} to configure locales and labels")
    print(f"2. Run: i18n-excel export")

    return 0


def cmd_export(args):
    """Export JSON locale files to Excel."""
    _setup_logging(args)
    try:
        config = load_and_validate_config(
            args.config, apply=lambda c: apply_export_overrides(c, args), verbose=args.verbose
        )
    except ConfigValidationError:
        return 1

    events = EventSink()
    exporter = JsonToExcelExporter(config.export_options, events=events)
    result = exporter.run()

    if not args.quiet:
        ConsoleReporter.print_export_summary(result, verbose=args.verbose)

    if args.report:
        report_path = JSONReporter.generate(result, Path(args.report), events=events.events)
        print(f"{Colors.success('✓')} Report exported to: {report_path}")

    if not result.written:
        return 1
    if args.fail_on_missing and result.missing_count:
        print(f"\n{Colors.error('❌')} {result.missing_count} translations missing")
        return 1

    return 0


def cmd_import(args):
    """Import Excel into JSON locale files."""
    _setup_logging(args)
    try:
        config = load_and_validate_config(
            args.config, apply=lambda c: apply_import_overrides(c, args), verbose=args.verbose
        )
    except ConfigValidationError:
        return 1

    importer = ExcelToJsonImporter(config.import_options)

    try:
        result = importer.run()
    except I18nExcelError as e:
        print(f"{Colors.error('❌')} {e}")
        return 1

    if not args.quiet:
        ConsoleReporter.print_import_summary(result, verbose=args.verbose)

    return 0


def cmd_watch(args):
    """Regenerate JSON locale files whenever the workbook changes."""
    _setup_logging(args)

    def apply(config):
        apply_import_overrides(config, args)
        if args.debounce is not None:
            config.watch.debounce_seconds = args.debounce

    try:
        config = load_and_validate_config(args.config, apply=apply, verbose=args.verbose)
    except ConfigValidationError:
        return 1

    importer = ExcelToJsonImporter(config.import_options)
    watcher = ExcelWatcher(
        importer,
        debounce_seconds=config.watch.debounce_seconds,
        on_reload=lambda result: print(
            f"{Colors.success('🔄')} Reloaded: {', '.join(result.locales) or 'no locales'}"
        ),
    )

    print(f"{Colors.info('👀')} Watching {importer.excel_path} (Ctrl+C to stop)")
    watcher.run_forever()
    return 0


def _add_common_arguments(parser):
    parser.add_argument('--config', metavar='PATH', help=f'Config file (default: ./{CONFIG_FILE_NAME})')
    parser.add_argument('--verbose', '-v', action='store_true', help='Show detailed output')
    parser.add_argument('--quiet', '-q', action='store_true', help='Only warnings and errors')
    parser.add_argument('--log-file', metavar='PATH', help='Also write a log file')


def _add_import_arguments(parser):
    parser.add_argument('--excel', '-e', metavar='PATH', help='Excel file to read')
    parser.add_argument('--output-dir', '-o', metavar='DIR', help='Directory for generated JSON files')
    parser.add_argument('--sheet', '-s', metavar='NAME|INDEX', help='Sheet name or zero-based index')
    parser.add_argument('--key-column', '-k', metavar='NAME', help='Key column title')
    parser.add_argument('--flat-keys', action='store_true', help='Do not split dotted keys into nested objects')
    parser.add_argument('--ignore-rows', type=int, metavar='N',
                        help='Leading non-data rows, header included (default: 1)')
    parser.add_argument('--map', action='append', metavar='ALT=LOCALE',
                        help='Fall back to column ALT when LOCALE is empty (repeatable)')
    parser.add_argument('--strict', action='store_true', help='Fail on keys with conflicting shapes')


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog='i18n-excel',
        description='Keep JSON locale files and a translation spreadsheet in sync',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # init command
    init_parser = subparsers.add_parser('init', help='Initialize configuration file')
    init_parser.add_argument('--locales-dir', default='src/locales', help='Locale JSON directory')
    init_parser.add_argument('--force', action='store_true', help='Overwrite existing config')

    # export command
    export_parser = subparsers.add_parser('export', help='Export JSON locale files to Excel')
    _add_common_arguments(export_parser)
    export_parser.add_argument('--locales-dir', '-d', metavar='DIR', help='Locale JSON directory')
    export_parser.add_argument('--excel', '-e', metavar='PATH', help='Excel file to write')
    export_parser.add_argument('--key-column', '-k', metavar='NAME', help='Key column title')
    export_parser.add_argument('--locales', '-l', metavar='CODES', help='Comma-separated locales (default: all files)')
    export_parser.add_argument('--order', metavar='CODES', help='Comma-separated column order')
    export_parser.add_argument('--mode', '-m', choices=['overwrite', 'merge'], help='Merge mode')
    export_parser.add_argument('--no-highlight', action='store_true', help='Leave missing cells empty')
    export_parser.add_argument('--backup', action='store_true', help='Back up the existing Excel first')
    export_parser.add_argument('--report', metavar='PATH', help='Export a JSON report')
    export_parser.add_argument('--fail-on-missing', action='store_true',
                               help='Exit with error if translations are missing')

    # import command
    import_parser = subparsers.add_parser('import', help='Import Excel into JSON locale files')
    _add_common_arguments(import_parser)
    _add_import_arguments(import_parser)

    # watch command
    watch_parser = subparsers.add_parser('watch', help='Re-import whenever the Excel file changes')
    _add_common_arguments(watch_parser)
    _add_import_arguments(watch_parser)
    watch_parser.add_argument('--debounce', type=float, metavar='SECONDS', help='Quiet period before re-import')

    args = parser.parse_args()

    if args.command == 'init':
        return cmd_init(args)
    elif args.command == 'export':
        return cmd_export(args)
    elif args.command == 'import':
        return cmd_import(args)
    elif args.command == 'watch':
        return cmd_watch(args)
    else:
        parser.print_help()
        return 0


if __name__ == '__main__':
    sys.exit(main())
