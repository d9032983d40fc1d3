"""Console summaries for export and import runs."""

from ..features.exporter import ExportResult
from ..features.importer import ImportResult
from ..utils.colors import Colors


class ConsoleReporter:
    """Print run summaries to the terminal."""

    @staticmethod
    def print_export_summary(result: ExportResult, verbose: bool = False):
        """Print the outcome of an export."""
        print(f"\n{Colors.bold('📊 JSON → EXCEL')} {Colors.dim(f'[{result.merge_mode}]')}")
        print("=" * 60)

        if not result.written:
            print(f"{Colors.warning('⚠️')}  Nothing exported")
            return

        print(f"Excel:    {result.excel_path}")
        print(f"Locales:  {', '.join(result.locales)}")
        print(f"Keys:     {result.total_keys}")
        if result.merge_mode == 'merge':
            print(f"New keys: {Colors.success(str(result.new_key_count))}"
                  f" (existing: {result.existing_key_count})")

        missing = str(result.missing_count)
        print(f"Missing:  {Colors.warning(missing) if result.missing_count else Colors.success(missing)}"
              f" ({result.completion}% complete)")

        if result.backup_path:
            print(f"Backup:   {result.backup_path}")

        if verbose and result.missing_count:
            print(f"\n{Colors.bold('📋 MISSING BY LOCALE')}")
            print("-" * 40)
            for locale, keys in result.missing_by_locale().items():
                print(f"  {Colors.warning('⚠')} {locale}: {len(keys)}")
                for key in keys[:10]:
                    print(f"      {Colors.dim(key)}")
                if len(keys) > 10:
                    print(f"      ... and {len(keys) - 10} more")

        print("=" * 60)
        print(f"{Colors.success('✅ Export completed!')}")

    @staticmethod
    def print_import_summary(result: ImportResult, verbose: bool = False):
        """Print the outcome of an import."""
        print(f"\n{Colors.bold('📥 EXCEL → JSON')}")
        print("=" * 60)
        print(f"Excel:  {result.excel_path} [{result.sheet_name}]")
        print(f"Rows:   {result.row_count}")

        if not result.files:
            print(f"{Colors.warning('⚠️')}  No locale files generated")
            return

        for generated in result.files:
            line = f"  {Colors.success('✓')} {Colors.bold(generated.locale)}"
            if verbose:
                line += f" → {generated.file_path}"
            print(line)

        print("=" * 60)
        print(f"{Colors.success(f'✅ {result.total_files} locale files generated!')}")
