"""Version information for i18n-excel-sync."""

__version__ = "1.2.0"
__author__ = "i18n-excel contributors"
__description__ = "Keep JSON locale files and a translation spreadsheet in sync"

# Changelog:
# 1.2.0 - Watch mode
#       - New 'watch' command: regenerate JSON whenever the workbook changes
#       - Debounced change handling, one import at a time
#       - on_reload callback for dev servers
#
# 1.1.0 - Import improvements
#       - Array reconstruction for keys like "list.0", "list.1"
#       - locale_map: fall back to an alternate column (e.g. en_old -> en)
#       - on_conflict: strict mode rejects keys with conflicting shapes
#       - Optional label row under the header (locale_labels)
#
# 1.0.0 - Initial release
#       - export: JSON locale files -> Excel (overwrite / merge)
#       - import: Excel -> JSON locale files
#       - deep_merge utility
