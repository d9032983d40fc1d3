"""JSON report generator."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..__version__ import __version__
from ..features.exporter import ExportResult
from ..utils.events import SyncEvent


class JSONReporter:
    """Generate JSON reports for export runs."""

    @staticmethod
    def build(result: ExportResult, events: Optional[List[SyncEvent]] = None) -> Dict[str, Any]:
        """Report structure for an export run."""
        return {
            'metadata': {
                'generated_at': datetime.now().isoformat(),
                'version': __version__,
                'merge_mode': result.merge_mode,
            },
            'excel_path': str(result.excel_path),
            'written': result.written,
            'locales': result.locales,
            'summary': {
                'total_keys': result.total_keys,
                'new_keys': result.new_key_count,
                'existing_keys': result.existing_key_count,
                'missing_translations': result.missing_count,
                'completion_percent': result.completion,
            },
            'missing': result.missing_by_locale(),
            'backup': str(result.backup_path) if result.backup_path else None,
            'events': [
                {'level': e.level_name, 'message': e.message}
                for e in (events or [])
            ],
        }

    @staticmethod
    def generate(
        result: ExportResult,
        output_path: Path,
        events: Optional[List[SyncEvent]] = None,
        pretty: bool = True
    ) -> Path:
        """
        Write the export report.

        Args:
            result: Export result
            output_path: Report file
            events: Events recorded during the run
            pretty: Indent the JSON

        Returns:
            Path to the report
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)
        report = JSONReporter.build(result, events)

        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(report, f, indent=2 if pretty else None, ensure_ascii=False)

        return output_path
