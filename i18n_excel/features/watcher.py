"""Regenerate locale files whenever the translation workbook changes."""

import threading
import time
from pathlib import Path
from typing import Callable, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from ..core.errors import I18nExcelError
from ..utils.logging import get_logger
from .importer import ExcelToJsonImporter, ImportResult

logger = get_logger('watcher')


class _WorkbookEventHandler(FileSystemEventHandler):
    """Forwards events that touch the watched workbook."""

    def __init__(self, excel_path: Path, on_change: Callable[[], None]):
        super().__init__()
        self.excel_path = excel_path
        self.on_change = on_change

    def _matches(self, path) -> bool:
        if not path:
            return False
        if isinstance(path, bytes):
            path = path.decode()
        return Path(path).resolve() == self.excel_path

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in ('modified', 'created', 'moved', 'closed'):
            return
        # Excel and LibreOffice save through a temp file that is moved into place
        if self._matches(event.src_path) or self._matches(getattr(event, 'dest_path', None)):
            self.on_change()


class ExcelWatcher:
    """
    Keeps JSON locale files in step with the workbook.

    Runs one import on ``start()``, then re-imports after every change to
    the workbook. Bursts of change events within ``debounce_seconds`` are
    collapsed into one import, and imports never overlap. Import errors
    are logged and the watcher keeps running.

    Usage:
        with ExcelWatcher(importer, on_reload=lambda r: print(r.locales)):
            ...

        watcher = ExcelWatcher(importer)
        watcher.run_forever()
    """

    def __init__(
        self,
        importer: ExcelToJsonImporter,
        debounce_seconds: float = 0.5,
        on_reload: Optional[Callable[[ImportResult], None]] = None
    ):
        """
        Args:
            importer: Configured importer; its workbook is watched
            debounce_seconds: Quiet period before re-importing
            on_reload: Called with the result after each successful import
        """
        self.importer = importer
        self.debounce_seconds = debounce_seconds
        self.on_reload = on_reload
        self.run_count = 0

        self._observer: Optional[Observer] = None
        self._timer: Optional[threading.Timer] = None
        self._timer_lock = threading.Lock()
        self._run_lock = threading.Lock()

    @property
    def excel_path(self) -> Path:
        return self.importer.excel_path

    @property
    def is_running(self) -> bool:
        return self._observer is not None

    def regenerate(self) -> Optional[ImportResult]:
        """Import once; returns None if the import failed."""
        with self._run_lock:
            try:
                result = self.importer.run()
            except I18nExcelError as e:
                logger.error(f"Regeneration failed: {e}")
                return None
            except Exception as e:  # half-saved workbooks fail inside openpyxl/zipfile
                logger.error(f"Regeneration failed, could not read {self.excel_path}: {e}")
                return None

            self.run_count += 1
            if self.on_reload is not None:
                try:
                    self.on_reload(result)
                except Exception as e:  # runs on the timer thread
                    logger.error(f"on_reload callback failed: {e}")
            return result

    def notify_change(self) -> None:
        """Schedule a debounced import (called from the observer thread)."""
        with self._timer_lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.debounce_seconds, self._on_timer)
            self._timer.daemon = True
            self._timer.start()

    def _on_timer(self) -> None:
        with self._timer_lock:
            self._timer = None
        logger.info(f"Excel changed, regenerating: {self.excel_path}")
        self.regenerate()

    def start(self) -> None:
        """Generate once and start watching the workbook's directory."""
        if self.is_running:
            return

        self.regenerate()

        watch_dir = self.excel_path.parent
        watch_dir.mkdir(parents=True, exist_ok=True)

        handler = _WorkbookEventHandler(self.excel_path, self.notify_change)
        self._observer = Observer()
        self._observer.schedule(handler, str(watch_dir), recursive=False)
        self._observer.start()
        logger.info(f"Watching {self.excel_path}")

    def stop(self) -> None:
        """Stop watching and cancel any pending import."""
        with self._timer_lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

        if self._observer is not None:
            self._observer.stop()
            self._observer.join()
            self._observer = None

    def run_forever(self, poll_interval: float = 1.0) -> None:
        """Block until interrupted with Ctrl+C."""
        self.start()
        try:
            while True:
                time.sleep(poll_interval)
        except KeyboardInterrupt:
            logger.info("Stopping watcher")
        finally:
            self.stop()

    def __enter__(self) -> 'ExcelWatcher':
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
