"""File watching for Folio.

Re-runs a callback whenever content or configuration changes, so authors
get validation feedback while editing.

Key classes:
- ContentWatcher: Watches the content directory and folio.yaml.
- _ChangeHandler: File system event handler that forwards to the watcher.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .store import CONFIG_FILENAME


class ContentWatcher:
    """Calls ``on_change`` when files under the content directory change.

    Attributes:
        project_root: Root directory of the project.
        content_dir: Directory holding content files.
        on_change: Callback run after each detected change.
    """

    def __init__(
        self,
        project_root: Path,
        content_dir: Path,
        on_change: Callable[[], None],
        debounce_seconds: float = 0.2,
    ):
        self.project_root = project_root
        self.content_dir = content_dir
        self.on_change = on_change
        self._debounce_seconds = debounce_seconds
        self._observer: Observer | None = None
        self._running = False
        self._last_run_at = 0.0
        self._last_signature: tuple | None = self._compute_signature()

    def start(self) -> None:  # pragma: no cover - integration path
        handler = _ChangeHandler(self)
        observer = Observer()
        if self.content_dir.exists():
            observer.schedule(handler, str(self.content_dir), recursive=True)
        observer.schedule(handler, str(self.project_root), recursive=False)
        observer.start()
        self._observer = observer
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            self.stop()

    def stop(self) -> None:
        if self._observer:
            self._observer.stop()
            self._observer.join()
            self._observer = None

    def notify(self) -> bool:
        """Run the callback if content changed since the last run.

        Returns:
            True if the callback ran.
        """
        now = time.time()
        if self._running or (now - self._last_run_at) < self._debounce_seconds:
            return False
        signature = self._compute_signature()
        if signature == self._last_signature:
            return False
        self._running = True
        try:
            self.on_change()
            self._last_signature = signature
        finally:
            self._running = False
            self._last_run_at = time.time()
        return True

    def _compute_signature(self) -> tuple:
        entries: list[tuple] = []
        candidates = sorted(self.content_dir.rglob("*")) if self.content_dir.exists() else []
        config_path = self.project_root / CONFIG_FILENAME
        if config_path.exists():
            candidates.append(config_path)
        for path in candidates:
            if path.is_dir():
                continue
            try:
                stat = path.stat()
            except OSError:
                continue
            entries.append((str(path), stat.st_mtime_ns, stat.st_size))
        return tuple(entries)


class _ChangeHandler(FileSystemEventHandler):
    def __init__(self, watcher: ContentWatcher):
        super().__init__()
        self.watcher = watcher

    def on_any_event(self, event):
        if event.is_directory:
            return
        path = Path(str(event.src_path))
        watcher = self.watcher
        if (
            path.parent == watcher.project_root
            and watcher.content_dir != watcher.project_root
            and path.name != CONFIG_FILENAME
        ):
            return
        self.watcher.notify()
