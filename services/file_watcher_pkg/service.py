"""
FileWatcher Service - Wiring va lifecycle management.

Khoi tao cac dependencies (IgnoreStrategy, dispatcher/debouncer,
ScriptsEventHandler) va quan ly lifecycle cua watchdog Observer.

Dam bao "khong deliver sau khi stop":
- Moi lan start() tang _generation
- Moi batch duoc deliver duoi _lock va chi khi generation con khop
- stop() lay _lock truoc khi danh dau inactive, nen sau khi stop() tra ve
  khong co callback nao bat dau nua
"""

import asyncio
import threading
from pathlib import Path
from typing import Any, List, Optional

from watchdog.observers import Observer

from core.logging_config import log_debug, log_error, log_info
from services.file_watcher_pkg.debouncer import (
    ImmediateDispatcher,
    TimerEventDebouncer,
)
from services.file_watcher_pkg.handler import ScriptsEventHandler
from services.file_watcher_pkg.ignore_strategies import (
    CompositeIgnoreStrategy,
    DefaultIgnoreStrategy,
    PathSpecIgnoreStrategy,
)
from services.interfaces.file_watcher_service import (
    FileChangeEvent,
    IEventDebouncer,
    IFileWatcherService,
    IIgnoreStrategy,
    WatcherCallbacks,
)


class FileWatcher(IFileWatcherService):
    """
    Service theo doi thay doi trong scripts folder.

    Wiring dependencies:
    - IIgnoreStrategy -> DefaultIgnoreStrategy (+ PathSpecIgnoreStrategy neu co excludes)
    - IEventDebouncer -> ImmediateDispatcher hoac TimerEventDebouncer
    - ScriptsEventHandler cau noi giua watchdog va dispatcher

    Neu co event loop, batch duoc chuyen sang loop qua call_soon_threadsafe,
    consumer chi nhan events tren thread cua loop.

    Usage:
        watcher = FileWatcher(loop=asyncio.get_running_loop())
        watcher.start(Path("/path/to/scripts"), callbacks)
        # ... later
        watcher.dispose()
    """

    def __init__(
        self,
        ignore_strategy: Optional[IIgnoreStrategy] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        """
        Args:
            ignore_strategy: Strategy xac dinh path nao can bo qua.
                             Mac dinh su dung DefaultIgnoreStrategy.
            loop: Event loop nhan events (None = deliver tren thread observer)
        """
        # Su dung Any de tranh false positive voi Observer type
        self._observer: Optional[Any] = None
        self._debouncer: Optional[IEventDebouncer] = None
        self._handler: Optional[ScriptsEventHandler] = None
        self._callbacks: Optional[WatcherCallbacks] = None
        self._current_path: Optional[Path] = None
        self._ignore_strategy: IIgnoreStrategy = (
            ignore_strategy or DefaultIgnoreStrategy()
        )
        self._loop = loop
        self._lock = threading.RLock()
        self._generation = 0
        self._active = False

    def start(
        self,
        path: Path,
        callbacks: WatcherCallbacks,
        recursive: bool = True,
        excludes: Optional[List[str]] = None,
        debounce_seconds: float = 0.0,
    ) -> None:
        """
        Bat dau theo doi mot thu muc.

        Neu dang theo doi thu muc khac, se tu dong stop truoc.
        Path khong hop le -> log loi va khong chay (khong raise).
        """
        self.stop()

        if not path.exists() or not path.is_dir():
            log_error(f"[FileWatcher] Invalid path: {path}")
            return

        ignore_strategy = self._ignore_strategy
        if excludes:
            ignore_strategy = CompositeIgnoreStrategy(
                [ignore_strategy, PathSpecIgnoreStrategy(path, excludes)]
            )

        with self._lock:
            self._generation += 1
            generation = self._generation
            self._callbacks = callbacks
            self._active = True

        def sink(events: List[FileChangeEvent]) -> None:
            self._submit(events, generation)

        try:
            # Wire dependencies: Strategy -> Dispatcher -> Handler -> Observer
            if debounce_seconds > 0:
                self._debouncer = TimerEventDebouncer(sink, debounce_seconds)
            else:
                self._debouncer = ImmediateDispatcher(sink)

            self._handler = ScriptsEventHandler(
                ignore_strategy=ignore_strategy,
                debouncer=self._debouncer,
            )

            self._observer = Observer()
            self._observer.schedule(self._handler, str(path), recursive=recursive)
            self._observer.start()

            self._current_path = path
            log_info(f"[FileWatcher] Started watching: {path}")

        except Exception as e:
            log_error("[FileWatcher] Failed to start", e)
            self.stop()

    def _submit(self, events: List[FileChangeEvent], generation: int) -> None:
        """Chuyen batch sang event loop (neu co) hoac deliver truc tiep."""
        loop = self._loop
        if loop is None:
            self._deliver(events, generation)
            return

        try:
            loop.call_soon_threadsafe(self._deliver, events, generation)
        except RuntimeError:
            # Loop da dong
            log_debug("[FileWatcher] Event loop closed, dropping events")

    def _deliver(self, events: List[FileChangeEvent], generation: int) -> None:
        with self._lock:
            if not self._active or generation != self._generation:
                return
            callbacks = self._callbacks
            if callbacks is None:
                return

            try:
                if callbacks.on_tree_change:
                    callbacks.on_tree_change()
                if callbacks.on_did_change_file:
                    callbacks.on_did_change_file(events)
            except Exception as e:
                log_error("[FileWatcher] Error in callback", e)

    def stop(self) -> None:
        """Dung theo doi. Goi nhieu lan khong loi."""
        with self._lock:
            self._active = False
            self._callbacks = None

        if self._debouncer is not None:
            self._debouncer.cleanup()
            self._debouncer = None

        self._handler = None

        observer = self._observer
        if observer is not None:
            try:
                observer.stop()
                if observer.is_alive() and threading.current_thread() is not observer:
                    observer.join(timeout=2.0)
                log_info(f"[FileWatcher] Stopped watching: {self._current_path}")
            except Exception as e:
                log_error("[FileWatcher] Error stopping", e)
            finally:
                self._observer = None

        self._current_path = None

    def dispose(self) -> None:
        """Alias cua stop() cho cac consumer dung Disposable."""
        self.stop()

    def is_running(self) -> bool:
        """Kiem tra watcher co dang chay khong."""
        observer = self._observer
        return observer is not None and observer.is_alive()

    @property
    def current_path(self) -> Optional[Path]:
        """Lay duong dan dang duoc theo doi."""
        return self._current_path
