"""
Event Dispatchers cho File Watcher.

- ImmediateDispatcher: Phan loai va dispatch tung notification ngay lap tuc
- TimerEventDebouncer: Gom notification theo path, probe lai luc flush

Debounce giam so lan phan loai sai khi file bi tao/xoa lien tuc
(vd: editor luu file qua file tam), doi lai do tre dispatch.
"""

import threading
from threading import Timer
from typing import Callable, Dict, List, Optional

from core.logging_config import log_debug, log_error
from services.file_watcher_pkg.handler import classify_notification
from services.interfaces.file_watcher_service import (
    NATIVE_TAG_RENAME,
    FileChangeEvent,
    IEventDebouncer,
    NativeNotification,
)

EventSink = Callable[[List[FileChangeEvent]], None]


class ImmediateDispatcher(IEventDebouncer):
    """Dispatch ngay trong thread cua observer, moi notification mot batch."""

    def __init__(self, sink: EventSink):
        self._sink = sink
        self._closed = False

    def add_event(self, notification: NativeNotification) -> None:
        if self._closed:
            return
        try:
            self._sink([classify_notification(notification)])
        except Exception as e:
            log_error("[FileWatcher] Error in callback", e)

    def cleanup(self) -> None:
        self._closed = True


class TimerEventDebouncer(IEventDebouncer):
    """
    Debouncer su dung threading.Timer.

    Doi debounce_seconds sau notification cuoi cung truoc khi dispatch.
    Notification moi trong khoang do se reset timer.

    Cac notification cung path duoc gop lam mot: neu co bat ky "rename"
    nao thi tag la "rename" (probe lai luc flush), nguoc lai la "change".

    Attributes:
        _sink: Callback nhan batch FileChangeEvent
        _debounce_seconds: Thoi gian cho truoc khi dispatch
        _timer: Timer hien tai (None neu khong co pending)
        _pending: path -> tag, giu thu tu xuat hien
    """

    def __init__(self, sink: EventSink, debounce_seconds: float = 0.5):
        self._sink = sink
        self._debounce_seconds = debounce_seconds
        self._timer: Optional[Timer] = None
        self._pending: Dict[str, str] = {}
        self._lock = threading.Lock()
        self._closed = False

    def add_event(self, notification: NativeNotification) -> None:
        with self._lock:
            if self._closed:
                return

            previous = self._pending.get(notification.path)
            if previous != NATIVE_TAG_RENAME:
                self._pending[notification.path] = notification.tag

            if self._timer is not None:
                self._timer.cancel()

            self._timer = Timer(self._debounce_seconds, self._trigger_callback)
            self._timer.daemon = True
            self._timer.start()

    def cleanup(self) -> None:
        """Huy timer va pending notifications khi shutdown."""
        with self._lock:
            self._closed = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending.clear()

    def _trigger_callback(self) -> None:
        """Phan loai toan bo pending notifications va dispatch mot batch."""
        with self._lock:
            if self._closed or not self._pending:
                return
            pending = list(self._pending.items())
            self._pending.clear()
            self._timer = None

        log_debug(f"[FileWatcher] Flushing {len(pending)} notification(s)")

        events = [
            classify_notification(NativeNotification(tag=tag, path=path))
            for path, tag in pending
        ]
        try:
            self._sink(events)
        except Exception as e:
            log_error("[FileWatcher] Error in callback", e)
