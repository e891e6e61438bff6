"""
Event Emitter - Pub/sub don gian cho cac provider

subscribe() tra ve Disposable; sau khi dispose() listener khong
con duoc goi. Loi trong listener duoc log, khong lam hong fire().
"""

import threading
from typing import Callable, Generic, List, TypeVar

from core.logging_config import log_error

T = TypeVar("T")


class Disposable:
    """Wrap mot callback cleanup, chi chay mot lan."""

    def __init__(self, on_dispose: Callable[[], None]):
        self._on_dispose = on_dispose
        self._disposed = False

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._on_dispose()


class EventEmitter(Generic[T]):
    """
    Emitter voi payload kieu T.

    Usage:
        emitter: EventEmitter[list[FileChangeEvent]] = EventEmitter()
        sub = emitter.subscribe(lambda events: ...)
        emitter.fire(events)
        sub.dispose()
    """

    def __init__(self) -> None:
        self._listeners: List[Callable[[T], None]] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: Callable[[T], None]) -> Disposable:
        with self._lock:
            self._listeners.append(listener)

        def remove() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return Disposable(remove)

    def fire(self, data: T) -> None:
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(data)
            except Exception as e:
                log_error("Error in event listener", e)

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def dispose(self) -> None:
        with self._lock:
            self._listeners.clear()
