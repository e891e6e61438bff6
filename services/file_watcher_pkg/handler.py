"""
Scripts Event Handler cho File Watcher.

Nhan events tu watchdog, ap dung ignore strategy, rut gon thanh
native notification ("rename" / "change") va chuyen cho debouncer.

Phan loai CREATED/DELETED khong dua vao loai event cua watchdog:
tren nhieu platform create/delete/rename bi gop chung, nen loai
thay doi duoc xac dinh lai bang cach probe path luc dispatch.
"""

import os

from watchdog.events import (
    DirCreatedEvent,
    DirDeletedEvent,
    DirMovedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    FileSystemEventHandler,
)

from core.fs_ops import normalize_nfc
from core.logging_config import log_debug
from services.interfaces.file_watcher_service import (
    NATIVE_TAG_CHANGE,
    NATIVE_TAG_RENAME,
    FileChangeEvent,
    FileChangeType,
    IEventDebouncer,
    IIgnoreStrategy,
    NativeNotification,
)


def classify_notification(notification: NativeNotification) -> FileChangeEvent:
    """
    Chuyen native notification thanh FileChangeEvent.

    - "change": luon CHANGED (file bi sua thi phai ton tai)
    - "rename": CREATED neu path dang ton tai, nguoc lai DELETED

    Probe co race (file co the bi xoa/tao lai giua notification va probe),
    ket qua la best-effort.
    """
    if notification.tag == NATIVE_TAG_CHANGE:
        change_type = FileChangeType.CHANGED
    elif os.path.exists(notification.path):
        change_type = FileChangeType.CREATED
    else:
        change_type = FileChangeType.DELETED
    return FileChangeEvent(type=change_type, path=notification.path)


def _to_str(path: object) -> str:
    if isinstance(path, bytes):
        return os.fsdecode(path)
    return str(path)


class ScriptsEventHandler(FileSystemEventHandler):
    """
    Event handler nhan events tu watchdog va delegate cho debouncer.

    Trach nhiem duy nhat:
    - Nhan watchdog events (on_created, on_deleted, on_modified, on_moved)
    - Kiem tra ignore strategy
    - Rut gon thanh NativeNotification va gui cho debouncer

    Attributes:
        _ignore_strategy: Strategy xac dinh path nao can bo qua
        _debouncer: Debouncer nhan notification
    """

    def __init__(
        self,
        ignore_strategy: IIgnoreStrategy,
        debouncer: IEventDebouncer,
    ):
        super().__init__()
        self._ignore_strategy = ignore_strategy
        self._debouncer = debouncer

    def _notify(self, raw_path: object, tag: str) -> None:
        """
        Xu ly chung cho moi loai su kien.

        Args:
            raw_path: src_path/dest_path tu watchdog (str hoac bytes)
            tag: NATIVE_TAG_RENAME hoac NATIVE_TAG_CHANGE
        """
        path = normalize_nfc(_to_str(raw_path))
        if not path or self._ignore_strategy.should_ignore(path):
            return

        log_debug(f"[FileWatcher] Native {tag}: {path}")
        self._debouncer.add_event(NativeNotification(tag=tag, path=path))

    def on_created(self, event: object) -> None:
        if isinstance(event, (FileCreatedEvent, DirCreatedEvent)):
            self._notify(getattr(event, "src_path", ""), NATIVE_TAG_RENAME)

    def on_deleted(self, event: object) -> None:
        if isinstance(event, (FileDeletedEvent, DirDeletedEvent)):
            self._notify(getattr(event, "src_path", ""), NATIVE_TAG_RENAME)

    def on_modified(self, event: object) -> None:
        # Chi xu ly file, folder modified qua nhieu noise
        if isinstance(event, FileModifiedEvent):
            self._notify(getattr(event, "src_path", ""), NATIVE_TAG_CHANGE)

    def on_moved(self, event: object) -> None:
        # Move = rename o ca nguon va dich
        if isinstance(event, (FileMovedEvent, DirMovedEvent)):
            self._notify(getattr(event, "src_path", ""), NATIVE_TAG_RENAME)
            self._notify(getattr(event, "dest_path", ""), NATIVE_TAG_RENAME)
