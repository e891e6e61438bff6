"""
Interfaces cho File Watcher Service.

Dinh nghia contracts cho:
- IFileWatcherService: Start/stop theo doi scripts folder
- IIgnoreStrategy: Xac dinh path nao can bo qua
- IEventDebouncer: Nhan native notifications va dispatch Change Events
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Callable, List, Optional


# Tag cua native notification (giong fs.watch): "rename" gom create/delete/move
NATIVE_TAG_RENAME = "rename"
NATIVE_TAG_CHANGE = "change"


class FileChangeType(IntEnum):
    """Loai thay doi da phan loai."""

    CHANGED = 1
    CREATED = 2
    DELETED = 3


@dataclass(frozen=True)
class FileChangeEvent:
    """
    Dai dien cho mot su kien thay doi file.

    Attributes:
        type: CREATED / CHANGED / DELETED (xac dinh bang cach probe ton tai)
        path: Duong dan tuyet doi cua file/folder bi thay doi
    """

    type: FileChangeType
    path: str


@dataclass(frozen=True)
class NativeNotification:
    """
    Notification tho tu OS truoc khi phan loai.

    Attributes:
        tag: NATIVE_TAG_RENAME hoac NATIVE_TAG_CHANGE
        path: Duong dan tuyet doi
    """

    tag: str
    path: str


@dataclass
class WatcherCallbacks:
    """
    Callbacks cho file watcher.

    Attributes:
        on_did_change_file: Nhan mot batch FileChangeEvent
        on_tree_change: Signal "tree co the da thay doi" (khong kem data)
    """

    on_did_change_file: Optional[Callable[[List[FileChangeEvent]], None]] = None
    on_tree_change: Optional[Callable[[], None]] = None


class IIgnoreStrategy(ABC):
    """
    Interface xac dinh logic bo qua path.

    Implementation co the dua tren hardcoded patterns,
    pattern gitignore-style, hoac ket hop nhieu strategy.
    """

    @abstractmethod
    def should_ignore(self, path: str) -> bool:
        """
        Kiem tra xem path co nen bi bo qua khong.

        Args:
            path: Duong dan tuyet doi can kiem tra

        Returns:
            True neu path can bi bo qua
        """
        ...


class IEventDebouncer(ABC):
    """
    Interface nhan native notifications va dispatch Change Events.

    Implementation co the dispatch ngay (khong debounce) hoac
    gom nhom va dispatch sau khoang thoi gian debounce.
    """

    @abstractmethod
    def add_event(self, notification: NativeNotification) -> None:
        """
        Them mot notification vao hang doi.

        Args:
            notification: Native notification can xu ly
        """
        ...

    @abstractmethod
    def cleanup(self) -> None:
        """Huy timer va pending notifications khi shutdown."""
        ...


class IFileWatcherService(ABC):
    """
    Interface cho dich vu theo doi scripts folder.

    Moi implementation phai dam bao:
    - Auto-stop khi switch sang path moi
    - Khong co callback nao bat dau sau khi stop() tra ve
    """

    @abstractmethod
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

        Args:
            path: Duong dan thu muc can theo doi
            callbacks: WatcherCallbacks nhan events
            recursive: Theo doi ca thu muc con
            excludes: Pattern gitignore-style (tuong doi voi path) bi bo qua
            debounce_seconds: Thoi gian debounce (0 = dispatch ngay)
        """
        ...

    @abstractmethod
    def stop(self) -> None:
        """Dung theo doi."""
        ...

    @abstractmethod
    def is_running(self) -> bool:
        """Kiem tra watcher co dang chay khong."""
        ...

    @property
    @abstractmethod
    def current_path(self) -> Optional[Path]:
        """Lay duong dan dang duoc theo doi."""
        ...
