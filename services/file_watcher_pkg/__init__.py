"""
File Watcher Package - Re-exports cac symbols chinh.

- FileWatcher (class chinh)
- WatcherCallbacks, FileChangeEvent, FileChangeType (data classes)
"""

from services.file_watcher_pkg.service import FileWatcher
from services.interfaces.file_watcher_service import (
    FileChangeEvent,
    FileChangeType,
    WatcherCallbacks,
)

__all__ = [
    "FileWatcher",
    "FileChangeEvent",
    "FileChangeType",
    "WatcherCallbacks",
]
