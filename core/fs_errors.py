"""
File System Errors - Phan loai loi OS thanh cac loai co dinh

Taxonomy:
- FileNotFound     <- ENOENT
- FileIsADirectory <- EISDIR
- FileExists       <- EEXIST
- NoPermissions    <- EPERM, EACCES

Cac errno khac duoc tra ve nguyen ven (pass-through).
Module nay khong format message cho nguoi dung, chi tao loai loi.
"""

import errno
from typing import Optional


class FileSystemError(Exception):
    """
    Base class cho moi loi da duoc phan loai.

    Attributes:
        code: Ten loai loi ("FileNotFound", "FileExists", ...)
        path: Duong dan gay loi (neu biet)
    """

    code = "Unknown"

    def __init__(self, path: Optional[str] = None, message: Optional[str] = None):
        self.path = path
        super().__init__(message or (f"{self.code}: {path}" if path else self.code))


class FileNotFound(FileSystemError):
    code = "FileNotFound"


class FileIsADirectory(FileSystemError):
    code = "FileIsADirectory"


class FileExists(FileSystemError):
    code = "FileExists"


class NoPermissions(FileSystemError):
    code = "NoPermissions"


class OperationCancelled(Exception):
    """Raise khi caller da yeu cau huy operation."""


# errno -> loai loi. Bang co dinh, khong mo rong runtime.
_ERRNO_MAP: dict[int, type[FileSystemError]] = {
    errno.ENOENT: FileNotFound,
    errno.EISDIR: FileIsADirectory,
    errno.EEXIST: FileExists,
    errno.EPERM: NoPermissions,
    errno.EACCES: NoPermissions,
}


def massage_error(error: BaseException) -> BaseException:
    """
    Chuyen OSError thanh FileSystemError tuong ung.

    Args:
        error: Exception tu OS call

    Returns:
        FileSystemError neu errno nam trong bang, nguoc lai tra ve chinh error
    """
    if isinstance(error, FileSystemError):
        return error

    if isinstance(error, OSError):
        error_cls = _ERRNO_MAP.get(error.errno or 0)
        if error_cls is not None:
            classified = error_cls(error.filename)
            classified.__cause__ = error
            return classified

    return error


class CancellationToken:
    """Co huy cooperative - caller set, operation poll."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def is_cancellation_requested(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


def check_cancellation(token: Optional[CancellationToken]) -> None:
    """
    Raise OperationCancelled neu token da bi cancel.

    Args:
        token: CancellationToken (None = khong the huy)
    """
    if token is not None and token.is_cancellation_requested:
        raise OperationCancelled("Operation cancelled")
