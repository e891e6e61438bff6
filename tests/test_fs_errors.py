"""
Tests cho core.fs_errors.

Coverage:
- massage_error() map errno -> FileSystemError
- Errno khong nam trong bang -> tra ve nguyen ven
- check_cancellation() voi CancellationToken
"""

import errno

import pytest

from core.fs_errors import (
    CancellationToken,
    FileExists,
    FileIsADirectory,
    FileNotFound,
    FileSystemError,
    NoPermissions,
    OperationCancelled,
    check_cancellation,
    massage_error,
)


class TestMassageError:
    """Test phan loai OSError."""

    @pytest.mark.parametrize(
        "code, expected",
        [
            (errno.ENOENT, FileNotFound),
            (errno.EISDIR, FileIsADirectory),
            (errno.EEXIST, FileExists),
            (errno.EPERM, NoPermissions),
            (errno.EACCES, NoPermissions),
        ],
    )
    def test_known_codes_are_classified(self, code, expected):
        original = OSError(code, "boom", "/scripts/a.sql")
        classified = massage_error(original)

        assert isinstance(classified, expected)
        assert isinstance(classified, FileSystemError)
        assert classified.path == "/scripts/a.sql"
        assert classified.__cause__ is original

    def test_unknown_code_passes_through(self):
        """ENOTDIR khong nam trong bang -> giu nguyen."""
        original = OSError(errno.ENOTDIR, "not a dir")
        assert massage_error(original) is original

    def test_non_os_error_passes_through(self):
        original = ValueError("nope")
        assert massage_error(original) is original

    def test_already_classified_is_unchanged(self):
        original = FileExists("/x")
        assert massage_error(original) is original

    def test_builtin_subclasses_are_classified(self):
        """FileNotFoundError cua Python co errno ENOENT."""
        classified = massage_error(FileNotFoundError(errno.ENOENT, "missing", "/m"))
        assert isinstance(classified, FileNotFound)
        assert classified.code == "FileNotFound"


class TestCancellation:
    """Test cooperative cancellation."""

    def test_none_token_never_raises(self):
        check_cancellation(None)

    def test_uncancelled_token_passes(self):
        token = CancellationToken()
        check_cancellation(token)
        assert token.is_cancellation_requested is False

    def test_cancelled_token_raises(self):
        token = CancellationToken()
        token.cancel()
        with pytest.raises(OperationCancelled):
            check_cancellation(token)
