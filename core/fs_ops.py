"""
File System Operations - Async wrappers quanh cac OS call

Moi operation chay blocking call qua asyncio.to_thread de khong chan
event loop, va phan loai loi qua massage_error() truoc khi raise.

Operations:
- stat / readdir / read_file / write_bytes / exists / lexists / same_entry
- unlink / rename_path
- mkdirp: Tao thu muc idempotent (ton tai roi -> OK)
- rimraf: Xoa de quy (con truoc, thu muc sau)
"""

import asyncio
import os
import stat as stat_module
import sys
import unicodedata
from typing import Any, Callable, Optional, TypeVar, Union, overload

from core.file_types import FileStat
from core.fs_errors import massage_error
from core.logging_config import log_debug

T = TypeVar("T")


async def _run(func: Callable[..., T], *args: Any) -> T:
    """Chay blocking call trong thread, phan loai OSError."""
    try:
        return await asyncio.to_thread(func, *args)
    except OSError as e:
        classified = massage_error(e)
        if classified is e:
            raise
        raise classified from e


@overload
def normalize_nfc(items: str) -> str: ...


@overload
def normalize_nfc(items: list[str]) -> list[str]: ...


def normalize_nfc(items: Union[str, list[str]]) -> Union[str, list[str]]:
    """
    Normalize ten file ve NFC tren macOS (HFS+/APFS tra ve NFD).
    Cac platform khac tra ve nguyen ven.
    """
    if sys.platform != "darwin":
        return items

    if isinstance(items, list):
        return [unicodedata.normalize("NFC", item) for item in items]

    return unicodedata.normalize("NFC", items)


def _stat_sync(path: str) -> FileStat:
    st = os.lstat(path)
    link_target: Optional[os.stat_result] = None
    if stat_module.S_ISLNK(st.st_mode):
        try:
            link_target = os.stat(path)
        except OSError:
            # Dangling link -> SYMBOLIC_LINK | UNKNOWN
            link_target = None
    return FileStat.from_os_stat(st, link_target)


def _read_bytes(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def _write_bytes(path: str, content: bytes) -> None:
    with open(path, "wb") as f:
        f.write(content)


def _readdir_sync(path: str) -> list[str]:
    return normalize_nfc(os.listdir(path))


async def stat(path: str) -> FileStat:
    """
    Lay FileStat cua path. Khong cache - moi lan goi deu hoi OS.

    Raises:
        FileNotFound: Path khong ton tai
    """
    return await _run(_stat_sync, path)


async def readdir(path: str) -> list[str]:
    """List ten cac con truc tiep cua thu muc (chua sort)."""
    return await _run(_readdir_sync, path)


async def read_file(path: str) -> bytes:
    return await _run(_read_bytes, path)


async def write_bytes(path: str, content: bytes) -> None:
    await _run(_write_bytes, path, content)


async def exists(path: str) -> bool:
    return await asyncio.to_thread(os.path.exists, path)


async def lexists(path: str) -> bool:
    """Nhu exists() nhung khong follow symlink (link dangling van ton tai)."""
    return await asyncio.to_thread(os.path.lexists, path)


def _same_entry_sync(first: str, second: str) -> bool:
    try:
        return os.path.samestat(os.lstat(first), os.lstat(second))
    except OSError:
        return False


async def same_entry(first: str, second: str) -> bool:
    """True neu hai path tro toi cung mot entry (so sanh lstat, khong follow link)."""
    return await asyncio.to_thread(_same_entry_sync, first, second)


async def unlink(path: str) -> None:
    await _run(os.unlink, path)


async def rename_path(old_path: str, new_path: str) -> None:
    await _run(os.rename, old_path, new_path)


async def mkdirp(path: str) -> None:
    """
    Tao thu muc va cac thu muc cha con thieu.

    Thu muc da ton tai -> thanh cong, khong thay doi gi.

    Raises:
        FileExists: Path ton tai nhung khong phai thu muc
    """
    await _run(_makedirs, path)


def _makedirs(path: str) -> None:
    os.makedirs(path, exist_ok=True)


async def rimraf(path: str) -> None:
    """
    Xoa path. Thu muc: xoa de quy tung con truoc roi xoa thu muc rong.

    Symlink bi xoa, khong follow. Neu mot con bien mat giua luc list
    va luc xoa, FileNotFound duoc raise (khong nuot loi).
    """
    info = await stat(path)
    if info.is_directory and not info.is_symbolic_link:
        for name in await readdir(path):
            await rimraf(os.path.join(path, name))
        await _run(os.rmdir, path)
        log_debug(f"[fs] Removed directory: {path}")
    else:
        await unlink(path)
