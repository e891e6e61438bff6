"""
File Types - Cac kieu du lieu cho scripts tree

- FileType: Bit flags phan loai (file, directory, symlink, unknown)
- FileStat: Snapshot read-only cua os.stat_result, khong cache
- Entry: Cap (path, type) hien thi trong tree
"""

import os
import stat as stat_module
from dataclasses import dataclass, field
from enum import IntFlag
from typing import Optional


class FileType(IntFlag):
    """
    Loai file. SYMBOLIC_LINK duoc OR voi loai cua target,
    vd: symlink -> thu muc = SYMBOLIC_LINK | DIRECTORY.
    """

    UNKNOWN = 0
    FILE = 1
    DIRECTORY = 2
    SYMBOLIC_LINK = 64


def file_type_from_mode(mode: int) -> FileType:
    """Map st_mode sang FileType (khong xet symlink)."""
    if stat_module.S_ISREG(mode):
        return FileType.FILE
    if stat_module.S_ISDIR(mode):
        return FileType.DIRECTORY
    if stat_module.S_ISLNK(mode):
        return FileType.SYMBOLIC_LINK
    return FileType.UNKNOWN


@dataclass(frozen=True)
class FileStat:
    """
    Snapshot metadata cua mot path.

    Attributes:
        type: FileType da phan loai
        size: Kich thuoc (bytes)
        ctime: Thoi diem tao/doi metadata (milliseconds)
        mtime: Thoi diem sua cuoi (milliseconds)
    """

    type: FileType
    size: int
    ctime: int
    mtime: int

    @classmethod
    def from_os_stat(
        cls, st: os.stat_result, link_target: Optional[os.stat_result] = None
    ) -> "FileStat":
        """
        Tao FileStat tu lstat result.

        Args:
            st: Ket qua os.lstat()
            link_target: Ket qua os.stat() cua target neu st la symlink
                         (None neu link bi dangling)
        """
        if stat_module.S_ISLNK(st.st_mode):
            file_type = FileType.SYMBOLIC_LINK
            source = st
            if link_target is not None:
                file_type |= file_type_from_mode(link_target.st_mode)
                source = link_target
        else:
            file_type = file_type_from_mode(st.st_mode)
            source = st

        return cls(
            type=file_type,
            size=source.st_size,
            ctime=int(source.st_ctime * 1000),
            mtime=int(source.st_mtime * 1000),
        )

    @property
    def is_file(self) -> bool:
        return bool(self.type & FileType.FILE)

    @property
    def is_directory(self) -> bool:
        return bool(self.type & FileType.DIRECTORY)

    @property
    def is_symbolic_link(self) -> bool:
        return bool(self.type & FileType.SYMBOLIC_LINK)


@dataclass(frozen=True)
class Entry:
    """
    Mot node trong scripts tree.

    Duoc tao moi moi lan list thu muc, khong persist.

    Attributes:
        path: Duong dan tuyet doi
        type: FileType cua node
        context_value: "folder" cho thu muc, "file" cho con lai (dung cho menu)
    """

    path: str
    type: FileType
    context_value: str = field(init=False)

    def __post_init__(self) -> None:
        context = "folder" if self.type & FileType.DIRECTORY else "file"
        object.__setattr__(self, "context_value", context)

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    @property
    def is_directory(self) -> bool:
        return bool(self.type & FileType.DIRECTORY)
