"""
Interfaces cho Scripts Explorer.

Dinh nghia contracts ma host editor goi vao:
- IFileSystemProvider: stat/readDirectory/createDirectory/readFile/
  writeFile/delete/rename/watch tren scripts folder
- ITreeDataProvider: get_children/get_tree_item cho tree view
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Tuple

from core.events import Disposable
from core.file_types import Entry, FileStat, FileType
from core.view_types import TreeItem


class IFileSystemProvider(ABC):
    """
    Contract file system cho host.

    Moi operation la coroutine va raise FileSystemError da phan loai
    (FileNotFound, FileIsADirectory, FileExists, NoPermissions).
    """

    @abstractmethod
    async def stat(self, path: str) -> FileStat: ...

    @abstractmethod
    async def read_directory(self, path: str) -> List[Tuple[str, FileType]]: ...

    @abstractmethod
    async def create_directory(self, path: str) -> None: ...

    @abstractmethod
    async def read_file(self, path: str) -> bytes: ...

    @abstractmethod
    async def write_file(
        self, path: str, content: bytes, create: bool, overwrite: bool
    ) -> None: ...

    @abstractmethod
    async def delete(self, path: str, recursive: bool) -> None: ...

    @abstractmethod
    async def rename(self, old_path: str, new_path: str, overwrite: bool) -> None: ...

    @abstractmethod
    def watch(
        self,
        path: Path,
        recursive: bool = True,
        excludes: Optional[List[str]] = None,
    ) -> Disposable:
        """
        Bat dau theo doi path. Tra ve handle; dispose() dung delivery ngay.
        """
        ...


class ITreeDataProvider(ABC):
    """Contract tree view cho host."""

    @abstractmethod
    async def get_children(self, element: Optional[Entry] = None) -> List[Entry]:
        """Con cua element, hoac cua root neu element la None."""
        ...

    @abstractmethod
    def get_tree_item(self, element: Entry) -> TreeItem: ...
