"""
Scripts Explorer - File system provider + tree data provider cho scripts folder.

Chieu cac API cua host editor (tree view, file system provider, file events)
xuong cac operation cua core.fs_ops:

- Tree: get_children() list root/thu muc, sort thu muc truoc roi theo ten
- FS provider: stat/read_directory/create_directory/read_file/write_file/
  delete/rename/watch, loi duoc phan loai qua core.fs_errors
- Dong bo: moi notification tu watcher fire on_did_change_tree_data va
  on_did_change_file; doi root (reconfigure) huy watcher cu va tao moi

Root location duoc inject qua ExplorerConfig, chi doi qua reconfigure().
"""

import asyncio
import errno
import locale
import os
import unicodedata
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from config.app_settings import AppSettings
from config.paths import DEFAULT_SCRIPTS_DIR
from core import fs_ops
from core.events import Disposable, EventEmitter
from core.file_types import Entry, FileStat, FileType
from core.fs_errors import FileExists, FileNotFound
from core.logging_config import log_debug, log_info
from core.view_types import Command, TreeItem, TreeItemCollapsibleState
from services.file_watcher_pkg.service import FileWatcher
from services.interfaces.file_system_provider import (
    IFileSystemProvider,
    ITreeDataProvider,
)
from services.interfaces.file_watcher_service import (
    FileChangeEvent,
    WatcherCallbacks,
)

OPEN_FILE_COMMAND = "github.cweijan.scripts.openFile"


@dataclass
class ExplorerConfig:
    """
    Cau hinh inject vao ScriptsExplorer.

    Attributes:
        scripts_folder: Thu muc scripts tuy chon (rong -> default_location)
        default_location: Thu muc fallback, tu dong tao neu chua co
        watch_excludes: Pattern gitignore-style bo qua khi watch
        debounce_seconds: Debounce cho watcher (0 = khong debounce)
    """

    scripts_folder: str = ""
    default_location: Path = DEFAULT_SCRIPTS_DIR
    watch_excludes: List[str] = field(default_factory=list)
    debounce_seconds: float = 0.0

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "ExplorerConfig":
        return cls(
            scripts_folder=settings.scripts_folder,
            watch_excludes=settings.get_watch_excludes_list(),
            debounce_seconds=max(settings.watch_debounce_ms, 0) / 1000.0,
        )


class WatchSubscription(Disposable):
    """Handle tra ve tu watch(); dispose() dung FileWatcher ngay lap tuc."""

    def __init__(self, watcher: FileWatcher):
        super().__init__(watcher.stop)
        self.watcher = watcher

    @property
    def path(self) -> Optional[Path]:
        return self.watcher.current_path

    def is_running(self) -> bool:
        return self.watcher.is_running()


def _base_letters(name: str) -> str:
    """Bo dau (NFKD + bo combining mark), khong phan biet hoa thuong."""
    decomposed = unicodedata.normalize("NFKD", name.casefold())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _name_sort_key(name: str) -> Tuple[str, str, str]:
    # Ky tu goc truoc, dau va hoa thuong chi dung de pha hoa
    return (
        locale.strxfrm(_base_letters(name)),
        locale.strxfrm(name.casefold()),
        name,
    )


def sort_listing(
    children: Iterable[Tuple[str, FileType]],
) -> List[Tuple[str, FileType]]:
    """
    Sort ket qua read_directory: thu muc truoc, sau do theo ten
    (khong phan biet hoa thuong va dau, theo collation cua locale hien tai).
    """
    return sorted(
        children,
        key=lambda child: (
            not (child[1] & FileType.DIRECTORY),
            _name_sort_key(child[0]),
        ),
    )


class ScriptsExplorer(IFileSystemProvider, ITreeDataProvider):
    """
    Provider cho scripts folder.

    Usage:
        explorer = ScriptsExplorer(ExplorerConfig(), loop=asyncio.get_running_loop())
        await explorer.initialize()
        entries = await explorer.get_children()
        explorer.reconfigure("/path/to/other/scripts")
        explorer.dispose()
    """

    def __init__(
        self,
        config: Optional[ExplorerConfig] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self._config = config or ExplorerConfig()
        self._loop = loop
        self._default_location: Optional[Path] = (
            Path(self._config.scripts_folder) if self._config.scripts_folder else None
        )
        self._watcher: Optional[WatchSubscription] = None
        self._selection: List[Entry] = []

        self._on_did_change_file: EventEmitter[List[FileChangeEvent]] = EventEmitter()
        self._on_did_change_tree_data: EventEmitter[Optional[Entry]] = EventEmitter()

    async def initialize(self) -> None:
        """
        Chuan bi root va bat dau watch.

        Chua cau hinh scripts_folder -> tao default_location (idempotent)
        va dung no lam root.
        """
        if self._default_location is None:
            location = self._config.default_location
            await self.create_directory(str(location))
            self._default_location = location

        self._restart_watcher()

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    @property
    def on_did_change_file(self) -> EventEmitter[List[FileChangeEvent]]:
        return self._on_did_change_file

    @property
    def on_did_change_tree_data(self) -> EventEmitter[Optional[Entry]]:
        return self._on_did_change_tree_data

    # ------------------------------------------------------------------
    # Root location / configuration
    # ------------------------------------------------------------------

    def get_default_location(self) -> Optional[Path]:
        return self._default_location

    @property
    def active_watch(self) -> Optional[WatchSubscription]:
        return self._watcher

    def reconfigure(self, scripts_folder: str) -> None:
        """
        Doi root location va watch lai.

        scripts_folder rong -> giu root hien tai. Luon refresh sau do.

        Raises:
            FileNotFound: Root moi khong ton tai (root van duoc doi,
                khong co watcher nao chay)
        """
        if scripts_folder:
            new_location = Path(scripts_folder)
            if new_location != self._default_location:
                log_info(f"[ScriptsExplorer] Root changed: {new_location}")
            self._config.scripts_folder = scripts_folder
            self._default_location = new_location
        self.refresh()

    def on_configuration_changed(
        self, changed_keys: Sequence[str], settings: AppSettings
    ) -> None:
        """Listener cho settings_manager: cap nhat config va refresh."""
        self._config.watch_excludes = settings.get_watch_excludes_list()
        self._config.debounce_seconds = max(settings.watch_debounce_ms, 0) / 1000.0

        if "scripts_folder" in changed_keys:
            self.reconfigure(settings.scripts_folder)
        else:
            self.refresh()

    def refresh(self) -> None:
        """Huy watcher cu, watch lai root hien tai, bao host reload tree."""
        self._restart_watcher()
        self._on_did_change_tree_data.fire(None)

    def _restart_watcher(self) -> None:
        previous = self._watcher
        self._watcher = None
        if previous is not None:
            previous.dispose()

        if self._default_location is not None:
            self._watcher = self.watch(
                self._default_location,
                recursive=True,
                excludes=self._config.watch_excludes,
            )

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def on_did_change_tree_selection(self, selection: Sequence[Entry]) -> None:
        self._selection = list(selection)

    def selected(self) -> List[Entry]:
        return list(self._selection)

    # ------------------------------------------------------------------
    # File system provider
    # ------------------------------------------------------------------

    def watch(
        self,
        path: Path,
        recursive: bool = True,
        excludes: Optional[List[str]] = None,
    ) -> WatchSubscription:
        """
        Watch path, tra ve subscription (dispose de dung).

        Raises:
            FileNotFound: Path khong ton tai
            NotADirectoryError: Path khong phai thu muc
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFound(str(path))
        if not path.is_dir():
            raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), str(path))

        watcher = FileWatcher(loop=self._loop)
        watcher.start(
            path,
            WatcherCallbacks(
                on_did_change_file=self._on_did_change_file.fire,
                on_tree_change=lambda: self._on_did_change_tree_data.fire(None),
            ),
            recursive=recursive,
            excludes=excludes,
            debounce_seconds=self._config.debounce_seconds,
        )
        return WatchSubscription(watcher)

    async def stat(self, path: str) -> FileStat:
        return await fs_ops.stat(path)

    async def read_directory(self, path: str) -> List[Tuple[str, FileType]]:
        """
        List con cua thu muc kem FileType.

        Stat tung con rieng le; loi cua mot con (vd: bi xoa giua chung)
        duoc raise len, khong tra ve ket qua mot phan.
        """
        children = await fs_ops.readdir(path)

        result: List[Tuple[str, FileType]] = []
        for child in children:
            child_stat = await fs_ops.stat(os.path.join(path, child))
            result.append((child, child_stat.type))

        return result

    async def create_directory(self, path: str) -> None:
        await fs_ops.mkdirp(path)

    async def read_file(self, path: str) -> bytes:
        return await fs_ops.read_file(path)

    async def write_file(
        self, path: str, content: bytes, create: bool, overwrite: bool
    ) -> None:
        """
        Ghi file.

        Raises:
            FileNotFound: Path chua ton tai va create=False
            FileExists: Path da ton tai va overwrite=False
        """
        if not await fs_ops.lexists(path):
            if not create:
                raise FileNotFound(path)
            parent = os.path.dirname(path)
            if parent:
                await fs_ops.mkdirp(parent)
        elif not overwrite:
            raise FileExists(path)

        await fs_ops.write_bytes(path, content)

    async def delete(self, path: str, recursive: bool) -> None:
        if recursive:
            await fs_ops.rimraf(path)
        else:
            await fs_ops.unlink(path)

    async def rename(self, old_path: str, new_path: str, overwrite: bool) -> None:
        """
        Di chuyen old_path -> new_path.

        Target ton tai: overwrite=False -> FileExists (khong thay doi gi),
        overwrite=True -> xoa de quy target truoc. Tao thu muc cha neu thieu.
        Target la chinh source (cung path, hoac chi khac hoa thuong tren FS
        khong phan biet hoa thuong) thi khong xoa gi.
        """
        if await fs_ops.lexists(new_path):
            if not overwrite:
                raise FileExists(new_path)
            if not await fs_ops.same_entry(old_path, new_path):
                await fs_ops.rimraf(new_path)

        parent = os.path.dirname(new_path)
        if parent and not await fs_ops.lexists(parent):
            await fs_ops.mkdirp(parent)

        await fs_ops.rename_path(old_path, new_path)

    # ------------------------------------------------------------------
    # Tree data provider
    # ------------------------------------------------------------------

    async def get_children(self, element: Optional[Entry] = None) -> List[Entry]:
        if element is not None:
            base = element.path
        elif self._default_location is not None:
            base = str(self._default_location)
        else:
            return []

        children = sort_listing(await self.read_directory(base))
        log_debug(f"[ScriptsExplorer] Listed {len(children)} entries in {base}")
        return [Entry(os.path.join(base, name), file_type) for name, file_type in children]

    def get_tree_item(self, element: Entry) -> TreeItem:
        is_directory = element.is_directory
        tree_item = TreeItem(
            label=element.name,
            path=element.path,
            collapsible_state=(
                TreeItemCollapsibleState.COLLAPSED
                if is_directory
                else TreeItemCollapsibleState.NONE
            ),
        )
        if not is_directory and element.type & FileType.FILE:
            tree_item.command = Command(
                command=OPEN_FILE_COMMAND,
                title="Open File",
                arguments=[element.path],
            )
            tree_item.context_value = "file"
        return tree_item

    def dispose(self) -> None:
        """Giai phong watcher (dung mot lan) va listeners."""
        watcher = self._watcher
        self._watcher = None
        if watcher is not None:
            watcher.dispose()
        self._on_did_change_file.dispose()
        self._on_did_change_tree_data.dispose()
