"""
Ignore Strategies cho File Watcher.

Chua cac implementation cua IIgnoreStrategy:
- DefaultIgnoreStrategy: Bo qua cac thu muc pho bien (.git, node_modules, ...)
- PathSpecIgnoreStrategy: Bo qua theo pattern gitignore-style (excludes)
- CompositeIgnoreStrategy: Ket hop nhieu strategies
"""

import os
from pathlib import Path
from typing import Iterable, List, Set

import pathspec

from services.interfaces.file_watcher_service import IIgnoreStrategy


class DefaultIgnoreStrategy(IIgnoreStrategy):
    """
    Ignore strategy mac dinh - bo qua cac thu muc pho bien.

    Attributes:
        IGNORED_PATTERNS: Set cac ten thu muc can bo qua
    """

    IGNORED_PATTERNS: Set[str] = {
        ".git",
        "__pycache__",
        ".pytest_cache",
        "node_modules",
        ".venv",
        "venv",
        ".idea",
        ".vscode",
        ".mypy_cache",
    }

    def should_ignore(self, path: str) -> bool:
        """
        Kiem tra path co nam trong thu muc can bo qua khong.

        Args:
            path: Duong dan tuyet doi can kiem tra

        Returns:
            True neu bat ky phan nao cua path nam trong IGNORED_PATTERNS
        """
        path_parts = Path(path).parts
        return any(part in self.IGNORED_PATTERNS for part in path_parts)


class PathSpecIgnoreStrategy(IIgnoreStrategy):
    """
    Bo qua path khop voi pattern gitignore-style.

    Pattern duoc match voi path tuong doi so voi root. Path nam ngoai
    root khong bao gio bi bo qua.
    """

    def __init__(self, root: Path, patterns: Iterable[str]):
        self._root = os.path.abspath(str(root))
        self._patterns: List[str] = [p for p in patterns if p.strip()]
        self._spec = pathspec.PathSpec.from_lines("gitwildmatch", self._patterns)

    @property
    def patterns(self) -> List[str]:
        return list(self._patterns)

    def should_ignore(self, path: str) -> bool:
        if not self._patterns:
            return False

        try:
            rel_path = os.path.relpath(os.path.abspath(path), self._root)
        except ValueError:
            # Khac drive tren Windows
            return False

        if rel_path == "." or rel_path.startswith(".."):
            return False

        rel_path = rel_path.replace(os.sep, "/")
        if self._spec.match_file(rel_path):
            return True
        # Pattern dang "dir/" chi match khi co dau / o cuoi
        return os.path.isdir(path) and self._spec.match_file(rel_path + "/")


class CompositeIgnoreStrategy(IIgnoreStrategy):
    """Bo qua path neu bat ky strategy con nao bo qua."""

    def __init__(self, strategies: Iterable[IIgnoreStrategy]):
        self._strategies = list(strategies)

    def should_ignore(self, path: str) -> bool:
        return any(strategy.should_ignore(path) for strategy in self._strategies)
