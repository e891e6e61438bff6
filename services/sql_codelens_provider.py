"""
SQL Code Lens Provider - Gan lens "Run SQL" cho tung SQL block trong document.

Moi block tu core.sql_parser tao mot CodeLens voi command
"mysql.codeLens.run", arguments = [sql, duong dan document].
Title hien ten connection dang active (hoac "[no connection]").
"""

from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from config.app_settings import AppSettings
from core.events import EventEmitter
from core.fs_errors import CancellationToken, check_cancellation
from core.logging_config import log_debug
from core.sql_parser import Range, parse_blocks
from core.view_types import Command

RUN_SQL_COMMAND = "mysql.codeLens.run"
NO_CONNECTION_LABEL = "[no connection]"


@dataclass(frozen=True)
class TextDocument:
    """Document dang mo trong editor."""

    fs_path: str
    text: str

    def get_text(self) -> str:
        return self.text


@dataclass(frozen=True)
class CodeLens:
    range: Range
    command: Command


def _display_name(node: Any) -> str:
    """Uu tien name, fallback label (giong cach connection tree dat ten)."""
    return getattr(node, "name", None) or getattr(node, "label", None) or ""


class SqlCodeLensProvider:
    """
    Provider code lens cho SQL document.

    Attributes:
        active_connection_name: "<connection> <database>" hoac None
    """

    def __init__(self, get_settings: Callable[[], AppSettings]):
        """
        Args:
            get_settings: Ham tra ve AppSettings hien tai (doc lai moi lan)
        """
        self._get_settings = get_settings
        self.active_connection_name: Optional[str] = None
        self._on_did_change_code_lenses: EventEmitter[None] = EventEmitter()

    @property
    def on_did_change_code_lenses(self) -> EventEmitter[None]:
        return self._on_did_change_code_lenses

    def refresh(self, node: Any) -> None:
        """
        Cap nhat connection active tu node duoc chon va bao host ve lai lens.

        Args:
            node: Node database, co .parent la node connection
        """
        parent = getattr(node, "parent", None)
        database = getattr(node, "label", None) or getattr(node, "name", None) or ""
        self.active_connection_name = f"{_display_name(parent)} {database}"
        log_debug(f"[CodeLens] Active connection: {self.active_connection_name}")
        self._on_did_change_code_lenses.fire(None)

    def provide_code_lenses(
        self, document: TextDocument, token: Optional[CancellationToken] = None
    ) -> List[CodeLens]:
        check_cancellation(token)
        return self.parse_code_lens(document)

    def resolve_code_lens(
        self, code_lens: CodeLens, token: Optional[CancellationToken] = None
    ) -> CodeLens:
        raise NotImplementedError("Method not implemented.")

    def parse_code_lens(self, document: TextDocument) -> List[CodeLens]:
        if self._get_settings().disable_sql_codelens:
            return []

        connection = self.active_connection_name
        if connection is None:
            connection = NO_CONNECTION_LABEL
        return [
            CodeLens(
                range=block.range,
                command=Command(
                    command=RUN_SQL_COMMAND,
                    title=f"{connection} ▶ Run SQL",
                    arguments=[block.sql, document.fs_path],
                ),
            )
            for block in parse_blocks(document.get_text())
        ]
