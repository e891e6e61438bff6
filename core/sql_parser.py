"""
SQL Block Parser

Tach document thanh cac SQL block co the chay doc lap (dung cho code lens).

Quy tac:
- Statement ket thuc tai ';' nam ngoai string literal va comment
- Dong trong (chi co whitespace) cung ket thuc block
- String: '...', "...", `...` (ho tro escape \\ va quote doi '')
- Comment: -- ..., # ... (toi cuoi dong), /* ... */
- Block chi co whitespace/comment bi bo qua

Position la 0-based (line, character); Range.end la exclusive.
"""

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Position:
    line: int
    character: int


@dataclass(frozen=True)
class Range:
    start: Position
    end: Position


@dataclass(frozen=True)
class SqlBlock:
    """
    Mot SQL block.

    Attributes:
        sql: Noi dung statement da strip, khong kem ';' ket thuc
        range: Tu ky tu co nghia dau tien den ';' (hoac ky tu co nghia cuoi)
    """

    sql: str
    range: Range


_QUOTES = ("'", '"', "`")


class _BlockScanner:
    """State machine duyet tung ky tu, giu vi tri line/column."""

    def __init__(self, text: str):
        self._text = text
        self._blocks: List[SqlBlock] = []

        self._line = 0
        self._col = 0
        self._line_has_content = False

        # Offset/position cua ky tu co nghia dau tien va cuoi cung trong block
        self._start_offset: Optional[int] = None
        self._start_pos: Optional[Position] = None
        self._last_offset = 0
        self._last_pos: Optional[Position] = None

    def scan(self) -> List[SqlBlock]:
        text = self._text
        length = len(text)
        i = 0

        while i < length:
            ch = text[i]
            nxt = text[i + 1] if i + 1 < length else ""

            if ch == "\n":
                if not self._line_has_content:
                    self._flush()
                self._advance_newline()
                i += 1
                continue

            if ch.isspace():
                self._advance(ch)
                i += 1
                continue

            self._line_has_content = True

            if (ch == "-" and nxt == "-") or ch == "#":
                i = self._skip_line_comment(i)
                continue

            if ch == "/" and nxt == "*":
                i = self._skip_block_comment(i)
                continue

            if ch == ";":
                self._finish_with_terminator(i)
                self._advance(ch)
                i += 1
                continue

            if ch in _QUOTES:
                i = self._consume_string(i, ch)
                continue

            self._mark_significant(i)
            self._advance(ch)
            i += 1

        self._flush()
        return self._blocks

    # --- position tracking ---

    def _advance(self, ch: str) -> None:
        if ch == "\n":
            self._advance_newline()
        else:
            self._col += 1

    def _advance_newline(self) -> None:
        self._line += 1
        self._col = 0
        self._line_has_content = False

    def _mark_significant(self, offset: int) -> None:
        pos = Position(self._line, self._col)
        if self._start_offset is None:
            self._start_offset = offset
            self._start_pos = pos
        self._last_offset = offset
        self._last_pos = pos

    # --- skipping ---

    def _skip_line_comment(self, i: int) -> int:
        text = self._text
        while i < len(text) and text[i] != "\n":
            self._col += 1
            i += 1
        return i

    def _skip_block_comment(self, i: int) -> int:
        text = self._text
        self._col += 2
        i += 2
        while i < len(text):
            if text[i] == "*" and i + 1 < len(text) and text[i + 1] == "/":
                self._col += 2
                return i + 2
            self._advance(text[i])
            if text[i] == "\n":
                # Dong trong comment khong tinh la dong trong
                self._line_has_content = True
            i += 1
        return i

    def _consume_string(self, i: int, quote: str) -> int:
        text = self._text
        self._mark_significant(i)
        self._advance(text[i])
        i += 1
        while i < len(text):
            ch = text[i]
            if ch == "\\" and quote != "`" and i + 1 < len(text):
                self._mark_significant(i)
                self._advance(ch)
                self._advance(text[i + 1])
                self._line_has_content = True
                i += 2
                continue
            self._mark_significant(i)
            self._advance(ch)
            if ch == "\n":
                self._line_has_content = True
            i += 1
            if ch == quote:
                if i < len(text) and text[i] == quote:
                    # Quote doi -> van trong string
                    self._mark_significant(i)
                    self._advance(text[i])
                    i += 1
                    continue
                return i
        return i

    # --- emitting ---

    def _finish_with_terminator(self, offset: int) -> None:
        if self._start_offset is None or self._start_pos is None:
            return
        sql = self._text[self._start_offset : offset].strip()
        end = Position(self._line, self._col + 1)
        self._emit(sql, Range(self._start_pos, end))

    def _flush(self) -> None:
        if self._start_offset is None or self._start_pos is None or self._last_pos is None:
            return
        sql = self._text[self._start_offset : self._last_offset + 1].strip()
        end = Position(self._last_pos.line, self._last_pos.character + 1)
        self._emit(sql, Range(self._start_pos, end))

    def _emit(self, sql: str, block_range: Range) -> None:
        if sql:
            self._blocks.append(SqlBlock(sql=sql, range=block_range))
        self._start_offset = None
        self._start_pos = None
        self._last_pos = None


def parse_blocks(text: str) -> List[SqlBlock]:
    """
    Parse document thanh danh sach SQL block theo thu tu xuat hien.

    Args:
        text: Toan bo noi dung document

    Returns:
        List SqlBlock (rong neu khong co statement nao)
    """
    if not text:
        return []
    return _BlockScanner(text).scan()
