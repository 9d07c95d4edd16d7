# complement_engine/suggest/buffer.py
"""
In-memory editor and workspace.

TextBuffer implements EditorProtocol over a list of lines; InMemoryWorkspace
implements WorkspaceProtocol around one buffer. The CLI drives the completer
through them, and they double as the fakes in tests.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from complement_engine.core.protocols import EditorPosition, LinkTarget


class TextBuffer:
    def __init__(self, text: str = "", cursor: Optional[EditorPosition] = None):
        self.lines: List[str] = text.split("\n")
        self._cursor = EditorPosition(0, 0)
        if cursor is None:
            cursor = EditorPosition(len(self.lines) - 1, len(self.lines[-1]))
        self.set_cursor(cursor)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    def _clamp(self, pos: EditorPosition) -> EditorPosition:
        line = min(max(pos.line, 0), len(self.lines) - 1)
        ch = min(max(pos.ch, 0), len(self.lines[line]))
        return EditorPosition(line, ch)

    # EditorProtocol ----------------------------------------------------
    def get_cursor(self) -> EditorPosition:
        return self._cursor

    def set_cursor(self, pos: EditorPosition) -> None:
        self._cursor = self._clamp(pos)

    def get_line(self, line: int) -> str:
        if 0 <= line < len(self.lines):
            return self.lines[line]
        return ""

    def line_count(self) -> int:
        return len(self.lines)

    def pos_to_offset(self, pos: EditorPosition) -> int:
        pos = self._clamp(pos)
        # +1 per newline
        return sum(len(ln) + 1 for ln in self.lines[: pos.line]) + pos.ch

    def offset_to_pos(self, offset: int) -> EditorPosition:
        offset = max(offset, 0)
        for i, ln in enumerate(self.lines):
            if offset <= len(ln):
                return EditorPosition(i, offset)
            offset -= len(ln) + 1
        return EditorPosition(len(self.lines) - 1, len(self.lines[-1]))

    def get_range(self, start: EditorPosition, end: EditorPosition) -> str:
        return self.text[self.pos_to_offset(start):self.pos_to_offset(end)]

    def replace_range(self, text: str, start: EditorPosition, end: EditorPosition) -> None:
        """Replace [start, end) with text and put the cursor right after it."""
        a, b = self.pos_to_offset(start), self.pos_to_offset(end)
        if b < a:
            a, b = b, a
        whole = self.text
        self.lines = (whole[:a] + text + whole[b:]).split("\n")
        self._cursor = self.offset_to_pos(a + len(text))

    def insert(self, text: str) -> None:
        """Type text at the cursor."""
        self.replace_range(text, self._cursor, self._cursor)


class InMemoryWorkspace:
    def __init__(self,
                 editor: Optional[TextBuffer] = None,
                 links: Iterable[LinkTarget] = (),
                 ime_on: bool = False):
        self.editor = editor
        self.links: List[LinkTarget] = list(links)
        self.ime_on = ime_on

    def get_current_editor(self) -> Optional[TextBuffer]:
        return self.editor

    def get_active_file_content(self) -> Optional[str]:
        return None if self.editor is None else self.editor.text

    def get_link_targets(self) -> Iterable[LinkTarget]:
        return list(self.links)

    def is_ime_on(self) -> bool:
        return self.ime_on
