# complement_engine/core/protocols.py
"""
Protocol interfaces for the collaborators around the completion core.

The core never talks to a concrete editor, file system or tokenizer. It depends
on these small Protocols instead, so hosts (the CLI buffer, the Textual TUI,
tests) plug in their own implementations.
Keep this file stable.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Iterable, List, Optional, Protocol, Sequence, runtime_checkable

from typing_extensions import TypedDict


# Typed structures ------------------------------------------------------------

@dataclass(frozen=True)
class EditorPosition:
    line: int
    ch: int


class QueryToken(TypedDict):
    """
    One token of the phrase being completed, e.g. {"word": "wor", "offset": 6}.
    offset is measured from the first token of the phrase window.
    """
    word: str
    offset: int


@dataclass(frozen=True)
class LinkTarget:
    """A document that can be linked to: its title, path and display aliases."""
    title: str
    path: str = ""
    aliases: Sequence[str] = ()


# Protocols ------------------------------------------------------------------

@runtime_checkable
class EditorProtocol(Protocol):
    """Narrow view of a text editing surface."""

    def get_cursor(self) -> EditorPosition:
        ...

    def get_line(self, line: int) -> str:
        ...

    def line_count(self) -> int:
        ...

    def get_range(self, start: EditorPosition, end: EditorPosition) -> str:
        ...

    def replace_range(self, text: str, start: EditorPosition, end: EditorPosition) -> None:
        """The only mutation the completer performs on a document."""
        ...

    def set_cursor(self, pos: EditorPosition) -> None:
        ...

    def pos_to_offset(self, pos: EditorPosition) -> int:
        ...

    def offset_to_pos(self, offset: int) -> EditorPosition:
        ...


@runtime_checkable
class WorkspaceProtocol(Protocol):
    """Host application services: active editor, active document, link targets, IME state."""

    def get_current_editor(self) -> Optional[EditorProtocol]:
        ...

    def get_active_file_content(self) -> Optional[str]:
        ...

    def get_link_targets(self) -> Iterable[LinkTarget]:
        ...

    def is_ime_on(self) -> bool:
        ...


@runtime_checkable
class TokenizerProtocol(Protocol):

    def tokenize(self, content: str, raw: bool = False) -> List[str]:
        """
        raw=False: tokens only.
        raw=True: tokens and the separators between them (single spaces dropped).
        """
        ...

    def recursive_tokenize(self, content: str) -> List[QueryToken]:
        """Every suffix of content that starts right after a separator, plus content itself."""
        ...

    def trim_pattern(self) -> re.Pattern:
        ...

    def should_ignore(self, token: str) -> bool:
        ...
