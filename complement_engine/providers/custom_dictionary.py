# complement_engine/providers/custom_dictionary.py
"""
User dictionaries read from local files.

Line format (delimiter configurable):
    value<delim>description<delim>alias1<delim>alias2 ...
Only value is required. Blank lines are skipped. Every word is filed under
the first letter of its value and of each alias.

An unreadable file is logged and skipped; the other files still index.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Dict, List, Optional, Sequence

from complement_engine.core.word import Word
from complement_engine.providers.base import WordProvider
from complement_engine.utils.logger_utils import Log


@dataclass(frozen=True)
class ColumnDelimiter:
    name: str
    value: str

    _values: ClassVar[Dict[str, "ColumnDelimiter"]] = {}

    @classmethod
    def register(cls, name: str, value: str) -> "ColumnDelimiter":
        inst = cls(name, value)
        cls._values[name] = inst
        return inst

    @classmethod
    def from_name(cls, name: str) -> "ColumnDelimiter":
        try:
            return cls._values[name]
        except KeyError:
            raise ValueError(f"Unknown column delimiter: {name!r}") from None


TAB = ColumnDelimiter.register("Tab", "\t")
COMMA = ColumnDelimiter.register("Comma", ",")
PIPE = ColumnDelimiter.register("Pipe", "|")


def line_to_word(line: str, delimiter: ColumnDelimiter) -> Word:
    value, *rest = line.split(delimiter.value)
    description: Optional[str] = rest[0] if rest and rest[0] else None
    aliases = tuple(a for a in rest[1:] if a)
    return Word(value=value, description=description, aliases=aliases)


class CustomDictionaryWordProvider(WordProvider):
    name = "custom_dictionary"

    def __init__(self, paths: Sequence[str], delimiter: ColumnDelimiter = TAB) -> None:
        super().__init__()
        self.paths: List[str] = list(paths)
        self.delimiter = delimiter

    def update(self, paths: Sequence[str], delimiter: ColumnDelimiter) -> None:
        self.paths = list(paths)
        self.delimiter = delimiter

    async def _load_words(self, path: str) -> List[Word]:
        text = await asyncio.to_thread(Path(path).read_text, encoding="utf8")
        return [line_to_word(ln, self.delimiter) for ln in text.splitlines() if ln.strip()]

    async def refresh_custom_words(self) -> None:
        words: List[Word] = []
        for path in self.paths:
            try:
                words.extend(await self._load_words(path))
            except (OSError, UnicodeDecodeError) as e:
                Log.error(f"[CustomDictionary] failed to load {path}: {e}")
        self._publish_words((w for w in words if w.value), with_aliases=True)
