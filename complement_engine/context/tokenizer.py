# complement_engine/context/tokenizer.py
# Tokenizers used by the trigger state machine and the current-file provider.
# Splits on a trim pattern; can also report each suffix that starts after a separator
# so multi-word phrases can be completed.

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar, Dict, Iterator, List

from complement_engine.core.protocols import QueryToken

TRIM_CHAR_PATTERN = re.compile(r"[\n\t\[\]$/:?!=()<>\"'.,|;*~ `]")
ENGLISH_ONLY_TRIM_CHAR_PATTERN = re.compile(r"[^a-zA-Z0-9_\-#@]")
_NUMBER_ONLY = re.compile(r"^[0-9]+$")


def _split_raw(text: str, pattern: re.Pattern) -> Iterator[str]:
    """Yield tokens and the separator characters between them, in order."""
    previous = 0
    for m in pattern.finditer(text):
        if previous != m.start():
            yield text[previous:m.start()]
        yield text[m.start()]
        previous = m.start() + 1
    if previous != len(text):
        yield text[previous:]


class DefaultTokenizer:
    """
    Whitespace/punctuation tokenizer.
    tokenize("hello, wor") -> ["hello", "wor"]
    recursive_tokenize("hello wor") -> [{"word": "hello wor", "offset": 0}, {"word": "wor", "offset": 6}]
    """

    def tokenize(self, content: str, raw: bool = False) -> List[str]:
        if raw:
            return [x for x in _split_raw(content, self.trim_pattern()) if x != " "]
        return [x for x in self.trim_pattern().split(content) if x != ""]

    def recursive_tokenize(self, content: str) -> List[QueryToken]:
        out: List[QueryToken] = [{"word": content, "offset": 0}]
        for m in self.trim_pattern().finditer(content):
            i = m.start()
            out.append({"word": content[i + 1:], "offset": i + 1})
        return out

    def trim_pattern(self) -> re.Pattern:
        return TRIM_CHAR_PATTERN

    def should_ignore(self, token: str) -> bool:
        return False


class EnglishOnlyTokenizer(DefaultTokenizer):
    """Everything outside ASCII word characters separates tokens; pure numbers are ignored."""

    def trim_pattern(self) -> re.Pattern:
        return ENGLISH_ONLY_TRIM_CHAR_PATTERN

    def should_ignore(self, token: str) -> bool:
        return bool(_NUMBER_ONLY.match(token))


@dataclass(frozen=True)
class TokenizeStrategy:
    name: str
    trigger_threshold: int

    _values: ClassVar[Dict[str, "TokenizeStrategy"]] = {}

    @classmethod
    def register(cls, name: str, trigger_threshold: int) -> "TokenizeStrategy":
        inst = cls(name, trigger_threshold)
        cls._values[name] = inst
        return inst

    @classmethod
    def from_name(cls, name: str) -> "TokenizeStrategy":
        try:
            return cls._values[name]
        except KeyError:
            raise ValueError(f"Unknown tokenize strategy: {name!r}") from None


DEFAULT = TokenizeStrategy.register("default", 3)
ENGLISH_ONLY = TokenizeStrategy.register("english-only", 3)


def create_tokenizer(strategy: TokenizeStrategy) -> DefaultTokenizer:
    if strategy.name == ENGLISH_ONLY.name:
        return EnglishOnlyTokenizer()
    return DefaultTokenizer()
