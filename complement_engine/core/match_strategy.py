# complement_engine/core/match_strategy.py
# Named matching policies. Chosen once per deployment through Settings.match_strategy.

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, ClassVar, Dict, List

from complement_engine.core.suggester import suggest_words, suggest_words_by_partial_match
from complement_engine.core.word import IndexedWords, Word

Handler = Callable[[IndexedWords, str, int], List[Word]]


@dataclass(frozen=True)
class MatchStrategy:
    name: str
    handler: Handler

    _values: ClassVar[Dict[str, "MatchStrategy"]] = {}

    @classmethod
    def register(cls, name: str, handler: Handler) -> "MatchStrategy":
        inst = cls(name, handler)
        cls._values[name] = inst
        return inst

    @classmethod
    def from_name(cls, name: str) -> "MatchStrategy":
        try:
            return cls._values[name]
        except KeyError:
            raise ValueError(f"Unknown match strategy: {name!r}") from None

    @classmethod
    def values(cls) -> List["MatchStrategy"]:
        return list(cls._values.values())


PREFIX = MatchStrategy.register("prefix", suggest_words)
PARTIAL = MatchStrategy.register("partial", suggest_words_by_partial_match)
