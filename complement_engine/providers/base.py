# complement_engine/providers/base.py
"""
WordProvider - base class for every word source.

A provider owns exactly one first-letter index. Refreshing never touches the
published dict: a new index is built on the side and assigned to
`words_by_first_letter` in one statement. A query running between two awaits
therefore sees either the old snapshot or the new one, never a half built
bucket. Concurrent refreshes resolve as last write wins.
"""

from __future__ import annotations

from typing import Iterable, List

from complement_engine.core.word import Word, WordsByFirstLetter, group_by_first_letter


class WordProvider:
    name: str = "provider"

    def __init__(self) -> None:
        self.words: List[Word] = []
        self.words_by_first_letter: WordsByFirstLetter = {}

    def clear_words(self) -> None:
        self._publish([], {})

    def _publish(self, words: List[Word], index: WordsByFirstLetter) -> None:
        # single assignment per attribute; no bucket of a live index is mutated
        self.words = words
        self.words_by_first_letter = index

    def _publish_words(self, words: Iterable[Word], with_aliases: bool = False) -> None:
        words = list(words)
        self._publish(words, group_by_first_letter(words, with_aliases=with_aliases))

    def size(self) -> int:
        return len(self.words)
