# complement_engine/core/word.py
"""
Word records and the per-source first-letter index.

 - Word: a completion candidate (value, description, aliases, link flag).
 - Judgement: outcome of testing one word against one query.
 - WordsByFirstLetter: first character of value -> words, insertion ordered.
 - IndexedWords: the three per-source indexes consumed by the ranking code.

Index buckets are never patched in place once published. Providers build a
fresh dict and assign it in one step (see providers/base.py).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Tuple, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Word:
    """
    A single suggestion candidate.

    value: canonical text shown and inserted
    description: optional secondary text
    aliases: alternate strings which also match this word
    internal_link: True when the word references another document
    matched_alias: set on a matched candidate when the match came through an alias
    offset: set on a matched candidate; token position within a multi-token query
    """

    value: str
    description: Optional[str] = None
    aliases: Tuple[str, ...] = field(default_factory=tuple)
    internal_link: bool = False
    matched_alias: Optional[str] = None
    offset: Optional[int] = None


@dataclass(frozen=True)
class Judgement:
    word: Word
    value: Optional[str] = None
    alias: bool = False


WordsByFirstLetter = Dict[str, List[Word]]


@dataclass(frozen=True)
class IndexedWords:
    """Read-only view over the three source indexes."""

    current_file: WordsByFirstLetter = field(default_factory=dict)
    custom_dictionary: WordsByFirstLetter = field(default_factory=dict)
    internal_link: WordsByFirstLetter = field(default_factory=dict)

    def sources(self) -> Tuple[WordsByFirstLetter, ...]:
        return (self.current_file, self.custom_dictionary, self.internal_link)


def word_identity(word: Word) -> Tuple[str, bool]:
    # aliases, description and offset do not take part in identity
    return (word.value, bool(word.internal_link))


def push_word(words_by_first_letter: WordsByFirstLetter, key: str, word: Word) -> None:
    """Append word to the bucket for key, creating the bucket when absent. No dedup."""
    bucket = words_by_first_letter.get(key)
    if bucket is None:
        words_by_first_letter[key] = [word]
        return
    bucket.append(word)


def group_by_first_letter(words: Iterable[Word], with_aliases: bool = False) -> WordsByFirstLetter:
    """
    Build a brand new index from words.
    with_aliases also files each word under the first letter of every alias,
    so a query typed against an alias reaches the word's bucket.
    """
    out: WordsByFirstLetter = {}
    for w in words:
        if not w.value:
            continue
        push_word(out, w.value[0], w)
        if with_aliases:
            keys = {w.value[0]}
            for a in w.aliases:
                if a and a[0] not in keys:
                    keys.add(a[0])
                    push_word(out, a[0], w)
    return out


def uniq_with(items: Iterable[T], same: Callable[[T, T], bool]) -> List[T]:
    """Order-preserving dedup keeping the first of each equivalent group."""
    out: List[T] = []
    for x in items:
        if any(same(x, y) for y in out):
            continue
        out.append(x)
    return out


def uniq_words(words: Iterable[Word]) -> List[Word]:
    """uniq_with specialised on word identity (value + internal_link), linear time."""
    seen = set()
    out: List[Word] = []
    for w in words:
        key = word_identity(w)
        if key in seen:
            continue
        seen.add(key)
        out.append(w)
    return out
