# complement_engine/core/suggester.py
"""
Matcher + ranking engine.

Two policies:
 - prefix  (suggest_words): only buckets keyed by the query's first letter
   (and its case flip) are read. Cheap, the default.
 - partial (suggest_words_by_partial_match): every bucket of every source is
   judged. An order of magnitude slower on large dictionaries; that cost is
   accepted in exchange for substring recall and is not optimised away here.

Both are pure functions over (indexed_words, query, max_). Ranking order, first
differing key wins, ascending:
   [partial only] matched value literally starts with the raw query
   length of the matched string
   plain word before internal link
   direct match before alias match
Remaining ties keep insertion order (sorted() is stable).

Results are cut to max_ BEFORE dedup, so fewer than max_ words can come back.
Callers size their UI around that; keep it.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Iterable, List

from complement_engine.core.strings import (
    capitalize_first_letter,
    lower_includes_without_space,
    lower_starts_without_space,
)
from complement_engine.core.word import IndexedWords, Judgement, Word, uniq_words

Matcher = Callable[[Word, str, bool], Judgement]


def _matched_by_value(word: Word, query_start_with_upper: bool) -> Judgement:
    if query_start_with_upper and not word.internal_link:
        # link targets keep their exact casing
        c = capitalize_first_letter(word.value)
        return Judgement(word=replace(word, value=c), value=c, alias=False)
    return Judgement(word=word, value=word.value, alias=False)


def _matched_by_alias(word: Word, alias: str) -> Judgement:
    return Judgement(word=replace(word, matched_alias=alias), value=alias, alias=True)


def judge(word: Word, query: str, query_start_with_upper: bool) -> Judgement:
    """Prefix policy for a single word. value is None when nothing matched."""
    if lower_starts_without_space(word.value, query):
        return _matched_by_value(word, query_start_with_upper)

    matched_alias = next(
        (a for a in word.aliases if lower_starts_without_space(a, query)), None
    )
    if matched_alias:
        return _matched_by_alias(word, matched_alias)

    return Judgement(word=word)


def judge_by_partial_match(word: Word, query: str, query_start_with_upper: bool) -> Judgement:
    """Substring policy: prefix first, then value contains, then alias contains."""
    if lower_starts_without_space(word.value, query):
        return _matched_by_value(word, query_start_with_upper)
    if lower_includes_without_space(word.value, query):
        return Judgement(word=word, value=word.value, alias=False)

    matched_alias = next(
        (a for a in word.aliases if lower_includes_without_space(a, query)), None
    )
    if matched_alias:
        return _matched_by_alias(word, matched_alias)

    return Judgement(word=word)


def query_start_with_upper(query: str) -> bool:
    # NB: also True for queries starting with a digit or symbol
    return capitalize_first_letter(query) == query


def _prefix_candidates(indexed_words: IndexedWords, query: str, upper: bool) -> List[Word]:
    first = query[0]
    cf, cd, il = indexed_words.current_file, indexed_words.custom_dictionary, indexed_words.internal_link
    if upper:
        lower = first.lower()
        buckets = [
            cf.get(first), cf.get(lower),
            cd.get(first), cd.get(lower),
            il.get(first), il.get(lower),
        ]
    else:
        # link titles are often capitalised proper nouns, so always read the upper bucket too
        buckets = [cf.get(first), cd.get(first), il.get(first), il.get(first.upper())]
    out: List[Word] = []
    for b in buckets:
        if b:
            out.extend(b)
    return out


def _all_candidates(indexed_words: IndexedWords) -> List[Word]:
    out: List[Word] = []
    for source in indexed_words.sources():
        for bucket in source.values():
            out.extend(bucket)
    return out


def _judge_all(words: Iterable[Word], query: str, upper: bool, matcher: Matcher) -> List[Judgement]:
    return [j for j in (matcher(w, query, upper) for w in words) if j.value is not None]


def suggest_words(indexed_words: IndexedWords, query: str, max_: int) -> List[Word]:
    if not query or max_ <= 0:
        return []

    upper = query_start_with_upper(query)
    judgements = _judge_all(_prefix_candidates(indexed_words, query, upper), query, upper, judge)
    judgements.sort(key=lambda j: (len(j.value), j.word.internal_link, j.alias))

    # no guarantee of exactly max_ results; bounded work matters more
    return uniq_words(j.word for j in judgements[:max_])


def suggest_words_by_partial_match(indexed_words: IndexedWords, query: str, max_: int) -> List[Word]:
    if not query or max_ <= 0:
        return []

    upper = query_start_with_upper(query)
    judgements = _judge_all(_all_candidates(indexed_words), query, upper, judge_by_partial_match)
    judgements.sort(
        key=lambda j: (
            not j.value.startswith(query),
            len(j.value),
            j.word.internal_link,
            j.alias,
        )
    )

    return uniq_words(j.word for j in judgements[:max_])
