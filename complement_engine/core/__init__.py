"""
complement_engine.core

The matching/ranking core of the completer.
Contains:
 - Word records and the first-letter index (word)
 - the matcher and the two ranking policies (suggester)
 - the named policy registry (match_strategy)
 - collaborator Protocols (protocols)
"""

from .word import IndexedWords, Judgement, Word, WordsByFirstLetter, push_word
from .suggester import judge, judge_by_partial_match, suggest_words, suggest_words_by_partial_match
from .match_strategy import MatchStrategy

__all__ = [
    "IndexedWords",
    "Judgement",
    "Word",
    "WordsByFirstLetter",
    "push_word",
    "judge",
    "judge_by_partial_match",
    "suggest_words",
    "suggest_words_by_partial_match",
    "MatchStrategy",
]
