# complement_engine/providers/__init__.py
# word sources feeding the three first-letter indexes

from .base import WordProvider
from .current_file import CurrentFileWordProvider
from .custom_dictionary import ColumnDelimiter, CustomDictionaryWordProvider
from .internal_link import InternalLinkWordProvider

__all__ = [
    "WordProvider",
    "CurrentFileWordProvider",
    "ColumnDelimiter",
    "CustomDictionaryWordProvider",
    "InternalLinkWordProvider",
]
