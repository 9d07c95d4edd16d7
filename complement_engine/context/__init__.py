# complement_engine/context/__init__.py
# tokenizers that split editor text into completion tokens

from .tokenizer import (
    DefaultTokenizer,
    EnglishOnlyTokenizer,
    TokenizeStrategy,
    create_tokenizer,
)

__all__ = [
    "DefaultTokenizer",
    "EnglishOnlyTokenizer",
    "TokenizeStrategy",
    "create_tokenizer",
]
