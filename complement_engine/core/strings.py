# complement_engine/core/strings.py
# Small string predicates shared by the matcher and the providers.

import re

_ALPHABETS = re.compile(r"^[a-zA-Z0-9_-]+$")


def _exclude_space(s: str) -> str:
    return s.replace(" ", "")


def lower_starts_with(a: str, b: str) -> bool:
    return a.lower().startswith(b.lower())


def lower_starts_without_space(one: str, other: str) -> bool:
    """Case-insensitive prefix test; spaces in both strings are ignored."""
    return lower_starts_with(_exclude_space(one), _exclude_space(other))


def lower_includes(a: str, b: str) -> bool:
    return b.lower() in a.lower()


def lower_includes_without_space(one: str, other: str) -> bool:
    """Case-insensitive substring test; spaces in both strings are ignored."""
    return lower_includes(_exclude_space(one), _exclude_space(other))


def capitalize_first_letter(s: str) -> str:
    # only the first character; the rest is kept as is ("new york" -> "New york")
    return s[:1].upper() + s[1:]


def all_alphabets(s: str) -> bool:
    return bool(_ALPHABETS.match(s))
