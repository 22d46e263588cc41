from __future__ import annotations

import unicodedata
from typing import Callable

TokenCharPredicate = Callable[[int], bool]

EXCLUDE_PREFIX = "exclude:"


def all_token_chars(code_point: int) -> bool:
    """Default classifier: the whole stream is a single run."""
    return True


def not_whitespace(code_point: int) -> bool:
    return not chr(code_point).isspace()


def letters_or_digits(code_point: int) -> bool:
    category = unicodedata.category(chr(code_point))
    return category[0] in ("L", "N")


def excluding(chars: str) -> TokenCharPredicate:
    """Build a classifier that treats every code point in ``chars`` as a delimiter."""
    delimiters = frozenset(ord(char) for char in chars)

    def is_token_char(code_point: int) -> bool:
        return code_point not in delimiters

    return is_token_char


_NAMED_CLASSIFIERS: dict[str, TokenCharPredicate] = {
    "all": all_token_chars,
    "not_whitespace": not_whitespace,
    "letters_or_digits": letters_or_digits,
}


def available_classifiers() -> list[str]:
    return sorted(_NAMED_CLASSIFIERS) + [f"{EXCLUDE_PREFIX}<chars>"]


def create_classifier(name: str) -> TokenCharPredicate:
    """Factory for token-char classifiers by name."""
    if name.startswith(EXCLUDE_PREFIX):
        chars = name[len(EXCLUDE_PREFIX) :]
        if not chars:
            raise ValueError("exclude: classifier needs at least one character.")
        return excluding(chars)
    normalized = name.lower().strip().replace("-", "_")
    try:
        return _NAMED_CLASSIFIERS[normalized]
    except KeyError:
        raise ValueError(f"Unknown token-char classifier '{name}'.") from None
