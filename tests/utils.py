from __future__ import annotations

import random
from typing import Callable, List, Tuple

from streaming_ngrams.reader import CharStreamReader, FillResult

Expected = Tuple[str, int, int]


class TrickleReader(CharStreamReader):
    """Hands out at most ``step`` units per fill call to force many refills."""

    def __init__(self, text: str, step: int = 1) -> None:
        self._text = text
        self._pos = 0
        self._step = step
        self.calls = 0

    def fill(self, count: int) -> FillResult:
        self.calls += 1
        size = min(count, self._step)
        chunk = self._text[self._pos : self._pos + size]
        self._pos += len(chunk)
        return FillResult(text=chunk, more=self._pos < len(self._text))


class FailingReader(CharStreamReader):
    def __init__(self, text: str) -> None:
        self._text = text
        self._served = False

    def fill(self, count: int) -> FillResult:
        if self._served:
            raise OSError("disk went away")
        self._served = True
        return FillResult(text=self._text[:count], more=True)


def utf16_width(char: str) -> int:
    return 2 if ord(char) > 0xFFFF else 1


def to_surrogate_units(text: str) -> str:
    """Spell every astral character as two surrogate units."""
    units: List[str] = []
    for char in text:
        code_point = ord(char)
        if code_point > 0xFFFF:
            code_point -= 0x10000
            units.append(chr(0xD800 + (code_point >> 10)))
            units.append(chr(0xDC00 + (code_point & 0x3FF)))
        else:
            units.append(char)
    return "".join(units)


def reference_ngrams(
    text: str,
    min_gram: int,
    max_gram: int,
    is_token_char: Callable[[int], bool] = lambda cp: True,
    edges_only: bool = False,
    width: Callable[[str], int] = lambda char: 1,
) -> List[Expected]:
    """Every gram the tokenizer must emit, in emission order."""
    offsets = [0]
    for char in text:
        offsets.append(offsets[-1] + width(char))
    # run_end[i] is the first delimiter at or after i
    run_end = [len(text)] * (len(text) + 1)
    for i in range(len(text) - 1, -1, -1):
        run_end[i] = run_end[i + 1] if is_token_char(ord(text[i])) else i
    expected: List[Expected] = []
    for start in range(len(text)):
        if edges_only and start > 0 and is_token_char(ord(text[start - 1])):
            continue
        stop = min(start + max_gram, run_end[start])
        for end in range(start + min_gram, stop + 1):
            expected.append((text[start:end], offsets[start], offsets[end]))
    return expected


def random_text(rng: random.Random, length: int, alphabet: str) -> str:
    return "".join(rng.choice(alphabet) for _ in range(length))


def random_unicode_text(rng: random.Random, length: int) -> str:
    """Mix ASCII, BMP and astral code points, skipping lone surrogates."""
    chars: List[str] = []
    while len(chars) < length:
        bucket = rng.random()
        if bucket < 0.4:
            code_point = rng.randint(0x20, 0x7E)
        elif bucket < 0.7:
            code_point = rng.randint(0xA0, 0xD7FF)
        else:
            code_point = rng.randint(0x10000, 0x10FFFF)
        chars.append(chr(code_point))
    return "".join(chars)
