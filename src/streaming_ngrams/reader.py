"""
Pull-based character readers that feed the n-gram window.

A reader hands out *units*: the elements of a Python ``str``. Most streams
deliver whole code points, but text that originated as UTF-16 (for example
decoded with ``errors="surrogatepass"``) may carry surrogate pairs as two
separate units. The window recombines those pairs, so readers never need to
care where a batch ends.
"""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Protocol, Union


@dataclass(slots=True)
class FillResult:
    """Units returned by one fill call and whether more may follow."""

    text: str
    more: bool


class SupportsRead(Protocol):
    def read(self, size: int = ..., /) -> str: ...


class CharStreamReader(ABC):
    """Abstract source of text units for the tokenizer."""

    @abstractmethod
    def fill(self, count: int) -> FillResult:
        """Read up to ``count`` units; an empty result means end of stream."""
        raise NotImplementedError


class TextStreamReader(CharStreamReader):
    """Adapt a text-mode file object (anything with ``read(n)``) into a reader."""

    def __init__(self, stream: SupportsRead, chunk_size: int | None = None) -> None:
        if chunk_size is not None and chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self._stream = stream
        self._chunk_size = chunk_size
        self._eof = False

    def fill(self, count: int) -> FillResult:
        if count < 1:
            raise ValueError(f"count must be positive, got {count}")
        if self._eof:
            return FillResult(text="", more=False)
        chunks: list[str] = []
        remaining = count
        while remaining > 0:
            size = remaining if self._chunk_size is None else min(remaining, self._chunk_size)
            chunk = self._stream.read(size)
            if not chunk:
                self._eof = True
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        return FillResult(text="".join(chunks), more=not self._eof)


class StringReader(TextStreamReader):
    """Reader over an in-memory string."""

    def __init__(self, text: str) -> None:
        super().__init__(io.StringIO(text))


ReaderSource = Union[str, CharStreamReader, SupportsRead]


def as_reader(source: ReaderSource) -> CharStreamReader:
    """Wrap strings and text streams so the tokenizer only sees CharStreamReader."""
    if isinstance(source, CharStreamReader):
        return source
    if isinstance(source, str):
        return StringReader(source)
    if callable(getattr(source, "read", None)):
        return TextStreamReader(source)
    raise TypeError(f"Unsupported reader source: {type(source)!r}")
