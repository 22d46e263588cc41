"""
Streaming n-gram tokenizer.

For example, "abcde" is tokenized as (min_gram=2, max_gram=3)::

    term     ab     abc    bc     bcd    cd     cde    de
    offsets  [0,2)  [0,3)  [1,3)  [1,4)  [2,4)  [2,5)  [3,5)

Tokens are emitted by increasing start offset, grams are counted in code
points (surrogate pairs are never split) and an optional token-char
classifier pre-tokenizes the stream so grams never cross a delimiter.
"""

from __future__ import annotations

from typing import Callable, Iterator, List

from .buffer import CodePointWindow
from .classifiers import TokenCharPredicate, create_classifier
from .config import (
    BUFFER_INCREMENT,
    DEFAULT_EDGE_MAX_NGRAM_SIZE,
    DEFAULT_MAX_NGRAM_SIZE,
    DEFAULT_MIN_NGRAM_SIZE,
    NGramTokenizerConfig,
    OffsetUnit,
)
from .emission import EmissionState, next_gram
from .models import Token
from .reader import CharStreamReader, ReaderSource, as_reader

OffsetCorrector = Callable[[int], int]


def _identity(offset: int) -> int:
    return offset


class NGramTokenizer:
    """Pull-based n-gram tokenizer over a character stream.

    Instances are single-threaded and reusable only through ``reset``.
    """

    def __init__(
        self,
        min_gram: int = DEFAULT_MIN_NGRAM_SIZE,
        max_gram: int = DEFAULT_MAX_NGRAM_SIZE,
        keep_short_term: bool = False,
        keep_long_term: bool = False,
        *,
        edges_only: bool = False,
        is_token_char: TokenCharPredicate | None = None,
        token_chars: str = "all",
        offset_unit: OffsetUnit | str = OffsetUnit.CODEPOINT,
        correct_offset: OffsetCorrector | None = None,
        buffer_increment: int = BUFFER_INCREMENT,
    ) -> None:
        unit = offset_unit.value if isinstance(offset_unit, OffsetUnit) else offset_unit
        self._config = NGramTokenizerConfig(
            min_gram=min_gram,
            max_gram=max_gram,
            keep_short_term=keep_short_term,
            keep_long_term=keep_long_term,
            edges_only=edges_only,
            token_chars=token_chars,
            offset_unit=unit,
            buffer_increment=buffer_increment,
        ).validate()
        self._is_token_char = is_token_char or create_classifier(self._config.token_chars)
        self.correct_offset: OffsetCorrector = correct_offset or _identity
        self._window = CodePointWindow(
            self._config.initial_capacity, self._is_token_char, self._config.unit
        )
        self._state = EmissionState(gram_size=self._config.min_gram)
        self._reader: CharStreamReader | None = None
        self._ready = False
        self.token: Token | None = None
        self.final_offset: int | None = None

    @property
    def config(self) -> NGramTokenizerConfig:
        return self._config

    @property
    def min_gram(self) -> int:
        return self._config.min_gram

    @property
    def max_gram(self) -> int:
        return self._config.max_gram

    @property
    def edges_only(self) -> bool:
        return self._config.edges_only

    def is_token_char(self, code_point: int) -> bool:
        return self._is_token_char(code_point)

    def set_reader(self, source: ReaderSource) -> None:
        """Attach a new input; ``reset`` must follow before tokens are read."""
        self._reader = as_reader(source)
        self._ready = False

    def reset(self, source: ReaderSource | None = None) -> None:
        """Start a fresh pass over ``source`` (or the reader set earlier)."""
        if source is not None:
            self.set_reader(source)
        if self._reader is None:
            raise RuntimeError("No reader attached; pass a source to reset() first.")
        self._window.reset(self._reader)
        self._state.gram_size = self._config.min_gram
        self.token = None
        self.final_offset = None
        self._ready = True

    def increment_token(self) -> bool:
        """Advance to the next gram, exposing it as ``self.token``."""
        if not self._ready:
            raise RuntimeError("reset() must be called before consuming tokens.")
        gram = next_gram(self._state, self._window, self._config)
        if gram is None:
            self.token = None
            return False
        self.token = Token(
            text=gram.text,
            start_offset=self.correct_offset(gram.start),
            end_offset=self.correct_offset(gram.end),
        )
        return True

    def next_token(self) -> Token | None:
        if self.increment_token():
            return self.token
        return None

    def __iter__(self) -> Iterator[Token]:
        while self.increment_token():
            assert self.token is not None
            yield self.token

    def end(self) -> int:
        """Return the corrected offset of the true end of the stream."""
        if not self._ready:
            raise RuntimeError("reset() must be called before end().")
        end_offset = self._window.offset + self._window.remaining_width()
        self.final_offset = self.correct_offset(end_offset)
        return self.final_offset

    def tokenize(self, source: ReaderSource) -> List[Token]:
        """Run one full pass over ``source`` and return every token."""
        self.reset(source)
        tokens = list(self)
        self.end()
        return tokens


def edge_ngram_tokenizer(
    min_gram: int = DEFAULT_MIN_NGRAM_SIZE,
    max_gram: int = DEFAULT_EDGE_MAX_NGRAM_SIZE,
    keep_short_term: bool = False,
    keep_long_term: bool = False,
    *,
    is_token_char: TokenCharPredicate | None = None,
    token_chars: str = "all",
    offset_unit: OffsetUnit | str = OffsetUnit.CODEPOINT,
    correct_offset: OffsetCorrector | None = None,
    buffer_increment: int = BUFFER_INCREMENT,
) -> NGramTokenizer:
    """Build a tokenizer that only emits grams anchored at the start of a run."""
    return NGramTokenizer(
        min_gram,
        max_gram,
        keep_short_term,
        keep_long_term,
        edges_only=True,
        is_token_char=is_token_char,
        token_chars=token_chars,
        offset_unit=offset_unit,
        correct_offset=correct_offset,
        buffer_increment=buffer_increment,
    )


def create_tokenizer(
    config: NGramTokenizerConfig,
    *,
    is_token_char: TokenCharPredicate | None = None,
    correct_offset: OffsetCorrector | None = None,
) -> NGramTokenizer:
    """Convenience helper to build a tokenizer from NGramTokenizerConfig."""
    config.validate()
    return NGramTokenizer(
        config.min_gram,
        config.max_gram,
        config.keep_short_term,
        config.keep_long_term,
        edges_only=config.edges_only,
        is_token_char=is_token_char,
        token_chars=config.token_chars,
        offset_unit=config.offset_unit,
        correct_offset=correct_offset,
        buffer_increment=config.buffer_increment,
    )
