from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Callable, List

from .models import Token
from .tokenizer import NGramTokenizer


class TokenSink(ABC):
    """Receiver for emitted tokens and the end-of-stream offset."""

    @abstractmethod
    def accept(self, token: Token) -> None:
        raise NotImplementedError

    def finish(self, final_offset: int) -> None:
        """Called once after the last token with the corrected end offset."""

    def correct_offset(self, offset: int) -> int:
        """Map a tokenizer offset to an external one; identity unless overridden."""
        return offset


class CollectingSink(TokenSink):
    """Keeps every token in memory."""

    def __init__(self) -> None:
        self.tokens: List[Token] = []
        self.final_offset: int | None = None

    def accept(self, token: Token) -> None:
        self.tokens.append(token)

    def finish(self, final_offset: int) -> None:
        self.final_offset = final_offset


class CallableSink(TokenSink):
    """Adapt an arbitrary callable into the TokenSink interface."""

    def __init__(self, func: Callable[[Token], None]) -> None:
        self._func = func

    def accept(self, token: Token) -> None:
        self._func(token)


class JsonLinesSink(TokenSink):
    """Write one document as a single JSON line while its tokens stream in.

    Nothing is buffered: each token is serialized as soon as it arrives and
    the line is closed with ``final_offset`` when the pass finishes.
    """

    def __init__(self, write: Callable[[str], object], doc_id: str) -> None:
        self._write = write
        self.count = 0
        write(f'{{"doc_id": {json.dumps(doc_id, ensure_ascii=False)}, "tokens": [')

    def accept(self, token: Token) -> None:
        payload = {"term": token.text, "start": token.start_offset, "end": token.end_offset}
        if self.count:
            self._write(", ")
        self._write(json.dumps(payload, ensure_ascii=False))
        self.count += 1

    def finish(self, final_offset: int) -> None:
        self._write(f'], "final_offset": {final_offset}}}\n')


def drain(tokenizer: NGramTokenizer, sink: TokenSink) -> int:
    """Push every remaining token of the current pass into ``sink``.

    The sink's ``correct_offset`` is applied on top of the tokenizer's own
    hook for the duration of the pass. Returns the number of tokens emitted.
    """
    inner = tokenizer.correct_offset
    tokenizer.correct_offset = lambda offset: sink.correct_offset(inner(offset))
    try:
        count = 0
        for token in tokenizer:
            sink.accept(token)
            count += 1
        sink.finish(tokenizer.end())
    finally:
        tokenizer.correct_offset = inner
    return count
