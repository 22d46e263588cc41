"""
Sliding code-point window over a pull-based reader.

The backing list is split into three regions::

    [0, start)          retired code points
    [start, end)        live code points available for grams
    [end, capacity)     free space for the next refill

Compaction moves the live region to index 0 and rebases every index that
points into it (``end`` plus the run classifier cache) by the same shift.

Each slot also remembers how many stream units produced it (2 for a joined
surrogate pair), so offsets and term text always index the original stream.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

from .classifiers import TokenCharPredicate
from .config import OffsetUnit
from .models import Gram
from .reader import CharStreamReader

LOGGER = logging.getLogger(__name__)

HIGH_SURROGATES = range(0xD800, 0xDC00)
LOW_SURROGATES = range(0xDC00, 0xE000)


def to_code_points(units: str, final: bool) -> Tuple[List[int], List[int], str]:
    """Decode units into code points, joining surrogate pairs.

    Returns the code points, the number of units each one was read from, and
    any trailing high surrogate that must wait for the next batch. When
    ``final`` is set nothing is held back and a dangling high surrogate is
    passed through as is.
    """
    code_points: List[int] = []
    unit_counts: List[int] = []
    size = len(units)
    i = 0
    while i < size:
        unit = ord(units[i])
        if unit in HIGH_SURROGATES:
            if i + 1 < size:
                low = ord(units[i + 1])
                if low in LOW_SURROGATES:
                    code_points.append(0x10000 + ((unit - 0xD800) << 10) + (low - 0xDC00))
                    unit_counts.append(2)
                    i += 2
                    continue
            elif not final:
                return code_points, unit_counts, units[i]
        code_points.append(unit)
        unit_counts.append(1)
        i += 1
    return code_points, unit_counts, ""


def _spell(code_point: int, unit_count: int) -> str:
    if unit_count == 2:
        code_point -= 0x10000
        return chr(0xD800 + (code_point >> 10)) + chr(0xDC00 + (code_point & 0x3FF))
    return chr(code_point)


class CodePointWindow:
    """Growable code-point buffer plus the cursor fields that index into it."""

    def __init__(
        self,
        capacity: int,
        is_token_char: TokenCharPredicate,
        offset_unit: OffsetUnit = OffsetUnit.CODEPOINT,
    ) -> None:
        self._buffer: List[int] = [0] * capacity
        self._units: List[int] = [1] * capacity
        self._is_token_char = is_token_char
        self._wide = offset_unit is OffsetUnit.UTF16
        self._reader: CharStreamReader | None = None
        self._pending = ""
        self.start = self.end = capacity
        self.offset = 0
        self.exhausted = False
        self.start_is_edge = True
        self.last_checked_char = self.start - 1
        self.last_non_token_char = self.start - 1

    @property
    def capacity(self) -> int:
        return len(self._buffer)

    @property
    def attached(self) -> bool:
        return self._reader is not None

    def __len__(self) -> int:
        return self.end - self.start

    def __getitem__(self, index: int) -> int:
        return self._buffer[index]

    def reset(self, reader: CharStreamReader) -> None:
        """Attach ``reader`` and reinitialize every cursor field for a new pass."""
        self._reader = reader
        self._pending = ""
        self.start = self.end = self.capacity
        self.last_checked_char = self.last_non_token_char = self.start - 1
        self.offset = 0
        self.exhausted = False
        self.start_is_edge = True

    def ensure_lookahead(self, max_gram: int) -> None:
        """Keep at least ``max_gram + 1`` live code points while input remains."""
        if self.start + max_gram + 1 >= self.end and not self.exhausted:
            self.compact()

    def compact(self) -> int:
        """Drop the retired prefix, refill free space and return the applied shift."""
        shift = self.start
        live = self.end - self.start
        self._buffer[0:live] = self._buffer[self.start : self.end]
        self._units[0:live] = self._units[self.start : self.end]
        self.end = live
        self.last_checked_char -= shift
        self.last_non_token_char -= shift
        self.start = 0
        self._refill()
        return shift

    def grow_capacity(self, extra: int) -> None:
        """Enlarge the backing list without moving the live region."""
        self._buffer.extend([0] * extra)
        self._units.extend([1] * extra)
        LOGGER.debug("Grew n-gram window to %d code points", self.capacity)

    def consume_one(self) -> None:
        """Retire the code point at ``start`` and update the edge flag."""
        code_point = self._buffer[self.start]
        self.offset += self.width(self.start)
        self.start += 1
        self.start_is_edge = not self._is_token_char(code_point)

    def width(self, index: int) -> int:
        """Offset units taken by the code point in slot ``index``."""
        if self._wide:
            return 2 if self._buffer[index] > 0xFFFF else 1
        return self._units[index]

    def span_width(self, begin: int, end: int) -> int:
        if not self._wide:
            return sum(self._units[begin:end])
        return sum(2 if cp > 0xFFFF else 1 for cp in self._buffer[begin:end])

    def remaining_width(self) -> int:
        return self.span_width(self.start, self.end)

    def text(self, begin: int, end: int) -> str:
        return "".join(map(_spell, self._buffer[begin:end], self._units[begin:end]))

    def gram(self, length: int) -> Gram:
        """Describe the ``length`` code points at ``start`` with uncorrected offsets."""
        assert self.start + length <= self.end, "gram extends past the live region"
        stop = self.start + length
        return Gram(
            text=self.text(self.start, stop),
            start=self.offset,
            end=self.offset + self.span_width(self.start, stop),
        )

    def find_first_non_token_char(self, begin: int, end: int) -> int:
        for i in range(begin, end):
            if not self._is_token_char(self._buffer[i]):
                return i
        return end

    def update_last_non_token_char(self, gram_size: int) -> None:
        """Extend the memoized scan frontier to the last code point of the gram."""
        term_end = self.start + gram_size - 1
        if term_end > self.last_checked_char:
            for i in range(term_end, self.last_checked_char, -1):
                if not self._is_token_char(self._buffer[i]):
                    self.last_non_token_char = i
                    break
            self.last_checked_char = term_end

    def run_exceeds(self, max_gram: int) -> bool:
        """Whether the run at ``start`` continues past ``max_gram`` code points."""
        lookahead = self.start + max_gram
        return lookahead < self.end and self._is_token_char(self._buffer[lookahead])

    def _refill(self) -> None:
        if self._reader is None:
            raise RuntimeError("No reader attached to the n-gram window.")
        while not self.exhausted:
            request = self.capacity - self.end - len(self._pending)
            if request <= 0:
                break
            result = self._reader.fill(request)
            if not result.text or not result.more:
                self.exhausted = True
            code_points, unit_counts, self._pending = to_code_points(
                self._pending + result.text, final=self.exhausted
            )
            added = len(code_points)
            self._buffer[self.end : self.end + added] = code_points
            self._units[self.end : self.end + added] = unit_counts
            self.end += added
        LOGGER.debug(
            "Refilled n-gram window: %d live code points, exhausted=%s",
            self.end - self.start,
            self.exhausted,
        )
