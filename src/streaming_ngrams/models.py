from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple


class Gram(NamedTuple):
    """A span of the live window before offset correction."""

    text: str
    start: int
    end: int


@dataclass(slots=True)
class Token:
    """An emitted n-gram with inclusive-exclusive offsets into the original stream."""

    text: str
    start_offset: int
    end_offset: int
    position_increment: int = 1
    position_length: int = 1
