"""
The n-gram emission state machine.

``next_gram`` is the whole "give me the next token" step: it reads and
mutates only the explicit ``EmissionState`` and ``CodePointWindow`` passed
in. Every loop iteration either consumes a code point or grows
``gram_size``, both bounded, so the loop terminates.
"""

from __future__ import annotations

from dataclasses import dataclass

from .buffer import CodePointWindow
from .config import NGramTokenizerConfig
from .models import Gram


@dataclass(slots=True)
class EmissionState:
    """Size of the next gram to try at the window start."""

    gram_size: int


def next_gram(
    state: EmissionState, window: CodePointWindow, config: NGramTokenizerConfig
) -> Gram | None:
    """Advance the machine to the next gram, or return None at end of stream."""
    min_gram = config.min_gram
    max_gram = config.max_gram

    while True:
        window.ensure_lookahead(max_gram)

        if state.gram_size > max_gram or window.start + state.gram_size > window.end:
            if window.start + 1 + min_gram > window.end:
                assert window.exhausted, "window ran short before the stream ended"
                if not config.keep_short_term or len(window) == 0:
                    return None
                if window.start_is_edge:
                    length = (
                        window.find_first_non_token_char(window.start, window.end)
                        - window.start
                    )
                    if 0 < length < min_gram:
                        gram = window.gram(length)
                        window.consume_one()
                        return gram
                window.consume_one()
                continue

            if (
                config.keep_long_term
                and state.gram_size > max_gram
                and window.start_is_edge
                and window.run_exceeds(max_gram)
            ):
                gram = _long_term(window, config.buffer_increment)
                window.consume_one()
                state.gram_size = min_gram
                return gram

            window.consume_one()
            state.gram_size = min_gram

        window.update_last_non_token_char(state.gram_size)

        gram_end = window.start + state.gram_size
        contains_non_token_char = window.start <= window.last_non_token_char < gram_end
        if contains_non_token_char or (config.edges_only and not window.start_is_edge):
            # A run shorter than min_gram starting on an edge is kept whole.
            if (
                config.keep_short_term
                and window.start_is_edge
                and window.last_non_token_char > window.start
            ):
                length = window.find_first_non_token_char(window.start, gram_end) - window.start
                if 0 < length < min_gram:
                    gram = window.gram(length)
                    window.consume_one()
                    state.gram_size = min_gram
                    return gram
            window.consume_one()
            state.gram_size = min_gram
            continue

        gram = window.gram(state.gram_size)
        state.gram_size += 1
        return gram


def _long_term(window: CodePointWindow, increment: int) -> Gram:
    """Emit the whole run at the window start, growing the buffer to find its end."""
    search_from = window.start
    while True:
        delimiter = window.find_first_non_token_char(search_from, window.end)
        if delimiter == window.end and not window.exhausted:
            scanned_to = window.end
            window.grow_capacity(increment)
            search_from = scanned_to - window.compact()
            continue
        return window.gram(delimiter - window.start)
