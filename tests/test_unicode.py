import random

import pytest

from streaming_ngrams.classifiers import excluding, not_whitespace
from streaming_ngrams.config import OffsetUnit
from streaming_ngrams.tokenizer import NGramTokenizer
from tests.utils import (
    TrickleReader,
    random_unicode_text,
    reference_ngrams,
    to_surrogate_units,
    utf16_width,
)


def _spans(tokens):
    return [(t.text, t.start_offset, t.end_offset) for t in tokens]


def _as_units(expected):
    return [(to_surrogate_units(text), start, end) for text, start, end in expected]


def test_astral_code_points_count_as_one_gram_unit():
    """Native astral characters are one code point and one offset unit."""
    tokenizer = NGramTokenizer(1, 2)
    tokens = tokenizer.tokenize("a\U0001F600b")

    assert [t.text for t in tokens] == ["a", "a\U0001F600", "\U0001F600", "\U0001F600b", "b"]
    assert tokenizer.final_offset == 3


def test_utf16_offsets_count_astral_code_points_twice():
    tokenizer = NGramTokenizer(1, 2, offset_unit=OffsetUnit.UTF16)

    assert _spans(tokenizer.tokenize("a\U0001F600b")) == [
        ("a", 0, 1),
        ("a\U0001F600", 0, 3),
        ("\U0001F600", 1, 3),
        ("\U0001F600b", 1, 4),
        ("b", 3, 4),
    ]
    assert tokenizer.final_offset == 4


def test_surrogate_pairs_in_the_stream_are_joined():
    """A pair is one gram unit but keeps its two stream units in the term text."""
    tokenizer = NGramTokenizer(1, 1, offset_unit="utf16")
    units = to_surrogate_units("x\U00010348y")

    assert len(units) == 4
    assert _spans(tokenizer.tokenize(units)) == [
        ("x", 0, 1),
        (units[1:3], 1, 3),
        ("y", 3, 4),
    ]


def test_codepoint_offsets_index_the_stream_for_surrogate_pairs():
    """Offsets keep pointing into the stream after a pair read as two units."""
    tokenizer = NGramTokenizer(1, 2)
    units = to_surrogate_units("x\U00010348y")

    tokens = tokenizer.tokenize(units)

    assert _spans(tokens) == [
        ("x", 0, 1),
        (units[0:3], 0, 3),
        (units[1:3], 1, 3),
        (units[1:4], 1, 4),
        ("y", 3, 4),
    ]
    assert all(units[t.start_offset : t.end_offset] == t.text for t in tokens)
    assert tokenizer.final_offset == len(units)


@pytest.mark.parametrize("offset_unit", ["codepoint", "utf16"])
def test_trickled_surrogate_pairs_match_stream_offsets(offset_unit):
    rng = random.Random(17)
    text = random_unicode_text(rng, 800)
    units = to_surrogate_units(text)
    tokenizer = NGramTokenizer(1, 3, offset_unit=offset_unit)

    tokens = tokenizer.tokenize(TrickleReader(units, step=3))

    assert _spans(tokens) == _as_units(reference_ngrams(text, 1, 3, width=utf16_width))
    assert tokenizer.final_offset == len(units)


@pytest.mark.parametrize("step", [1, 2, 5])
def test_pairs_split_across_refills_are_never_broken(step):
    rng = random.Random(step)
    text = random_unicode_text(rng, 1500)
    units = to_surrogate_units(text)
    tokenizer = NGramTokenizer(1, 3, offset_unit="utf16")

    tokens = tokenizer.tokenize(TrickleReader(units, step=step))

    assert _spans(tokens) == _as_units(reference_ngrams(text, 1, 3, width=utf16_width))
    assert tokenizer.final_offset == len(units)


@pytest.mark.parametrize("step", [1, 3])
def test_long_term_of_surrogate_pairs_survives_buffer_growth(step):
    """A run of pairs far longer than the buffer comes back whole as one long term."""
    run = "".join("\U0001F600\U00010348\U0001D11E"[i % 3] for i in range(50))
    text = f"{run} z"
    units = to_surrogate_units(text)
    tokenizer = NGramTokenizer(
        1,
        2,
        keep_long_term=True,
        is_token_char=not_whitespace,
        offset_unit="utf16",
        buffer_increment=4,
    )

    tokens = tokenizer.tokenize(TrickleReader(units, step=step))

    grams = _as_units(
        reference_ngrams(text, 1, 2, not_whitespace, width=utf16_width)
    )
    assert _spans(tokens) == grams[:2] + [(to_surrogate_units(run), 0, 100)] + grams[2:]
    assert tokenizer.final_offset == len(units) == 102


@pytest.mark.parametrize("non_token_chars", ["", "abcdef"])
def test_full_unicode_range(non_token_chars):
    rng = random.Random(99)
    min_gram = rng.randint(1, 40)
    max_gram = rng.randint(min_gram, 40)
    text = random_unicode_text(rng, 4 * 1024)
    is_token_char = excluding(non_token_chars) if non_token_chars else (lambda cp: True)

    tokenizer = NGramTokenizer(
        min_gram, max_gram, is_token_char=is_token_char, offset_unit="utf16"
    )
    tokens = tokenizer.tokenize(text)

    assert _spans(tokens) == reference_ngrams(
        text, min_gram, max_gram, is_token_char, width=utf16_width
    )
    assert tokenizer.final_offset == sum(utf16_width(char) for char in text)


def test_dangling_high_surrogate_at_end_of_stream_is_kept():
    tokenizer = NGramTokenizer(1, 1, offset_unit="utf16")

    assert [t.text for t in tokenizer.tokenize("ab\ud800")] == ["a", "b", "\ud800"]
    assert tokenizer.final_offset == 3
