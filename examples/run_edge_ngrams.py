"""
Tiny helper script to eyeball n-gram and edge n-gram output side by side.
"""

from __future__ import annotations

from streaming_ngrams.classifiers import not_whitespace
from streaming_ngrams.tokenizer import NGramTokenizer, edge_ngram_tokenizer


def main() -> None:
    samples = [
        "abcde",
        "a bcd efghi jk",
        " a bcd  efghij  x  ",
    ]
    tokenizers = {
        "ngram(2,3)": NGramTokenizer(2, 3, is_token_char=not_whitespace),
        "edge(2,3) short+long": edge_ngram_tokenizer(
            2, 3, keep_short_term=True, keep_long_term=True, is_token_char=not_whitespace
        ),
    }

    for sample in samples:
        print("-" * 40)
        print(repr(sample))
        for name, tokenizer in tokenizers.items():
            tokens = tokenizer.tokenize(sample)
            rendered = " ".join(
                f"{t.text}[{t.start_offset},{t.end_offset})" for t in tokens
            )
            print(f"{name}: {rendered}")
            print(f"{name} final offset: {tokenizer.final_offset}")


if __name__ == "__main__":
    main()
