from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterator, Tuple

import typer
import yaml

from .classifiers import available_classifiers
from .config import NGramTokenizerConfig, load_config
from .reader import TextStreamReader
from .sinks import JsonLinesSink, drain
from .tokenizer import NGramTokenizer, create_tokenizer

LOGGER = logging.getLogger(__name__)

app = typer.Typer(help="Streaming n-gram tokenizer CLI.", no_args_is_help=True)

# File types the CLI expands into documents when given a directory.
SUPPORTED_INPUT_EXTENSIONS = {".txt"}


@app.command()
def tokenize(
    input_path: Path = typer.Option(
        ..., exists=True, readable=True, dir_okay=True, file_okay=True
    ),
    config: Path | None = typer.Option(None, "--config", "-c"),
    min_gram: int | None = typer.Option(
        None, "--min-gram", help="Smallest gram size in code points."
    ),
    max_gram: int | None = typer.Option(
        None, "--max-gram", help="Largest gram size in code points."
    ),
    keep_short_term: bool | None = typer.Option(
        None,
        "--keep-short-term/--no-keep-short-term",
        help="Emit runs shorter than min-gram as a single token.",
    ),
    keep_long_term: bool | None = typer.Option(
        None,
        "--keep-long-term/--no-keep-long-term",
        help="Also emit whole runs longer than max-gram.",
    ),
    edges_only: bool | None = typer.Option(
        None,
        "--edges-only/--all-positions",
        help="Only emit grams anchored at the start of a run.",
    ),
    token_chars: str | None = typer.Option(
        None,
        "--token-chars",
        help="Token-char classifier (e.g. 'all', 'not_whitespace', 'exclude:,;').",
    ),
    offset_unit: str | None = typer.Option(
        None, "--offset-unit", help="Offset unit: 'codepoint' or 'utf16'."
    ),
    output_path: Path | None = typer.Option(
        None, "--output-path", "-o", dir_okay=False, help="Write JSON lines here."
    ),
) -> None:
    """Tokenize .txt documents into n-grams and emit one JSON line per document."""
    try:
        cfg = load_config(config)
        _apply_tokenizer_overrides(
            cfg,
            min_gram,
            max_gram,
            keep_short_term,
            keep_long_term,
            edges_only,
            token_chars,
            offset_unit,
        )
        tokenizer = create_tokenizer(cfg)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    if output_path is None:
        for doc_id, path in _iter_documents(input_path):
            _tokenize_file(
                tokenizer, doc_id, path, cfg.read_chunk_size, _echo_raw
            )
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    written = 0
    with output_path.open("w", encoding="utf-8", newline="\n") as out:
        for doc_id, path in _iter_documents(input_path):
            _tokenize_file(tokenizer, doc_id, path, cfg.read_chunk_size, out.write)
            written += 1
    typer.echo(f"Wrote {written} tokenized documents to {output_path}")


@app.command("print-config")
def print_config() -> None:
    """Print the default configuration as YAML."""
    cfg = NGramTokenizerConfig()
    typer.echo(yaml.safe_dump(cfg.to_dict(), sort_keys=False))


@app.command("list-classifiers")
def list_classifiers() -> None:
    """List the token-char classifiers accepted by --token-chars."""
    for name in available_classifiers():
        typer.echo(name)


def main() -> None:
    app()


def _apply_tokenizer_overrides(
    config: NGramTokenizerConfig,
    min_gram: int | None,
    max_gram: int | None,
    keep_short_term: bool | None,
    keep_long_term: bool | None,
    edges_only: bool | None,
    token_chars: str | None,
    offset_unit: str | None,
) -> None:
    """Apply CLI overrides to tokenizer config fields when provided."""
    if min_gram is not None:
        config.min_gram = min_gram
    if max_gram is not None:
        config.max_gram = max_gram
    if keep_short_term is not None:
        config.keep_short_term = keep_short_term
    if keep_long_term is not None:
        config.keep_long_term = keep_long_term
    if edges_only is not None:
        config.edges_only = edges_only
    if token_chars:
        config.token_chars = token_chars
    if offset_unit:
        config.offset_unit = offset_unit.lower()


def _iter_documents(input_path: Path) -> Iterator[Tuple[str, Path]]:
    """Expand the input path into (doc_id, path) pairs."""
    if input_path.is_file():
        yield input_path.name, input_path
        return
    # Relative paths as doc IDs keep the output stable across machines.
    files = sorted(
        p
        for p in input_path.rglob("*")
        if p.is_file() and p.suffix.lower() in SUPPORTED_INPUT_EXTENSIONS
    )
    for file in files:
        yield file.relative_to(input_path).as_posix(), file


def _tokenize_file(
    tokenizer: NGramTokenizer,
    doc_id: str,
    path: Path,
    chunk_size: int,
    write: Callable[[str], object],
) -> None:
    """Stream a file through the tokenizer straight into one JSON line."""
    sink = JsonLinesSink(write, doc_id)
    with path.open("r", encoding="utf-8", newline="") as handle:
        tokenizer.reset(TextStreamReader(handle, chunk_size=chunk_size))
        drain(tokenizer, sink)
    LOGGER.info("Tokenized %s into %d grams", doc_id, sink.count)


def _echo_raw(text: str) -> None:
    typer.echo(text, nl=False)


if __name__ == "__main__":
    main()
