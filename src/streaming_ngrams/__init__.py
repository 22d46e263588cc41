"""
streaming_ngrams package exports convenience helpers for library consumers.
"""

from __future__ import annotations

from .classifiers import create_classifier
from .config import (
    NGramConfigError,
    NGramTokenizerConfig,
    OffsetUnit,
    config_from_dict,
    config_from_yaml,
    load_config,
)
from .models import Token
from .reader import CharStreamReader, FillResult, StringReader, TextStreamReader
from .sinks import CallableSink, CollectingSink, JsonLinesSink, TokenSink, drain
from .tokenizer import NGramTokenizer, create_tokenizer, edge_ngram_tokenizer

__all__ = [
    "NGramTokenizer",
    "NGramTokenizerConfig",
    "NGramConfigError",
    "OffsetUnit",
    "Token",
    "CharStreamReader",
    "FillResult",
    "StringReader",
    "TextStreamReader",
    "TokenSink",
    "CallableSink",
    "CollectingSink",
    "JsonLinesSink",
    "drain",
    "config_from_dict",
    "config_from_yaml",
    "load_config",
    "create_classifier",
    "create_tokenizer",
    "edge_ngram_tokenizer",
]

__version__ = "0.1.0"
