from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, MutableMapping

import yaml

DEFAULT_MIN_NGRAM_SIZE = 1
DEFAULT_MAX_NGRAM_SIZE = 2
DEFAULT_EDGE_MAX_NGRAM_SIZE = 1
BUFFER_INCREMENT = 1024


class NGramConfigError(ValueError):
    """Raised when gram-size bounds or buffer settings are invalid."""


class OffsetUnit(str, Enum):
    """Unit in which token offsets are measured."""

    CODEPOINT = "codepoint"
    UTF16 = "utf16"


@dataclass(slots=True)
class NGramTokenizerConfig:
    """Configuration options for the n-gram tokenizer."""

    min_gram: int = DEFAULT_MIN_NGRAM_SIZE
    max_gram: int = DEFAULT_MAX_NGRAM_SIZE
    keep_short_term: bool = False
    keep_long_term: bool = False
    edges_only: bool = False
    token_chars: str = "all"
    offset_unit: str = OffsetUnit.CODEPOINT.value
    buffer_increment: int = BUFFER_INCREMENT
    read_chunk_size: int = 4096

    @property
    def unit(self) -> OffsetUnit:
        return OffsetUnit(self.offset_unit)

    @property
    def initial_capacity(self) -> int:
        """Room for max_gram code points twice over plus one refill increment."""
        return 2 * self.max_gram + self.buffer_increment

    def validate(self) -> NGramTokenizerConfig:
        """Raise NGramConfigError unless the settings describe a usable tokenizer."""
        if self.min_gram < 1:
            raise NGramConfigError("min_gram must be greater than zero")
        if self.min_gram > self.max_gram:
            raise NGramConfigError("min_gram must not be greater than max_gram")
        if self.buffer_increment < 1:
            raise NGramConfigError("buffer_increment must be greater than zero")
        if self.read_chunk_size < 1:
            raise NGramConfigError("read_chunk_size must be greater than zero")
        try:
            OffsetUnit(self.offset_unit)
        except ValueError as exc:
            allowed = ", ".join(unit.value for unit in OffsetUnit)
            raise NGramConfigError(
                f"Unknown offset_unit '{self.offset_unit}' (expected one of: {allowed})"
            ) from exc
        return self

    def to_dict(self) -> dict[str, Any]:
        """Return a mutable dictionary representation of the configuration."""
        return dict(asdict(self))


def _build_kwargs(data: Mapping[str, Any]) -> dict[str, Any]:
    allowed = {field.name for field in fields(NGramTokenizerConfig)}
    kwargs = {key: data[key] for key in data if key in allowed}
    unit = kwargs.get("offset_unit")
    if isinstance(unit, OffsetUnit):
        kwargs["offset_unit"] = unit.value
    return kwargs


def config_from_dict(data: Mapping[str, Any] | None) -> NGramTokenizerConfig:
    """Build an NGramTokenizerConfig from a dictionary-like input."""
    if data is None:
        return NGramTokenizerConfig()
    return NGramTokenizerConfig(**_build_kwargs(data))


def config_from_yaml(path: str | Path) -> NGramTokenizerConfig:
    """Load configuration from a YAML file."""
    contents = Path(path).read_text(encoding="utf-8")
    parsed = yaml.safe_load(contents) or {}
    if not isinstance(parsed, MutableMapping):
        raise ValueError("Configuration YAML must define a mapping.")
    return config_from_dict(parsed)


def load_config(path: str | Path | None = None) -> NGramTokenizerConfig:
    """Load configuration from YAML when provided, otherwise return defaults."""
    if path is None:
        return NGramTokenizerConfig()
    return config_from_yaml(path)
