"""
Core of neuro: source tokenizer, construct parser, pinning and IR.
"""

from . import ir
from .errors import (
    AggregateParseError,
    ConfigError,
    EmptyCompletionError,
    GenerationError,
    NeuroError,
    ParseError,
    UnterminatedBlockError,
)
from .parser import parse_file, parse_program, parse_source

__all__ = [
    "ir",
    "parse_file",
    "parse_program",
    "parse_source",
    "NeuroError",
    "ParseError",
    "AggregateParseError",
    "UnterminatedBlockError",
    "GenerationError",
    "EmptyCompletionError",
    "ConfigError",
]
