"""
neuro - compile function stubs into TypeScript with an LLM.

Parses a small block dialect of function stubs, pinned functions, types,
union types and exports, then asks a completion provider to fill in each
live function while keeping pinned bodies from the previous run.
"""

from __future__ import annotations

from ._version import get_version
from .core import ir
from .core.errors import GenerationError, NeuroError, ParseError
from .core.parser import parse_program, parse_source
from .generator import ProgramGenerator, generate_program

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "parse_program",
    "parse_source",
    "generate_program",
    "ProgramGenerator",
    "NeuroError",
    "ParseError",
    "GenerationError",
]
