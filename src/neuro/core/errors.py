"""
Error types for neuro source parsing and code generation.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class NeuroError(Exception):
    """Base exception for all neuro errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ParseError(NeuroError):
    """
    Raised when a construct in the source cannot be parsed.

    Examples:
    - Function header without a name
    - Function header without an argument list
    - Union type without tags
    """

    pass


class UnterminatedBlockError(ParseError):
    """
    Raised when a construct has no closing delimiter.

    Scanning cannot continue past a block whose extent is unknown, so this
    error aborts the parse immediately instead of being aggregated.
    """

    pass


class AggregateParseError(ParseError):
    """
    Raised when one or more constructs failed to parse.

    Attributes:
        errors: Every per-construct error, in source order
    """

    def __init__(self, errors: list[ParseError]):
        self.errors = errors
        super().__init__("\n".join(str(error) for error in errors))


class GenerationError(NeuroError):
    """
    Raised when the generator cannot produce output for a program.

    Examples:
    - Live function in a program generated without a completion provider
    - Empty completion in strict mode
    """

    pass


class EmptyCompletionError(GenerationError):
    """Raised in strict mode when the completion provider returns no content."""

    pass


class ConfigError(NeuroError):
    """Raised when neuro.toml or an environment override is invalid."""

    pass


@dataclass
class ErrorContext:
    """
    Source location of an error.

    Attributes:
        file: Path to the source file where error occurred
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    file: Path
    line: int
    column: int

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "app.neuro:10:1"
        """
        return f"{self.file}:{self.line}:{self.column}"


def make_parse_error(
    message: str,
    file: Path,
    line: int,
    column: int = 1,
) -> ParseError:
    """
    Helper to create a ParseError with context.

    Args:
        message: Error description
        file: Source file path
        line: Line number (1-indexed)
        column: Column number (1-indexed)

    Returns:
        ParseError with context attached
    """
    context = ErrorContext(file=file, line=line, column=column)
    return ParseError(message, context)


def make_unterminated_block_error(message: str, file: Path, line: int) -> UnterminatedBlockError:
    """Helper to create an UnterminatedBlockError pointing at the block's first line."""
    return UnterminatedBlockError(message, ErrorContext(file=file, line=line, column=1))
