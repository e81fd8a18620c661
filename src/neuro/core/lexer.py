"""
Line tokenizer for neuro source files.

The dialect is block-oriented: every construct starts with a keyword at the
beginning of a line and ends at a delimiter line. The tokenizer classifies
each physical line once, and the block scanner finds where a construct ends.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum, StrEnum


class TokenType(Enum):
    """Structural token types, one token per source line."""

    # Construct-start keywords
    PINNED_FUNCTION = "pinned function"
    FUNCTION = "function"
    UNION_TYPE = "union type"
    TYPE = "type"
    EXPORT = "export"

    # Delimiters and filler
    CLOSE_BRACE = "}"
    BLANK = "BLANK"
    TEXT = "TEXT"
    EOF = "EOF"


# Checked in order; multi-word keywords must precede their suffixes.
KEYWORD_PATTERNS: list[tuple[re.Pattern[str], TokenType]] = [
    (re.compile(r"pinned\s+function\b"), TokenType.PINNED_FUNCTION),
    (re.compile(r"function\b"), TokenType.FUNCTION),
    (re.compile(r"union\s+type\b"), TokenType.UNION_TYPE),
    (re.compile(r"type\b"), TokenType.TYPE),
    (re.compile(r"export\b"), TokenType.EXPORT),
]

class Delimiter(StrEnum):
    """How the block scanner recognises the end of a construct."""

    BRACE = "brace"  # a line that is exactly "}"
    TERMINATOR = "terminator"  # a line ending in ";"


@dataclass(frozen=True)
class Token:
    """
    A single source line.

    Attributes:
        type: Token type
        value: Raw line text
        line: Line number (1-indexed)
    """

    type: TokenType
    value: str
    line: int

    @property
    def terminates(self) -> bool:
        """Whether this line ends a terminator-delimited statement."""
        return self.value.rstrip().endswith(";")

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.line})"


def classify_line(line: str) -> TokenType:
    """Classify one line by its leading keyword or delimiter."""
    stripped = line.strip()
    if not stripped:
        return TokenType.BLANK
    if stripped == "}":
        return TokenType.CLOSE_BRACE
    for pattern, token_type in KEYWORD_PATTERNS:
        if pattern.match(stripped):
            return token_type
    return TokenType.TEXT


class Lexer:
    """Converts source text into one token per line followed by EOF."""

    def __init__(self, text: str):
        self.text = text

    def tokenize(self) -> list[Token]:
        # Only "\n" separates lines; "\r" and other line breaks stay in the line text
        lines = self.text.split("\n")
        if lines[-1] == "":
            lines.pop()
        tokens = [
            Token(classify_line(line), line, number)
            for number, line in enumerate(lines, start=1)
        ]
        last_line = tokens[-1].line + 1 if tokens else 1
        tokens.append(Token(TokenType.EOF, "", last_line))
        return tokens


def tokenize(text: str) -> list[Token]:
    """
    Convenience function to tokenize source text.

    Args:
        text: Source text

    Returns:
        List of tokens ending with EOF
    """
    return Lexer(text).tokenize()


def find_block_end(tokens: Sequence[Token], start: int, delimiter: Delimiter) -> int | None:
    """
    Find the line that closes the block starting at ``tokens[start]``.

    The first token satisfying the delimiter wins, the start token included.
    Blocks do not nest: an inner line that is exactly ``}`` closes the outer
    construct.

    Args:
        tokens: Token stream
        start: Index of the construct's first token
        delimiter: Brace or terminator mode

    Returns:
        Offset of the closing token relative to ``start``, or None
    """
    for offset, token in enumerate(tokens[start:]):
        if token.type == TokenType.EOF:
            break
        if delimiter == Delimiter.BRACE and token.type == TokenType.CLOSE_BRACE:
            return offset
        if delimiter == Delimiter.TERMINATOR and token.terminates:
            return offset
    return None
