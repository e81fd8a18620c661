"""
Function signature extraction.

Pulls the name, arguments, return type and comment out of a function block
by fixed textual patterns on its header line:

    function NAME(arg: Type, ...): ReturnType {
        // comment
    }
"""

import re
from collections.abc import Sequence
from pathlib import Path

from . import ir
from .errors import make_parse_error
from .lexer import Token

NAME_PATTERN = re.compile(r"function\s+([^(]*)\(")
RETURN_TYPE_PATTERN = re.compile(r"^\s*:\s+(.+?)\s+\{")
COMMENT_MARKER = "//"
DEFAULT_RETURN_TYPE = "void"


def extract_name(line: str) -> str | None:
    """Return the text between ``function`` and the first ``(``."""
    match = NAME_PATTERN.search(line)
    if not match:
        return None
    return match.group(1).strip() or None


def find_argument_span(line: str) -> tuple[int, int] | None:
    """
    Locate the parameter list on a header line.

    Returns:
        (start, end) indices of the text inside the first ``(`` and its
        matching ``)``, or None if either is missing
    """
    open_index = line.find("(")
    if open_index < 0:
        return None
    depth = 0
    for index in range(open_index, len(line)):
        char = line[index]
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return open_index + 1, index
    return None


def parse_arguments(text: str) -> list[ir.Argument]:
    """
    Split a parameter list into arguments.

    Entries with an empty name are dropped, so ``()`` yields no arguments.
    """
    args = []
    for part in text.split(","):
        name, _, type_ = part.partition(":")
        if not name.strip():
            continue
        args.append(ir.Argument(name=name.strip(), type=type_.strip()))
    return args


def extract_return_type(rest: str) -> str:
    """Return type from the text after the argument list, or ``void``."""
    match = RETURN_TYPE_PATTERN.match(rest)
    if not match:
        return DEFAULT_RETURN_TYPE
    return match.group(1)


def extract_comment(lines: Sequence[str]) -> str:
    """Collect the ``//`` lines of a block body, trimmed and newline-joined."""
    comments = [line.strip() for line in lines if line.strip().startswith(COMMENT_MARKER)]
    return "\n".join(comments)


def parse_signature(block: Sequence[Token], file: Path) -> ir.LiveFunction:
    """
    Build a live function from the tokens of one function block.

    Args:
        block: Tokens from the header line through the closing brace
        file: Source file path (for error reporting)

    Returns:
        LiveFunction with name, arguments, return type and comment

    Raises:
        ParseError: If the name or argument list is missing
    """
    header = block[0]
    line = header.value

    name = extract_name(line)
    if name is None:
        raise make_parse_error(
            f"Failed to find function name in {line.strip()}", file, header.line
        )

    span = find_argument_span(line)
    if span is None:
        raise make_parse_error(
            f"Failed to find function arguments in {line.strip()}", file, header.line
        )
    start, end = span

    return ir.LiveFunction(
        name=name,
        args=parse_arguments(line[start:end]),
        return_type=extract_return_type(line[end + 1 :]),
        comment=extract_comment([token.value for token in block[1:-1]]),
    )
