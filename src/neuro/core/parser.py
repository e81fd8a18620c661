"""
Construct parser for neuro source files.

Walks the line tokens from the lexer and turns each top-level construct
into an IR node:

    function NAME(args): Ret { ... }        -> LiveFunction
    pinned function NAME(args): Ret { ... } -> PinnedFunction (if found in
                                               previous output)
    type NAME = { ... }                     -> TypeDefinition
    union type NAME = A | B;                -> UnionTypeDefinition
    export A, B                             -> Export

Malformed constructs are collected and reported together. A block without
its closing delimiter stops the parse at once, since the rest of the file
can no longer be split into constructs.

Usage:
    from neuro.core.parser import parse_program

    program = parse_program(source_text, previous_output)
"""

import logging
import re
from collections.abc import Callable
from pathlib import Path

from . import ir
from .errors import (
    AggregateParseError,
    NeuroError,
    ParseError,
    make_parse_error,
    make_unterminated_block_error,
)
from .lexer import Delimiter, Token, TokenType, find_block_end, tokenize
from .pinning import PinningResolver
from .signature import parse_signature

logger = logging.getLogger(__name__)

UNION_KEYWORD = re.compile(r"^\s*union\s+type\b")
EXPORT_KEYWORD = re.compile(r"^\s*export\b")

BLOCK_DESCRIPTIONS = {
    TokenType.PINNED_FUNCTION: "function",
    TokenType.FUNCTION: "function",
    TokenType.TYPE: "type definition",
    TokenType.UNION_TYPE: "union type definition",
}


class Parser:
    """
    Parser for one neuro source file.

    Tracks a position in the token stream; each construct handler consumes
    its whole block, so the position always lands on the line after it.
    """

    def __init__(
        self,
        tokens: list[Token],
        file: Path,
        pinning: PinningResolver | None = None,
    ):
        """
        Initialize parser.

        Args:
            tokens: List of tokens from lexer
            file: Source file path (for error reporting)
            pinning: Resolver for pinned functions; no pinning if omitted
        """
        self.tokens = tokens
        self.file = file
        self.pinning = pinning or PinningResolver("")
        self.pos = 0
        self._handlers: dict[TokenType, Callable[[list[Token]], ir.Construct]] = {
            TokenType.PINNED_FUNCTION: self.parse_pinned_function,
            TokenType.FUNCTION: self.parse_function,
            TokenType.UNION_TYPE: self.parse_union_type,
            TokenType.TYPE: self.parse_type_definition,
            TokenType.EXPORT: self.parse_export,
        }

    def current_token(self) -> Token:
        """Get current token."""
        if self.pos >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[self.pos]

    def advance(self) -> Token:
        """Consume and return current token."""
        token = self.current_token()
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def match(self, *token_types: TokenType) -> bool:
        """Check if current token matches any of the given types."""
        return self.current_token().type in token_types

    def consume_block(self, delimiter: Delimiter) -> list[Token]:
        """
        Consume the construct starting at the current token.

        Raises:
            UnterminatedBlockError: If no closing delimiter follows
        """
        start = self.current_token()
        end = find_block_end(self.tokens, self.pos, delimiter)
        if end is None:
            what = BLOCK_DESCRIPTIONS.get(start.type, "block")
            raise make_unterminated_block_error(
                f"Failed to find closing {_delimiter_name(delimiter)} for {what}: "
                f"{start.value.strip()}",
                self.file,
                start.line,
            )
        block = self.tokens[self.pos : self.pos + end + 1]
        self.pos += end + 1
        return block

    def parse(self) -> ir.Program:
        """
        Parse the whole token stream.

        Returns:
            Program with constructs in source order

        Raises:
            UnterminatedBlockError: On the first block without a closing delimiter
            AggregateParseError: If any construct was malformed
        """
        constructs: list[ir.Construct] = []
        errors: list[ParseError] = []

        while not self.match(TokenType.EOF):
            token = self.current_token()
            handler = self._handlers.get(token.type)
            if handler is None:
                # Blank lines and stray text between constructs
                self.advance()
                continue

            if token.type == TokenType.EXPORT:
                block = [self.advance()]
            elif token.type == TokenType.UNION_TYPE:
                block = self.consume_block(Delimiter.TERMINATOR)
            else:
                block = self.consume_block(Delimiter.BRACE)

            try:
                constructs.append(handler(block))
            except ParseError as e:
                errors.append(e)

        if errors:
            logger.debug(f"{len(errors)} construct(s) failed to parse in {self.file}")
            raise AggregateParseError(errors)

        logger.debug(f"Parsed {len(constructs)} construct(s) from {self.file}")
        return ir.Program(constructs=constructs)

    def parse_function(self, block: list[Token]) -> ir.LiveFunction:
        return parse_signature(block, self.file)

    def parse_pinned_function(self, block: list[Token]) -> ir.LiveFunction | ir.PinnedFunction:
        return self.pinning.resolve(parse_signature(block, self.file))

    def parse_type_definition(self, block: list[Token]) -> ir.TypeDefinition:
        return ir.TypeDefinition(body="\n".join(token.value for token in block))

    def parse_union_type(self, block: list[Token]) -> ir.UnionTypeDefinition:
        """
        Parse ``union type NAME = A | B | C;``, possibly spread over lines.

        Raises:
            ParseError: If the name, ``=`` or tags are missing
        """
        header = block[0]
        text = " ".join(token.value.strip() for token in block)
        left, equals, right = text.partition("=")
        if not equals:
            raise make_parse_error(
                f"Failed to find '=' in union type {header.value.strip()}", self.file, header.line
            )

        name = UNION_KEYWORD.sub("", left).strip()
        if not name:
            raise make_parse_error(
                f"Failed to find union type name in {header.value.strip()}", self.file, header.line
            )

        tags = [tag.strip().removesuffix(";").strip() for tag in right.split("|")]
        tags = [tag for tag in tags if tag]
        if not tags:
            raise make_parse_error(
                f"Failed to find tags for union type {name}", self.file, header.line
            )
        return ir.UnionTypeDefinition(name=name, tags=tags)

    def parse_export(self, block: list[Token]) -> ir.Export:
        """
        Parse ``export A, B, C``.

        Raises:
            ParseError: If no names follow the keyword
        """
        token = block[0]
        names = [name.strip() for name in EXPORT_KEYWORD.sub("", token.value).split(",")]
        names = [name for name in names if name]
        if not names:
            raise make_parse_error(
                f"Failed to find exported names in {token.value.strip()}", self.file, token.line
            )
        return ir.Export(exports=names)


def _delimiter_name(delimiter: Delimiter) -> str:
    return "bracket" if delimiter == Delimiter.BRACE else "semicolon"


def parse_program(
    text: str,
    previous_output: str = "",
    file: Path | None = None,
    previous_file: Path | None = None,
) -> ir.Program:
    """
    Parse source text into a Program.

    Args:
        text: Source text
        previous_output: Previously generated file text, used for pinning
        file: Source file path (for error reporting)
        previous_file: Previous output path (for error reporting)

    Returns:
        Parsed Program

    Raises:
        ParseError: If the source cannot be parsed
    """
    file = file or Path("<source>")
    tokens = tokenize(text)
    parser = Parser(tokens, file, PinningResolver(previous_output, previous_file))
    return parser.parse()


def parse_source(
    text: str,
    previous_output: str = "",
    file: Path | None = None,
    previous_file: Path | None = None,
) -> ir.ParseResult[ir.Program]:
    """Parse source text, returning the error as a value instead of raising."""
    try:
        return ir.ParseResult.success(parse_program(text, previous_output, file, previous_file))
    except NeuroError as e:
        return ir.ParseResult.failure(str(e))


def parse_file(path: Path, previous_output_path: Path | None = None) -> ir.Program:
    """
    Parse a source file, pinning against an existing output file.

    A missing previous output file counts as empty previous output.
    """
    text = path.read_text(encoding="utf-8")
    previous_output = ""
    if previous_output_path is not None and previous_output_path.is_file():
        previous_output = previous_output_path.read_bytes().decode("utf-8")
    return parse_program(text, previous_output, path, previous_output_path)
