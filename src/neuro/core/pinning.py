"""
Pinning against previously generated output.

A ``pinned function`` in the source keeps the body it was given by an
earlier run. The resolver looks the function up by name in the previous
output file and, when found, freezes that text as a PinnedFunction.
Lookup is by name only: an unchanged name always pins to whatever the
previous output holds for it.
"""

import logging
from pathlib import Path

from . import ir
from .errors import make_parse_error
from .lexer import Delimiter, Token, TokenType, find_block_end, tokenize
from .signature import extract_name

logger = logging.getLogger(__name__)


class PinningResolver:
    """
    Resolves pinned functions against one previous output.

    The previous output is tokenized once, on first use.
    """

    def __init__(self, previous_output: str, file: Path | None = None):
        """
        Initialize resolver.

        Args:
            previous_output: Text of the previously generated file, empty if none
            file: Path of the previous output (for error reporting)
        """
        self.previous_output = previous_output
        self.file = file or Path("<previous output>")
        self._tokens: list[Token] | None = None

    @property
    def tokens(self) -> list[Token]:
        if self._tokens is None:
            self._tokens = tokenize(self.previous_output)
        return self._tokens

    def find_function_body(self, name: str) -> str | None:
        """
        Return the full text of function ``name`` in the previous output.

        Raises:
            ParseError: If a function met before the match has no closing
                brace or no recognisable name
        """
        tokens = self.tokens
        pos = 0
        while tokens[pos].type != TokenType.EOF:
            token = tokens[pos]
            if token.type != TokenType.FUNCTION:
                pos += 1
                continue

            end = find_block_end(tokens, pos, Delimiter.BRACE)
            if end is None:
                raise make_parse_error(
                    f"Failed to find closing bracket for function {token.value.strip()} "
                    "in previous output",
                    self.file,
                    token.line,
                )

            found = extract_name(token.value)
            if found is None:
                raise make_parse_error(
                    f"Failed to find function name in {token.value.strip()} in previous output",
                    self.file,
                    token.line,
                )

            if found == name:
                return "\n".join(t.value for t in tokens[pos : pos + end + 1])
            pos += end + 1
        return None

    def resolve(self, func: ir.LiveFunction) -> ir.LiveFunction | ir.PinnedFunction:
        """
        Pin ``func`` to its previous body if one exists.

        Returns:
            PinnedFunction carrying ``func``'s metadata, or ``func`` unchanged
        """
        if not self.previous_output:
            logger.debug(f"No previous output; {func.name} will be generated")
            return func

        body = self.find_function_body(func.name)
        if body is None:
            logger.info(f"Pinned function {func.name} not found in previous output; regenerating")
            return func

        logger.debug(f"Pinned function {func.name} to previous output")
        return func.pin(body)


def resolve_pinned_function(
    func: ir.LiveFunction, previous_output: str, file: Path | None = None
) -> ir.LiveFunction | ir.PinnedFunction:
    """Convenience function to resolve a single function against previous output."""
    return PinningResolver(previous_output, file).resolve(func)
