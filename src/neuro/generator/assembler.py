"""
Output assembly.
"""

from collections.abc import Iterable

BLOCK_SEPARATOR = "\n\n"


def assemble_output(blocks: Iterable[str]) -> str:
    """Join emitted blocks in order with one blank line between each."""
    return BLOCK_SEPARATOR.join(blocks)
