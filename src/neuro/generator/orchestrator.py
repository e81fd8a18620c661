"""
Generation orchestrator.

Walks a Program left to right and produces one block of text per construct.
Types, unions, exports and pinned functions are reconstructed locally. Each
live function becomes one completion request whose context is the text
already emitted for the constructs before it, so a function can see the
names defined above it and never those defined below.

Requests are issued strictly one after another. Provider errors are not
caught here; they abort the whole run.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Literal, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from neuro.core import ir
from neuro.core.errors import EmptyCompletionError, GenerationError

from . import emitters
from .assembler import assemble_output

logger = logging.getLogger(__name__)


class ChatMessage(BaseModel):
    """One prior-context message sent alongside a completion request."""

    role: Literal["user", "assistant"] = "user"
    content: str

    model_config = ConfigDict(frozen=True)


@runtime_checkable
class CompletionProvider(Protocol):
    """
    Anything that can complete a function stub.

    Implementations return the completion text, or None/empty when the
    provider produced no content. Failures are raised.
    """

    def complete(
        self,
        system_instruction: str,
        prior_messages: Sequence[ChatMessage],
        final_message: str,
    ) -> str | None: ...


class ProgramGenerator:
    """
    Generates target source for a Program.

    Args:
        provider: Completion provider; may be None for programs without
            live functions
        strict: Raise EmptyCompletionError instead of emitting an empty block
            when the provider returns no content
    """

    def __init__(self, provider: CompletionProvider | None = None, strict: bool = False):
        self.provider = provider
        self.strict = strict

    def generate(self, program: ir.Program) -> str:
        """Generate the complete output text for ``program``."""
        return assemble_output(self.generate_blocks(program))

    def generate_blocks(self, program: ir.Program) -> list[str]:
        """
        Produce emitted text for each construct, in program order.

        A trailing ``main();`` block is appended when a function named
        ``main`` was processed.

        Raises:
            GenerationError: If a live function exists and no provider is set
        """
        if program.live_functions and self.provider is None:
            names = ", ".join(f.name for f in program.live_functions)
            raise GenerationError(f"No completion provider configured to generate: {names}")

        blocks: list[str] = []
        for construct in program.constructs:
            context = tuple(blocks)
            blocks.append(self.generate_construct(construct, context))

        if program.has_function(emitters.ENTRY_POINT):
            blocks.append(emitters.emit_entry_point())

        return blocks

    def generate_construct(self, construct: ir.Construct, context: Sequence[str] = ()) -> str:
        """
        Emit one construct.

        Args:
            construct: Construct to emit
            context: Text already emitted for the constructs before it
        """
        if isinstance(construct, ir.LiveFunction):
            return self.generate_live_function(construct, context)
        if isinstance(construct, ir.PinnedFunction):
            return emitters.emit_pinned_function(construct)
        if isinstance(construct, ir.TypeDefinition):
            return emitters.emit_type_definition(construct)
        if isinstance(construct, ir.UnionTypeDefinition):
            return emitters.emit_union_type(construct)
        if isinstance(construct, ir.Export):
            return emitters.emit_export(construct)
        raise GenerationError(f"Unsupported construct: {construct!r}")

    def generate_live_function(self, func: ir.LiveFunction, context: Sequence[str]) -> str:
        """Request a body for ``func`` from the completion provider."""
        if self.provider is None:
            raise GenerationError(f"No completion provider configured to generate: {func.name}")

        prior_messages = build_context_messages(context)
        logger.info(f"Generating {func.name} with {len(prior_messages)} context message(s)")

        completion = self.provider.complete(
            emitters.render_system_instruction(func),
            prior_messages,
            emitters.render_stub(func),
        )

        if not completion:
            if self.strict:
                raise EmptyCompletionError(
                    f"Completion provider returned no content for {func.name}"
                )
            logger.warning(f"Completion provider returned no content for {func.name}")
            return ""

        return emitters.strip_code_fence(completion)


def build_context_messages(context: Sequence[str]) -> list[ChatMessage]:
    """
    Prior-context messages from earlier emitted blocks.

    Empty blocks (a live function whose completion came back empty) are
    left out, so the context is the earlier emitted text minus those
    blocks rather than one message per earlier construct. Chat providers
    reject messages with empty content.
    """
    return [ChatMessage(role="user", content=text) for text in context if text]


def generate_program(
    program: ir.Program,
    provider: CompletionProvider | None = None,
    strict: bool = False,
) -> str:
    """
    Convenience function to generate output text for a program.

    Args:
        program: Parsed program
        provider: Completion provider for live functions
        strict: Treat empty completions as errors

    Returns:
        Generated source text
    """
    return ProgramGenerator(provider, strict=strict).generate(program)
