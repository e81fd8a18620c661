"""Shared pytest fixtures for neuro tests."""

from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from neuro.generator import ChatMessage


class StubProvider:
    """
    Deterministic completion provider that records every request.

    Replies come from ``replies`` by function stub order, or from ``reply``
    (a callable of the final message) when given.
    """

    def __init__(
        self,
        replies: Sequence[str | None] = (),
        reply: Callable[[str], str | None] | None = None,
    ):
        self.replies = list(replies)
        self.reply = reply
        self.requests: list[tuple[str, list[ChatMessage], str]] = []

    def complete(
        self,
        system_instruction: str,
        prior_messages: Sequence[ChatMessage],
        final_message: str,
    ) -> str | None:
        self.requests.append((system_instruction, list(prior_messages), final_message))
        if self.reply is not None:
            return self.reply(final_message)
        return self.replies[len(self.requests) - 1]


def echo_function(final_message: str) -> str:
    """Reply with the stub itself, comment replaced by a return."""
    header = final_message.split("\n")[0]
    return f"{header}\n    return undefined as any;\n}}"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def dsl_fixtures_dir(fixtures_dir: Path) -> Path:
    """Return path to source fixtures directory."""
    return fixtures_dir / "dsl"


@pytest.fixture
def hello_source(dsl_fixtures_dir: Path) -> str:
    return (dsl_fixtures_dir / "hello.neuro").read_text()


@pytest.fixture
def hello_previous_output(dsl_fixtures_dir: Path) -> str:
    return (dsl_fixtures_dir / "hello.neuro.ts").read_text()


@pytest.fixture
def echo_provider() -> StubProvider:
    return StubProvider(reply=echo_function)


@pytest.fixture
def make_provider() -> type[StubProvider]:
    """Return the StubProvider class for tests that need custom replies."""
    return StubProvider
