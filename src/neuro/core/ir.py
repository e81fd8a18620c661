"""
Intermediate representation for neuro source files.

A parsed source file becomes a ``Program``: an ordered list of constructs.
Order defines both the emission order and the context each live function
sees during generation. All models are frozen; generation derives new text
alongside the program and never mutates it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Annotated, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ConstructKind(StrEnum):
    """Discriminator values for the construct union."""

    LIVE_FUNCTION = "live_function"
    PINNED_FUNCTION = "pinned_function"
    TYPE_DEFINITION = "type_definition"
    UNION_TYPE_DEFINITION = "union_type_definition"
    EXPORT = "export"


class Argument(BaseModel):
    """
    A single function parameter.

    Attributes:
        name: Parameter name
        type: Type annotation text, empty when the source gave none
    """

    name: str
    type: str = ""

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        if not self.type:
            return self.name
        return f"{self.name}: {self.type}"


class FunctionConstruct(BaseModel):
    """Fields shared by live and pinned functions."""

    name: str
    args: list[Argument] = Field(default_factory=list)
    return_type: str = "void"
    comment: str = ""

    model_config = ConfigDict(frozen=True)


class LiveFunction(FunctionConstruct):
    """A function stub whose body the completion provider will write."""

    kind: Literal[ConstructKind.LIVE_FUNCTION] = ConstructKind.LIVE_FUNCTION

    def pin(self, body: str) -> PinnedFunction:
        """Freeze this stub with a previously generated body."""
        return PinnedFunction(
            name=self.name,
            args=self.args,
            return_type=self.return_type,
            comment=self.comment,
            body=body,
        )


class PinnedFunction(FunctionConstruct):
    """
    A function whose previously generated source is re-emitted verbatim.

    ``body`` holds the whole function text, header through closing brace.
    """

    kind: Literal[ConstructKind.PINNED_FUNCTION] = ConstructKind.PINNED_FUNCTION
    body: str


class TypeDefinition(BaseModel):
    """A type block passed through to the output unchanged."""

    kind: Literal[ConstructKind.TYPE_DEFINITION] = ConstructKind.TYPE_DEFINITION
    body: str

    model_config = ConfigDict(frozen=True)


class UnionTypeDefinition(BaseModel):
    """
    A union of tags, re-emitted in canonical form.

    Examples:
        - UnionTypeDefinition(name="Shade", tags=["Red", "Green"])
          -> type Shade = Red | Green;
    """

    kind: Literal[ConstructKind.UNION_TYPE_DEFINITION] = ConstructKind.UNION_TYPE_DEFINITION
    name: str
    tags: list[str]

    model_config = ConfigDict(frozen=True)


class Export(BaseModel):
    """Names re-exported from the generated module."""

    kind: Literal[ConstructKind.EXPORT] = ConstructKind.EXPORT
    exports: list[str]

    model_config = ConfigDict(frozen=True)


Construct = Annotated[
    LiveFunction | PinnedFunction | TypeDefinition | UnionTypeDefinition | Export,
    Field(discriminator="kind"),
]


class Program(BaseModel):
    """Ordered constructs of one source file."""

    constructs: list[Construct] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def functions(self) -> list[LiveFunction | PinnedFunction]:
        """Live and pinned functions in program order."""
        return [c for c in self.constructs if isinstance(c, LiveFunction | PinnedFunction)]

    @property
    def live_functions(self) -> list[LiveFunction]:
        return [c for c in self.constructs if isinstance(c, LiveFunction)]

    def has_function(self, name: str) -> bool:
        """Check whether a live or pinned function with this name exists."""
        return any(f.name == name for f in self.functions)


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    """
    Value-returning form of a parse: either a value or an error string.

    Multiple construct failures arrive here already newline-joined.
    """

    value: T | None = None
    error: str | None = None

    @classmethod
    def success(cls, value: T) -> ParseResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> ParseResult[T]:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """
        Return the parsed value.

        Raises:
            ParseError: If this result is a failure
        """
        if self.error is not None or self.value is None:
            from .errors import ParseError

            raise ParseError(self.error or "Parse produced no value")
        return self.value
