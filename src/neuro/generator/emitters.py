"""
Deterministic text for constructs that never reach the completion provider,
and the stub text sent to it for live functions.
"""

from neuro.core import ir

TARGET_LANGUAGE = "TypeScript"
STUB_INDENT = "    "
ENTRY_POINT = "main"

SYSTEM_INSTRUCTION = (
    "Complete only the {language} function called {name}. "
    "Reply with the complete {language} function {name} and nothing else: "
    "no markdown code fences, no explanation, no surrounding text. "
    "Assume every other function and type is already implemented. "
    "Do not write code for any other function or type."
)


def render_signature(func: ir.FunctionConstruct) -> str:
    """``function NAME(a: A, b: B): R {``"""
    args = ", ".join(str(arg) for arg in func.args)
    return f"function {func.name}({args}): {func.return_type or 'void'} {{"


def render_stub(func: ir.FunctionConstruct) -> str:
    """
    Re-synthesise a function stub: its signature with the source comment
    as the only body.

    Example:
        function add(a: number, b: number): number {
            // add two numbers
        }
    """
    lines = [render_signature(func)]
    if func.comment:
        lines.extend(STUB_INDENT + line for line in func.comment.split("\n"))
    lines.append("}")
    return "\n".join(lines)


def render_system_instruction(func: ir.FunctionConstruct) -> str:
    return SYSTEM_INSTRUCTION.format(language=TARGET_LANGUAGE, name=func.name)


def emit_pinned_function(func: ir.PinnedFunction) -> str:
    return func.body


def emit_type_definition(type_definition: ir.TypeDefinition) -> str:
    return type_definition.body


def emit_union_type(union: ir.UnionTypeDefinition) -> str:
    """``type NAME = A | B | C;``"""
    return f"type {union.name} = {' | '.join(union.tags)};"


def emit_export(export: ir.Export) -> str:
    """``export { A, B, C };``"""
    return f"export {{ {', '.join(export.exports)} }};"


def emit_entry_point(name: str = ENTRY_POINT) -> str:
    return f"{name}();"


def strip_code_fence(text: str) -> str:
    """
    Drop the first and last line of a fenced completion.

    Only applies when the text starts with a triple-backtick fence.
    """
    if not text.startswith("```"):
        return text
    lines = text.split("\n")
    return "\n".join(lines[1:-1])
