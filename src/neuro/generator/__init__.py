"""
Code generation for neuro programs.
"""

from .assembler import assemble_output
from .orchestrator import ChatMessage, CompletionProvider, ProgramGenerator, generate_program

__all__ = [
    "assemble_output",
    "ChatMessage",
    "CompletionProvider",
    "ProgramGenerator",
    "generate_program",
]
