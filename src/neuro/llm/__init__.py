"""
LLM completion providers for neuro.
"""

from .api_client import LLMAPIClient, LLMProvider

__all__ = [
    "LLMAPIClient",
    "LLMProvider",
]
