"""
API client for LLM providers (Anthropic, OpenAI).

Implements the completion provider used by the generator: one system
instruction, prior context messages, and a final stub message in; one
completion text out.
"""

import logging
import os
from collections.abc import Sequence
from enum import Enum
from typing import Any

from neuro.core.manifest import DEFAULT_MODELS, LLMConfig
from neuro.generator.orchestrator import ChatMessage

logger = logging.getLogger(__name__)


class LLMProvider(str, Enum):
    """Supported LLM providers."""

    ANTHROPIC = "anthropic"
    OPENAI = "openai"


class LLMAPIClient:
    """
    API client for LLM providers.

    Supports Anthropic Claude and OpenAI GPT models.
    """

    def __init__(
        self,
        provider: LLMProvider = LLMProvider.OPENAI,
        model: str | None = None,
        api_key: str | None = None,
        api_key_env: str | None = None,
        temperature: float = 1.0,
        max_tokens: int = 4096,
    ):
        """
        Initialize LLM API client.

        Args:
            provider: LLM provider (anthropic or openai)
            model: Model name (defaults based on provider)
            api_key: API key (if not provided, read from env)
            api_key_env: Environment variable name for API key
            temperature: Temperature for sampling
            max_tokens: Maximum tokens in response
        """
        self.provider = provider
        self.temperature = temperature
        self.max_tokens = max_tokens

        # Get API key
        if api_key:
            self.api_key = api_key
        elif api_key_env:
            self.api_key = os.environ.get(api_key_env)  # type: ignore[assignment]  # Validated below with ValueError
        elif provider == LLMProvider.ANTHROPIC:
            self.api_key = os.environ.get("ANTHROPIC_API_KEY")  # type: ignore[assignment]  # Validated below with ValueError
        else:
            self.api_key = os.environ.get("OPENAI_API_KEY")  # type: ignore[assignment]  # Validated below with ValueError

        if not self.api_key:
            raise ValueError(
                f"API key not found for {provider.value}. "
                f"Set {api_key_env or 'ANTHROPIC_API_KEY/OPENAI_API_KEY'} environment variable."
            )

        self.model = model or DEFAULT_MODELS[provider.value]

        self._init_client()

    @classmethod
    def from_config(cls, config: LLMConfig) -> "LLMAPIClient":
        """Build a client from the ``[llm]`` section of neuro.toml."""
        return cls(
            provider=LLMProvider(config.provider),
            model=config.resolved_model,
            api_key_env=config.api_key_env,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )

    def _init_client(self) -> None:
        """Initialize provider-specific client."""
        if self.provider == LLMProvider.ANTHROPIC:
            try:
                from anthropic import Anthropic

                self.client: Any = Anthropic(api_key=self.api_key)
            except ImportError:
                raise ImportError(
                    "Anthropic SDK not installed. Install with: pip install neuro[anthropic]"
                )
        elif self.provider == LLMProvider.OPENAI:
            try:
                from openai import OpenAI

                self.client = OpenAI(api_key=self.api_key)
            except ImportError:
                raise ImportError("OpenAI SDK not installed. Install with: pip install neuro[openai]")

    def complete(
        self,
        system_instruction: str,
        prior_messages: Sequence[ChatMessage],
        final_message: str,
    ) -> str | None:
        """
        Request one completion.

        Args:
            system_instruction: System prompt
            prior_messages: Context messages, oldest first
            final_message: The message to complete

        Returns:
            Completion text, or None if the provider returned no content
        """
        messages = [{"role": m.role, "content": m.content} for m in prior_messages]
        messages.append({"role": "user", "content": final_message})

        if self.provider == LLMProvider.ANTHROPIC:
            return self._call_anthropic(system_instruction, messages)
        return self._call_openai(system_instruction, messages)

    def _call_anthropic(self, system_prompt: str, messages: list[dict[str, str]]) -> str | None:
        """Call Anthropic Claude API."""
        logger.debug(f"Calling Anthropic API with model {self.model} ({len(messages)} messages)")

        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=system_prompt,
                messages=messages,
            )
        except Exception as e:
            logger.error(f"Anthropic API call failed: {e}")
            raise

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        return text or None

    def _call_openai(self, system_prompt: str, messages: list[dict[str, str]]) -> str | None:
        """Call OpenAI GPT API."""
        logger.debug(f"Calling OpenAI API with model {self.model} ({len(messages)} messages)")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                n=1,
                messages=[{"role": "system", "content": system_prompt}, *messages],
            )
        except Exception as e:
            logger.error(f"OpenAI API call failed: {e}")
            raise

        if not response.choices:
            return None
        return response.choices[0].message.content  # type: ignore[no-any-return]  # SDK types content as Optional[str]
