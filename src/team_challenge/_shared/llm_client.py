# Area: Shared
"""
team_challenge._shared.llm_client — LLM client abstraction
==========================================================

Thin text-in/text-out wrapper around the Anthropic Messages API, plus a
mock client for tests and offline demos. Errors from the API propagate;
callers decide on their own fallback.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from anthropic import Anthropic

# Default LLM settings
DEFAULT_MODEL = "claude-3-haiku-20240307"
DEFAULT_MAX_TOKENS = 2000

_CODE_FENCE = re.compile(r"```(?:json)?")


class BaseLLMClient(ABC):
    """Abstract base for LLM clients."""

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """Generate text from prompt."""
        ...


class AnthropicClient(BaseLLMClient):
    """Anthropic Claude API client."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        client: Optional[Any] = None,
    ):
        self.model = model
        self.max_tokens = max_tokens
        # Reads ANTHROPIC_API_KEY from the environment
        self._client = client if client is not None else Anthropic()

    def generate(self, prompt: str) -> str:
        response = self._client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )
        if response.content and len(response.content) > 0:
            return response.content[0].text
        return ""


class MockLLMClient(BaseLLMClient):
    """Mock client for testing."""

    def __init__(self, responses: Optional[Dict[str, str]] = None):
        self._responses = responses or {}
        self.prompts = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        # Return pre-configured response or empty string
        for key, response in self._responses.items():
            if key in prompt:
                return response
        return ""


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences that models wrap around JSON."""
    return _CODE_FENCE.sub("", text).strip()
