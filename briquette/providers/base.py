"""LLM Provider interface — abstract base for narrative backends.

Every provider must implement ``generate_text``.  The report generator
receives a provider via dependency injection, so tests can pass a fake
and the app can swap Gemini models without touching the core.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class LLMConfig:
    """Immutable configuration for a single LLM call."""

    model: str = "gemini-2.5-flash"
    temperature: float = 0.7
    max_tokens: int = 2048
    timeout_seconds: float = 60.0


@dataclass
class LLMResponse:
    """Standardised response from any LLM provider."""

    raw_text: str
    model: str = ""
    provider: str = ""
    input_tokens: int = 0
    output_tokens: int = 0
    latency_ms: int = 0
    prompt_hash: str = ""
    result_hash: str = ""


class LLMProvider(abc.ABC):
    """Abstract base class for LLM providers.

    Subclasses must implement:
    - ``generate_text``: send prompt, receive the complete text blob
    """

    provider_name: str = "base"

    @abc.abstractmethod
    def generate_text(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        config: Optional[LLMConfig] = None,
    ) -> LLMResponse:
        """Send a prompt and return the generated text.

        Parameters
        ----------
        system_prompt : str
            System-level instruction (persona, rules, output format).
        user_prompt : str
            User-level content (acreage, briquette count).
        config : LLMConfig, optional
            Override default config for this call.

        Returns
        -------
        LLMResponse
            Contains ``raw_text`` and usage metadata.  ``raw_text`` may be
            empty; callers decide whether that is an error.

        Raises
        ------
        LLMError
            On missing credentials or API failure.
        """
        ...

    def _default_config(self, config: Optional[LLMConfig]) -> LLMConfig:
        return config or LLMConfig()


class LLMError(Exception):
    """Base exception for LLM provider errors."""

    def __init__(self, message: str, provider: str = ""):
        super().__init__(message)
        self.provider = provider


class LLMTimeoutError(LLMError):
    """LLM call exceeded timeout."""


class LLMEmptyResponseError(LLMError):
    """LLM returned no usable text."""

    def __init__(self, message: str, raw_text: str = "", provider: str = ""):
        super().__init__(message, provider=provider)
        self.raw_text = raw_text
