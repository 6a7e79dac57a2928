"""Google Gemini provider.

Implements the LLMProvider interface on top of ``google-generativeai``.
"""

from __future__ import annotations

import hashlib
import logging
import os
import time
from typing import Optional

from .base import LLMConfig, LLMError, LLMProvider, LLMResponse, LLMTimeoutError

logger = logging.getLogger(__name__)


class GoogleProvider(LLMProvider):
    """LLM Provider backed by Google Gemini API.

    When ``api_key`` is None the key is read from ``API_KEY``, then
    ``GOOGLE_API_KEY``.  A key passed explicitly is used as given, even
    when empty.  A missing key is only reported when a call is made, so
    the calculator keeps working without credentials.
    """

    provider_name = "google"

    def __init__(
        self,
        api_key: Optional[str] = None,
        default_model: str = "gemini-2.5-flash",
    ):
        if api_key is None:
            api_key = os.environ.get("API_KEY", "") or os.environ.get("GOOGLE_API_KEY", "")
        self.api_key = api_key
        self.default_model = default_model
        self._models = {}
        self._timeout_errors = (TimeoutError,)

    def _model_for(self, model_name: str):
        if model_name not in self._models:
            if not self.api_key:
                raise LLMError("API key not found", provider=self.provider_name)
            try:
                import google.generativeai as genai
                from google.api_core.exceptions import DeadlineExceeded
            except ImportError:
                raise LLMError(
                    "google-generativeai package required: pip install google-generativeai",
                    provider=self.provider_name,
                )
            genai.configure(api_key=self.api_key)
            self._models[model_name] = genai.GenerativeModel(model_name)
            self._timeout_errors = (TimeoutError, DeadlineExceeded)
        return self._models[model_name]

    def generate_text(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        config: Optional[LLMConfig] = None,
    ) -> LLMResponse:
        cfg = self._default_config(config)
        model_name = (config.model if config else "") or self.default_model
        model = self._model_for(model_name)

        content = f"{system_prompt}\n\n{user_prompt}" if system_prompt else user_prompt
        prompt_hash = hashlib.sha256(content.encode()).hexdigest()[:16]

        gen_config = {
            "temperature": cfg.temperature,
            "max_output_tokens": cfg.max_tokens,
        }

        t0 = time.time()
        try:
            response = model.generate_content(
                content,
                generation_config=gen_config,
                request_options={"timeout": cfg.timeout_seconds},
            )
        except self._timeout_errors as e:
            raise LLMTimeoutError(
                f"Gemini request timed out after {cfg.timeout_seconds}s",
                provider=self.provider_name,
            ) from e
        except Exception as e:
            raise LLMError(
                f"Gemini API call failed: {e}", provider=self.provider_name
            ) from e
        latency_ms = int((time.time() - t0) * 1000)

        # response.text raises when the candidate was blocked or has no parts
        try:
            raw_text = response.text or ""
        except ValueError as e:
            logger.warning("Gemini returned no text parts: %s", e)
            raw_text = ""

        usage = getattr(response, "usage_metadata", None)

        return LLMResponse(
            raw_text=raw_text,
            model=model_name,
            provider=self.provider_name,
            input_tokens=getattr(usage, "prompt_token_count", 0) if usage else 0,
            output_tokens=getattr(usage, "candidates_token_count", 0) if usage else 0,
            latency_ms=latency_ms,
            prompt_hash=prompt_hash,
            result_hash=hashlib.sha256(raw_text.encode()).hexdigest()[:16],
        )
