"""
Briquette Estimator - Configuration Models
==========================================

Pydantic v2 settings for the app layer.  Values come from defaults and
environment variables, read once at startup:

  API_KEY / GOOGLE_API_KEY   Gemini credential (optional)
  BRIQUETTE_MODEL            Gemini model id
  BRIQUETTE_QUIET_PERIOD     input debounce in seconds
  BRIQUETTE_TIMEOUT          report request timeout in seconds

A missing credential is not a configuration error: the calculator works
without it and every report request fails with the generic error.
"""

from __future__ import annotations

import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from briquette.debounce import DEFAULT_QUIET_PERIOD
from briquette.providers.base import LLMConfig
from briquette.providers.registry import validate_provider_model


class EstimatorSettings(BaseModel):
    """Runtime settings for one app process."""

    model_config = ConfigDict(frozen=True)

    quiet_period_seconds: float = Field(
        default=DEFAULT_QUIET_PERIOD,
        gt=0,
        description="Inactivity before typed acreage is committed.",
    )
    provider: Literal["google"] = "google"
    model: str = Field(default="gemini-2.5-flash", description="Gemini model id.")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=2048, gt=0)
    timeout_seconds: float = Field(default=60.0, gt=0)
    api_key: str = Field(default="", repr=False)

    # -- validators ----------------------------------------------------------

    @field_validator("model")
    @classmethod
    def _known_model(cls, v: str) -> str:
        v = v.strip()
        if not validate_provider_model("google", v):
            raise ValueError(f"Unsupported Gemini model: {v!r}")
        return v

    # -- helpers -------------------------------------------------------------

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    def to_llm_config(self) -> LLMConfig:
        return LLMConfig(
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            timeout_seconds=self.timeout_seconds,
        )


def load_settings(environ: Optional[Mapping[str, str]] = None) -> EstimatorSettings:
    """Build settings from ``environ`` (defaults to ``os.environ``)."""
    env = os.environ if environ is None else environ
    data = {
        "api_key": env.get("API_KEY") or env.get("GOOGLE_API_KEY") or "",
    }
    if env.get("BRIQUETTE_MODEL"):
        data["model"] = env["BRIQUETTE_MODEL"]
    if env.get("BRIQUETTE_QUIET_PERIOD"):
        data["quiet_period_seconds"] = env["BRIQUETTE_QUIET_PERIOD"]
    if env.get("BRIQUETTE_TIMEOUT"):
        data["timeout_seconds"] = env["BRIQUETTE_TIMEOUT"]
    return EstimatorSettings(**data)
