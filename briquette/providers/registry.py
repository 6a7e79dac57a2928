"""LLM provider factory and model catalog.

The Gemini models the report generator may be configured with, and a
factory function to instantiate the provider for a given selection.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from .base import LLMProvider

# ---------------------------------------------------------------------------
# Model catalog: supported provider/model combos
# ---------------------------------------------------------------------------

MODEL_CATALOG: List[Dict[str, str]] = [
    {"provider": "google", "model_id": "gemini-2.5-flash"},
    {"provider": "google", "model_id": "gemini-2.0-flash"},
    {"provider": "google", "model_id": "gemini-2.5-pro"},
]


def validate_provider_model(provider: str, model_id: str) -> bool:
    """Check if a provider/model combination is valid."""
    return any(
        m["provider"] == provider and m["model_id"] == model_id
        for m in MODEL_CATALOG
    )


# ---------------------------------------------------------------------------
# Provider factory
# ---------------------------------------------------------------------------

def get_provider(
    provider_name: str,
    model: Optional[str] = None,
    api_key: Optional[str] = None,
) -> LLMProvider:
    """Create and return an LLMProvider instance for the given provider/model.

    Raises
    ------
    ValueError
        If the provider_name is not recognized.
    """
    kwargs: Dict[str, Any] = {}
    if model:
        kwargs["default_model"] = model
    if api_key is not None:
        kwargs["api_key"] = api_key

    if provider_name == "google":
        from .google_provider import GoogleProvider
        return GoogleProvider(**kwargs)
    raise ValueError(
        f"Unknown LLM provider: {provider_name!r}. Supported: google"
    )
