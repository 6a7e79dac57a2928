"""Shared fixtures for the Briquette test suite.

Provides a scriptable fake LLM provider, blocking report generators for
exercising in-flight behaviour, and a sample Gemini report.
"""

import threading
from typing import List, Optional, Tuple

import pytest

from briquette.providers.base import LLMConfig, LLMError, LLMProvider, LLMResponse


SAMPLE_REPORT = """\
## 📋 Project Overview
Small residential task covering half an acre.

## 🚚 Logistics Estimates
- **Estimated Total Weight:** About 6.8 lbs (218 × 0.5 oz).
- **Volume Visualization:** Fits in a backpack.

## ⏱️ Application Time
- **Manual Application:** Roughly 45 minutes for one person.
- **Mechanized/Team Application:** Not needed at this scale.

## 💡 Pro Tips
1. Mark a 10 ft grid with flags before you start.
2. Keep briquettes dry until use.
3. Check for nearby water sources before application.
"""


# ---------------------------------------------------------------------------
# Fake provider
# ---------------------------------------------------------------------------

class FakeProvider(LLMProvider):
    """LLMProvider that returns canned text or raises a canned error."""

    provider_name = "fake"

    def __init__(self, text: str = SAMPLE_REPORT, error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.calls: List[Tuple[str, str, Optional[LLMConfig]]] = []

    def generate_text(self, system_prompt, user_prompt, *, config=None):
        self.calls.append((system_prompt, user_prompt, config))
        if self.error is not None:
            raise self.error
        return LLMResponse(
            raw_text=self.text,
            model=(config or LLMConfig()).model,
            provider=self.provider_name,
            input_tokens=120,
            output_tokens=340,
            latency_ms=15,
            prompt_hash="p" * 16,
            result_hash="r" * 16,
        )


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def failing_provider():
    return FakeProvider(error=LLMError("upstream 503: secret-key-abc123 rejected"))


# ---------------------------------------------------------------------------
# Report generators (the controller's collaborator)
# ---------------------------------------------------------------------------

class RecordingGenerator:
    """Returns ``text`` (or raises ``error``) and counts calls."""

    def __init__(self, text: str = SAMPLE_REPORT, error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.calls: List[Tuple[float, int]] = []

    def generate(self, acres, units_needed):
        self.calls.append((acres, units_needed))
        if self.error is not None:
            raise self.error
        return self.text


class BlockingGenerator(RecordingGenerator):
    """Like RecordingGenerator, but each call waits for ``release``."""

    def __init__(self, text: str = SAMPLE_REPORT, error: Optional[Exception] = None):
        super().__init__(text, error)
        self.release = threading.Event()

    def generate(self, acres, units_needed):
        self.calls.append((acres, units_needed))
        self.release.wait(timeout=5)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def recording_generator():
    return RecordingGenerator()


@pytest.fixture
def blocking_generator():
    gen = BlockingGenerator()
    yield gen
    gen.release.set()
