"""LLM Provider abstraction layer.

Wraps the Gemini backend behind a small interface, with audit logging
and output guards for generated reports.
"""

from .base import (
    LLMConfig,
    LLMEmptyResponseError,
    LLMError,
    LLMProvider,
    LLMResponse,
    LLMTimeoutError,
)
from .google_provider import GoogleProvider
from .guards import ReportOutputGuard, ReportSection, parse_sections
from .audit import AuditLogger, AuditRecord
from .registry import get_provider

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "LLMConfig",
    "LLMError",
    "LLMTimeoutError",
    "LLMEmptyResponseError",
    "GoogleProvider",
    "ReportOutputGuard",
    "ReportSection",
    "parse_sections",
    "AuditLogger",
    "AuditRecord",
    "get_provider",
]
