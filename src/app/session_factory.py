"""Build an EstimatorSession from app settings.

Checks whether the Gemini provider is usable (package installed, API key
set) and logs a warning when it is not.  The session is built either
way: without a provider every report request ends in the generic error
state, while the calculator keeps working.
"""
from __future__ import annotations

import importlib
import logging
from typing import Optional

from briquette.narrative import LogisticsReportGenerator
from briquette.providers.audit import AuditLogger
from briquette.providers.base import LLMProvider
from briquette.providers.registry import get_provider
from briquette.report import ReportFetchController, ReportState
from briquette.session import EstimatorSession

from ..config.models import EstimatorSettings

logger = logging.getLogger(__name__)

# Map of provider name → import check module
_PROVIDER_MODULES = {
    "google": "google.generativeai",
}


def check_provider_available(settings: EstimatorSettings) -> Optional[str]:
    """Return None if the provider is ready, or a reason string for operators."""
    module = _PROVIDER_MODULES.get(settings.provider)
    if module is None:
        return f"Unknown provider: {settings.provider}"
    try:
        importlib.import_module(module)
    except ImportError:
        return f"{module} package is not installed"
    if not settings.has_api_key:
        return "API_KEY environment variable is not set"
    return None


def build_session(
    settings: EstimatorSettings,
    *,
    provider: Optional[LLMProvider] = None,
    audit: Optional[AuditLogger] = None,
    on_report_change=None,
) -> EstimatorSession:
    """Wire provider → report generator → controller → session.

    A fresh ``AuditLogger`` is attached when none is given.
    """
    if audit is None:
        audit = AuditLogger()
    if provider is None:
        problem = check_provider_available(settings)
        if problem:
            logger.warning("Report generation unavailable: %s", problem)
        provider = get_provider(
            settings.provider, model=settings.model, api_key=settings.api_key
        )

    generator = LogisticsReportGenerator(
        provider,
        config=settings.to_llm_config(),
        audit=audit,
    )
    controller = ReportFetchController(
        generator,
        timeout=settings.timeout_seconds,
        on_change=on_report_change or _log_report_state,
    )
    logger.info(
        "Session ready: provider=%s model=%s quiet_period=%.2fs",
        provider.provider_name, settings.model, settings.quiet_period_seconds,
    )
    return EstimatorSession(controller, quiet_period=settings.quiet_period_seconds)


def _log_report_state(state: ReportState) -> None:
    logger.debug("Report state -> %s", state.status.value)
