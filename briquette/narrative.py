"""Logistics report generation — prompt, provider call, output guard."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from .prompts import EXPECTED_SECTIONS, build_report_prompt
from .providers.audit import AuditLogger
from .providers.base import LLMConfig, LLMProvider
from .providers.guards import ReportOutputGuard

logger = logging.getLogger(__name__)


class LogisticsReportGenerator:
    """Produces the Markdown "Logistics & Application Plan" for an estimate."""

    def __init__(
        self,
        provider: LLMProvider,
        config: Optional[LLMConfig] = None,
        audit: Optional[AuditLogger] = None,
        prompt_overrides: Optional[Dict[str, str]] = None,
    ):
        self.provider = provider
        self.config = config or LLMConfig()
        self.audit = audit
        self.prompt_overrides = prompt_overrides or {}

    def generate(self, acres: float, units_needed: int) -> str:
        """Return the report text.

        Raises
        ------
        LLMError
            Missing credentials, API failure, or an empty response.
        """
        system_prompt, user_prompt = build_report_prompt(
            acres, units_needed, overrides=self.prompt_overrides
        )
        logger.info(
            "Requesting logistics report: acres=%s units=%d model=%s",
            acres, units_needed, self.config.model,
        )

        response = None
        try:
            response = self.provider.generate_text(
                system_prompt, user_prompt, config=self.config
            )
            text = ReportOutputGuard.enforce(
                response.raw_text, provider=response.provider
            )
        except Exception as e:
            self._audit(response, acres, units_needed, error=str(e))
            raise

        self._audit(response, acres, units_needed)
        ReportOutputGuard.check_sections(text, EXPECTED_SECTIONS)
        return text

    def _audit(self, response, acres, units_needed, error=None) -> None:
        if self.audit is None:
            return
        self.audit.log(
            response,
            acres=acres,
            units_needed=units_needed,
            provider=self.provider.provider_name,
            model=self.config.model,
            temperature=self.config.temperature,
            error=error,
        )
