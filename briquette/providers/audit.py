"""Audit trail of logistics report requests.

One record per generation call, kept in memory for the session with an
optional ``persist_fn`` hook for callers that forward them elsewhere.
The app shows ``summary()`` in the sidebar.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .base import LLMResponse

logger = logging.getLogger(__name__)


@dataclass
class AuditRecord:
    """Single LLM call audit entry."""

    acres: float = 0.0
    units_needed: int = 0
    provider: str = ""
    model: str = ""
    prompt_hash: str = ""
    input_tokens: int = 0
    output_tokens: int = 0
    latency_ms: int = 0
    temperature: float = 0.7
    result_hash: str = ""
    timestamp: float = field(default_factory=time.time)
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "acres": self.acres,
            "units_needed": self.units_needed,
            "provider": self.provider,
            "model": self.model,
            "prompt_hash": self.prompt_hash,
            "token_usage": {
                "input": self.input_tokens,
                "output": self.output_tokens,
            },
            "latency_ms": self.latency_ms,
            "temperature": self.temperature,
            "result_hash": self.result_hash,
            "timestamp": self.timestamp,
            "error": self.error,
        }


class AuditLogger:
    """Collects LLM audit records.

    Usage::

        audit = AuditLogger()
        # ... after LLM call ...
        audit.log(response, acres=0.5, units_needed=218)

        print(audit.summary())
    """

    def __init__(self, persist_fn: Optional[Callable[[AuditRecord], None]] = None):
        self._records: List[AuditRecord] = []
        self._persist_fn = persist_fn

    def log(
        self,
        response: Optional[LLMResponse],
        *,
        acres: float = 0.0,
        units_needed: int = 0,
        provider: str = "",
        model: str = "",
        temperature: float = 0.7,
        error: Optional[str] = None,
    ) -> AuditRecord:
        """Record an LLM call.  ``response`` is None when the call raised."""
        record = AuditRecord(
            acres=acres,
            units_needed=units_needed,
            provider=response.provider if response else provider,
            model=response.model if response else model,
            prompt_hash=response.prompt_hash if response else "",
            input_tokens=response.input_tokens if response else 0,
            output_tokens=response.output_tokens if response else 0,
            latency_ms=response.latency_ms if response else 0,
            temperature=temperature,
            result_hash=response.result_hash if response else "",
            error=error,
        )
        self._records.append(record)

        if self._persist_fn:
            try:
                self._persist_fn(record)
            except Exception as e:
                logger.error("Failed to persist audit record: %s", e)

        logger.info(
            "Report audit: %s acres / %d briquettes via %s/%s tokens=%d+%d latency=%dms error=%s",
            record.acres,
            record.units_needed,
            record.provider,
            record.model,
            record.input_tokens,
            record.output_tokens,
            record.latency_ms,
            "yes" if record.error else "no",
        )
        return record

    def summary(self) -> Dict[str, Any]:
        """Return aggregate stats for all recorded calls."""
        return {
            "total_calls": len(self._records),
            "total_input_tokens": sum(r.input_tokens for r in self._records),
            "total_output_tokens": sum(r.output_tokens for r in self._records),
            "total_latency_ms": sum(r.latency_ms for r in self._records),
            "errors": sum(1 for r in self._records if r.error),
            "reports_generated": sum(1 for r in self._records if not r.error),
        }

    @property
    def records(self) -> List[AuditRecord]:
        return list(self._records)
