"""One estimation session: input → calculation → report.

``EstimatorSession`` owns the debounced input, the latest calculation
and the report controller.  Data only flows one way; a new committed
acreage replaces the calculation and sends the report back to ``Idle``.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .converter import CalculationResult, compute
from .debounce import DEFAULT_QUIET_PERIOD, DebouncedInput
from .report import ReportFetchController, ReportState

logger = logging.getLogger(__name__)


class EstimatorSession:
    def __init__(
        self,
        report: ReportFetchController,
        quiet_period: float = DEFAULT_QUIET_PERIOD,
        on_result: Optional[Callable[[CalculationResult], None]] = None,
    ):
        self.report = report
        self.input = DebouncedInput(self._on_commit, quiet_period=quiet_period)
        self.result: Optional[CalculationResult] = None
        self._on_result = on_result

    # -- input side ----------------------------------------------------------

    @property
    def raw_text(self) -> str:
        return self.input.raw_text

    @property
    def error(self) -> Optional[str]:
        return self.input.error

    def edit(self, text: str) -> None:
        self.input.edit(text)

    def submit(self, text: str) -> Optional[float]:
        return self.input.submit(text)

    def _on_commit(self, acres: float) -> None:
        if self.result is not None and self.result.acres == acres:
            logger.debug("Acreage unchanged (%s), keeping report state", acres)
            return
        self.result = compute(acres)
        logger.info(
            "Estimate: %s acres = %s sq ft -> %d briquettes",
            self.result.acres, self.result.area_sq_ft, self.result.units_needed,
        )
        self.report.reset()
        if self._on_result is not None:
            self._on_result(self.result)

    # -- report side ---------------------------------------------------------

    @property
    def report_state(self) -> ReportState:
        return self.report.state

    async def request_report(self) -> ReportState:
        if self.result is None:
            return self.report.state
        return await self.report.trigger(self.result.acres, self.result.units_needed)

    async def retry_report(self) -> ReportState:
        return await self.report.retry()

    def close(self) -> None:
        self.input.close()
        self.report.reset()
