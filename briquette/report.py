"""Report fetch state machine.

``ReportFetchController`` wraps a single call to the logistics report
generator and exposes its progress as a ``ReportState``:

    Idle ──trigger──▶ Loading ──▶ Success(content)
      ▲                  │
      │                  └──────▶ Error(message) ──trigger/retry──▶ Loading
      └───────── reset() from any state

At most one request is in flight per controller.  ``reset()`` bumps a
generation counter; a response that belongs to an older generation is
dropped when it arrives.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Callable, ClassVar, Optional, Protocol, Tuple, Union

logger = logging.getLogger(__name__)

REPORT_ERROR_MESSAGE = (
    "Failed to generate insights. Please check your API key configuration."
)


class ReportStatus(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Idle:
    status: ClassVar[ReportStatus] = ReportStatus.IDLE


@dataclass(frozen=True)
class Loading:
    status: ClassVar[ReportStatus] = ReportStatus.LOADING


@dataclass(frozen=True)
class Success:
    content: str
    status: ClassVar[ReportStatus] = ReportStatus.SUCCESS


@dataclass(frozen=True)
class Error:
    message: str
    status: ClassVar[ReportStatus] = ReportStatus.ERROR


ReportState = Union[Idle, Loading, Success, Error]

IDLE = Idle()
LOADING = Loading()


class ReportGenerator(Protocol):
    def generate(self, acres: float, units_needed: int) -> str:
        ...


class ReportFetchController:
    """Drives one logistics report request at a time.

    Parameters
    ----------
    generator :
        Object with a blocking ``generate(acres, units_needed) -> str``.
        It runs in a worker thread so the event loop stays responsive.
    timeout :
        Seconds to wait for the generator before giving up.  ``None``
        waits indefinitely.
    on_change :
        Called with every new state.
    """

    def __init__(
        self,
        generator: ReportGenerator,
        *,
        timeout: Optional[float] = None,
        on_change: Optional[Callable[[ReportState], None]] = None,
    ):
        self._generator = generator
        self._timeout = timeout
        self._on_change = on_change
        self._state: ReportState = IDLE
        self._generation = 0
        self._last_request: Optional[Tuple[float, int]] = None

    @property
    def state(self) -> ReportState:
        return self._state

    @property
    def generator(self) -> ReportGenerator:
        return self._generator

    @property
    def in_flight(self) -> bool:
        return isinstance(self._state, Loading)

    async def trigger(self, acres: float, units_needed: int) -> ReportState:
        """Request a report for the given figures.

        Only starts from ``Idle`` or ``Error``.  Returns the state after
        the request settles (or the unchanged state if nothing started).
        """
        if not isinstance(self._state, (Idle, Error)):
            logger.debug("Report trigger ignored in state %s", self._state.status.value)
            return self._state

        self._generation += 1
        generation = self._generation
        self._last_request = (acres, units_needed)
        self._set_state(LOADING)

        try:
            call = asyncio.to_thread(self._generator.generate, acres, units_needed)
            if self._timeout is not None:
                text = await asyncio.wait_for(call, timeout=self._timeout)
            else:
                text = await call
        except asyncio.CancelledError:
            if generation == self._generation:
                self._set_state(IDLE)
            raise
        except Exception:
            if generation != self._generation:
                logger.debug("Dropping failure from superseded report request")
                return self._state
            logger.exception(
                "Report generation failed (acres=%s, units=%d)", acres, units_needed
            )
            self._set_state(Error(REPORT_ERROR_MESSAGE))
            return self._state

        if generation != self._generation:
            logger.debug("Dropping stale report response (generation %d)", generation)
            return self._state

        if not text or not text.strip():
            logger.error(
                "Report generator returned no content (acres=%s, units=%d)",
                acres,
                units_needed,
            )
            self._set_state(Error(REPORT_ERROR_MESSAGE))
        else:
            self._set_state(Success(text))
        return self._state

    async def retry(self) -> ReportState:
        """Re-run the last request after a failure."""
        if not isinstance(self._state, Error) or self._last_request is None:
            return self._state
        acres, units_needed = self._last_request
        return await self.trigger(acres, units_needed)

    def reset(self) -> None:
        """Return to ``Idle`` and orphan any in-flight request."""
        self._generation += 1
        self._last_request = None
        if not isinstance(self._state, Idle):
            self._set_state(IDLE)

    def _set_state(self, state: ReportState) -> None:
        self._state = state
        if self._on_change is not None:
            self._on_change(state)
