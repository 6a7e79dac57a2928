"""Debounced acreage input.

Turns a stream of raw text edits into validated numeric commits.  Each
edit restarts a quiet-period timer on the running asyncio loop; only
when the timer fires uninterrupted is the text parsed and, if valid,
handed to ``on_commit``.

Every scheduled callback captures the generation counter at the time it
was scheduled and does nothing if the counter has moved on, so a timer
that slips past ``cancel()`` still cannot commit a stale value.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from .converter import InvalidAcreageError, parse_acreage

logger = logging.getLogger(__name__)

DEFAULT_QUIET_PERIOD = 0.4  # seconds


class DebouncedInput:
    """Owns the raw acreage text and its inline validation error."""

    def __init__(
        self,
        on_commit: Callable[[float], None],
        quiet_period: float = DEFAULT_QUIET_PERIOD,
    ):
        if quiet_period <= 0:
            raise ValueError(f"quiet_period must be positive, got {quiet_period!r}")
        self._on_commit = on_commit
        self.quiet_period = quiet_period
        self.raw_text = ""
        self.error: Optional[str] = None
        self._generation = 0
        self._handle: Optional[asyncio.TimerHandle] = None
        self._closed = False

    @property
    def pending(self) -> bool:
        """True while a quiet-period timer is outstanding."""
        return self._handle is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def edit(self, text: str) -> None:
        """Record an edit and restart the quiet period.

        Must be called from a coroutine or callback running on an event loop.
        """
        if self._closed:
            logger.debug("Edit after close ignored")
            return
        self.raw_text = text
        self._cancel_pending()
        generation = self._generation
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.quiet_period, self._on_quiet, generation)

    def submit(self, text: str) -> Optional[float]:
        """Record a settled edit and validate it immediately.

        For front ends that only deliver text once the user is done with
        the field (Enter / blur).  Returns the committed value, if any.
        """
        if self._closed:
            logger.debug("Submit after close ignored")
            return None
        self.raw_text = text
        self._cancel_pending()
        return self._validate()

    def close(self) -> None:
        """Tear down: drop any pending timer so no commit fires afterwards."""
        self._cancel_pending()
        self._closed = True

    # -- internals -----------------------------------------------------------

    def _cancel_pending(self) -> None:
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _on_quiet(self, generation: int) -> None:
        if generation != self._generation or self._closed:
            return
        self._handle = None
        self._validate()

    def _validate(self) -> Optional[float]:
        text = self.raw_text
        if not text.strip():
            # Keep whatever result was committed last
            self.error = None
            return None
        try:
            value = parse_acreage(text)
        except InvalidAcreageError as e:
            logger.debug("Rejected acreage input %r", text)
            self.error = str(e)
            return None
        self.error = None
        self._on_commit(value)
        return value
