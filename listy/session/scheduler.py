"""Periodic extraction scheduler with single-flight backpressure.

WHY: Sending the transcript to the extraction service on every update
would flood it, and sending it on a timer without checks would re-send
unchanged text and pile up parallel calls when the service is slow.
The scheduler fires on a fixed interval and only launches a call when
there is new text and nothing is outstanding.

HOW: start() spawns an asyncio timer task that sleeps for the interval
and calls tick(). tick() performs the read-check-set sequence
synchronously on the event loop, so it is atomic with respect to
transcript updates and to completion of a previous call. Each launched
call runs in its own task; on completion it merges the result into the
session (success) or records the error (failure) and clears the guard.

RULES:
- At most one extraction task per session generation at any instant
- Skip when transcript == last_processed_text (nothing new)
- Skip when the in-flight guard is set
- last_processed_text advances only after parse + merge succeed
- Failures replace last_error and leave categories untouched; the same
  text is retried on the next tick (no backoff)
- stop() cancels the timer only; in-flight calls run to completion
- flush() is the one-off final extraction used when a session stops;
  if a call is in flight it is deferred until that call completes
- Results from an earlier session generation are discarded
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from listy.api.client import Extractor
from listy.config import EXTRACTION_INTERVAL_S
from listy.core.merge import merge_categories
from listy.errors import ExtractionError
from listy.session.state import Session, SessionState

logger = logging.getLogger(__name__)


class ExtractionScheduler:
    """Drives extraction attempts for one session.

    WHY: Pairs with the SessionController as the only code allowed to
    mutate the Session. The controller owns lifecycle; the scheduler
    owns cadence, the in-flight guard, and applying results.

    HOW: All methods except the task bodies are synchronous and must be
    called from the event loop that owns the session.

    RULES:
    - interval must be positive (seconds)
    - on_change is invoked after every mutation the scheduler makes
    - tick() and flush() return True when they launched a call
    """

    def __init__(
        self,
        extractor: Extractor,
        session: Session,
        interval: float = EXTRACTION_INTERVAL_S,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError("Extraction interval must be positive, got {}".format(interval))
        self._extractor = extractor
        self._session = session
        self._interval = interval
        self._on_change = on_change
        self._timer: asyncio.Task | None = None
        self._tasks: set[asyncio.Task] = set()
        self._flush_pending = False

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        """True while the periodic timer is scheduled."""
        return self._timer is not None and not self._timer.done()

    # ------------------------------------------------------------------
    # Timer
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the periodic timer. Requires a running event loop."""
        if self.running:
            return
        self._flush_pending = False
        self._timer = asyncio.get_running_loop().create_task(self._run_timer())

    def stop(self) -> None:
        """Cancel the periodic timer; outstanding calls are left alone."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def _run_timer(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self.tick()

    # ------------------------------------------------------------------
    # Launch decisions
    # ------------------------------------------------------------------

    def tick(self) -> bool:
        """Handle one timer firing. No-op unless the session is active."""
        if self._session.state is not SessionState.ACTIVE:
            return False
        return self._launch()

    def flush(self) -> bool:
        """Issue the final extraction for a stopping session.

        When a call is already outstanding, the final extraction is
        launched after it completes, provided the transcript still has
        unprocessed text at that point.
        """
        session = self._session
        if not session.has_unprocessed_text:
            return False
        if session.in_flight:
            logger.debug("Final extraction deferred until the in-flight call completes")
            self._flush_pending = True
            return False
        return self._launch()

    def _launch(self) -> bool:
        session = self._session
        if not session.has_unprocessed_text:
            logger.debug("Skipping extraction: no new transcript text")
            return False
        if session.in_flight:
            logger.debug("Skipping extraction: a call is already in flight")
            return False

        snapshot = session.transcript
        session.in_flight = True
        task = asyncio.get_running_loop().create_task(
            self._extract(snapshot, session.generation)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.debug("Launched extraction for %d characters", len(snapshot))
        self._changed()
        return True

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    async def _extract(self, snapshot: str, generation: int) -> None:
        session = self._session
        try:
            categories = await self._extractor.extract(snapshot)
            merged = merge_categories(session.categories, categories)
        except ExtractionError as exc:
            if session.generation == generation:
                logger.warning("Extraction failed: %s", exc)
                session.last_error = exc
        except Exception as exc:
            if session.generation == generation:
                logger.exception("Unexpected error during extraction")
                session.last_error = exc
        else:
            if session.generation == generation:
                session.categories = merged
                session.last_processed_text = snapshot
                session.last_error = None
                logger.info(
                    "Extraction merged %d categories (%d total)",
                    len(categories),
                    len(merged),
                )
        finally:
            if session.generation == generation:
                session.in_flight = False
                self._changed()

        if session.generation != generation:
            logger.info("Discarded extraction result from a previous session")
            return

        if self._flush_pending:
            self._flush_pending = False
            self._launch()

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    async def wait_idle(self) -> None:
        """Wait until no extraction task (including a deferred flush) is running."""
        while self._tasks:
            await asyncio.wait(set(self._tasks))
