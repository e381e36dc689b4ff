"""Session lifecycle, transcript intake, and consumer notifications.

WHY: Something has to own the session: reset it on start, accept the
growing transcript from the speech source, stop the timer and flush the
tail on stop, and let presentation/export code read the result without
being able to change it.

HOW: SessionController holds the only Session instance and an
ExtractionScheduler bound to it. Consumers either poll snapshot() or
subscribe() to receive a fresh SessionSnapshot after every change.
All methods run on the event loop that owns the session.

RULES:
- IDLE → start() → ACTIVE → stop() → IDLE; wrong-state calls to
  start()/stop() raise SessionStateError
- start() resets transcript, categories, last_processed_text, guard,
  and error, then starts the timer
- Transcript updates are ignored while IDLE and when shorter than the
  current transcript (the transcript never shrinks)
- stop() cancels the timer, issues one final extraction if there is
  unprocessed text, and returns to IDLE immediately; the final result
  is applied whenever it arrives
- A failing listener is logged and never breaks the pipeline
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterable, Callable

from listy.api.client import Extractor
from listy.config import EXTRACTION_INTERVAL_S
from listy.core.ir import Category
from listy.errors import SessionStateError
from listy.session.scheduler import ExtractionScheduler
from listy.session.state import Session, SessionSnapshot, SessionState

logger = logging.getLogger(__name__)

Listener = Callable[[SessionSnapshot], None]


class SessionController:
    """Owns one listening session and wires it to the scheduler.

    WHY: Keeps every mutable field in one place with one owner, so the
    scheduler, client, and merge engine only ever see values.

    HOW: Construct once with an Extractor (usually an entered
    ExtractionClient). start()/stop() may be called repeatedly; each
    start() begins a fresh session generation.
    """

    def __init__(
        self,
        extractor: Extractor,
        interval: float = EXTRACTION_INTERVAL_S,
    ) -> None:
        self._session = Session()
        self._listeners: list[Listener] = []
        self._scheduler = ExtractionScheduler(
            extractor,
            self._session,
            interval=interval,
            on_change=self._notify,
        )

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._session.state

    @property
    def is_active(self) -> bool:
        return self._session.state is SessionState.ACTIVE

    @property
    def categories(self) -> tuple[Category, ...]:
        return tuple(self._session.categories)

    @property
    def last_error(self) -> Exception | None:
        return self._session.last_error

    def snapshot(self) -> SessionSnapshot:
        return self._session.snapshot()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Begin a fresh session. Must be called from a running event loop."""
        if self.is_active:
            raise SessionStateError("Session is already active")

        self._session.reset()
        self._session.state = SessionState.ACTIVE
        self._scheduler.start()
        logger.info(
            "Session started (extraction every %.1fs)", self._scheduler.interval
        )
        self._notify()

    def on_transcript_update(self, text: str) -> None:
        """Replace the current transcript with the latest cumulative text."""
        session = self._session
        if session.state is not SessionState.ACTIVE:
            logger.debug("Ignoring transcript update while idle")
            return
        if len(text) < len(session.transcript):
            logger.warning(
                "Ignoring transcript update that shrinks the transcript (%d < %d chars)",
                len(text),
                len(session.transcript),
            )
            return
        if text == session.transcript:
            return

        session.transcript = text
        self._notify()

    def stop(self) -> None:
        """Stop the timer, flush unprocessed text, and return to IDLE."""
        if not self.is_active:
            raise SessionStateError("Session is not active")

        self._scheduler.stop()
        self._scheduler.flush()
        self._session.state = SessionState.IDLE
        logger.info(
            "Session stopped with %d categories", len(self._session.categories)
        )
        self._notify()

    async def drain(self) -> None:
        """Wait for outstanding extraction calls, including the final one."""
        await self._scheduler.wait_idle()

    async def follow(self, source: AsyncIterable[str]) -> None:
        """Feed cumulative transcript strings from source until it ends."""
        async for text in source:
            self.on_transcript_update(text)

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self._session.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Session listener failed")
