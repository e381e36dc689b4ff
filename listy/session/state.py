"""Session lifecycle enum, mutable session record, and read-only snapshot.

WHY: A session aggregates everything the pipeline tracks between ticks:
the transcript, accumulated categories, the last processed transcript,
the in-flight guard, and the latest error. The controller/scheduler
pair mutates it; everyone else must only ever see a frozen copy.

HOW: Three pieces work together:
  SessionState:    the two-state lifecycle (idle ↔ active)
  Session:         mutable dataclass owned by the SessionController
  SessionSnapshot: frozen dataclass handed to consumers

RULES:
- Session is only mutated on the event loop by the controller/scheduler
- reset() restores every field to its start-of-session value and starts
  a new generation
- snapshot() copies; categories are immutable Category objects in a tuple
- last_processed_text only advances on a successful extraction
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional, Tuple

from listy.core.ir import Category


class SessionState(str, enum.Enum):
    """Lifecycle of a session.

    Inherits from str so values serialize cleanly to JSON. "Stopped" is
    an action, not a state: stopping returns to IDLE.
    """

    IDLE = "idle"
    ACTIVE = "active"


@dataclass
class Session:
    """Mutable state of one listening session.

    RULES:
    - transcript: latest cumulative text from the transcription source
    - categories: accumulated categories, unique by name
    - last_processed_text: transcript sent by the last successful extraction
    - in_flight: True while an extraction call is outstanding
    - last_error: most recent extraction failure, cleared on success
    - generation: bumped by reset(); results of calls launched in an
      earlier generation are discarded
    """

    state: SessionState = SessionState.IDLE
    transcript: str = ""
    categories: list[Category] = field(default_factory=list)
    last_processed_text: str = ""
    in_flight: bool = False
    last_error: Optional[Exception] = None
    generation: int = 0

    def reset(self) -> None:
        self.generation += 1
        self.transcript = ""
        self.categories = []
        self.last_processed_text = ""
        self.in_flight = False
        self.last_error = None

    @property
    def has_unprocessed_text(self) -> bool:
        return self.transcript != self.last_processed_text

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            state=self.state,
            transcript=self.transcript,
            categories=tuple(self.categories),
            last_processed_text=self.last_processed_text,
            in_flight=self.in_flight,
            last_error=self.last_error,
        )


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of a Session at one instant."""

    state: SessionState
    transcript: str
    categories: Tuple[Category, ...]
    last_processed_text: str
    in_flight: bool
    last_error: Optional[Exception] = None

    @property
    def error_message(self) -> Optional[str]:
        if self.last_error is None:
            return None
        return str(self.last_error)
