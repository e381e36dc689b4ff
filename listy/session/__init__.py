"""Session ownership, scheduling, and transcript sources.

WHY: The session package is where time and concurrency live: the
periodic scheduler, the single-flight guard, and the controller that
owns the session state.

RULES:
- Session state is mutated only by SessionController/ExtractionScheduler
- Consumers read SessionSnapshot objects, never the Session itself
"""

from listy.session.controller import SessionController
from listy.session.scheduler import ExtractionScheduler
from listy.session.state import Session, SessionSnapshot, SessionState

__all__ = [
    "ExtractionScheduler",
    "Session",
    "SessionController",
    "SessionSnapshot",
    "SessionState",
]
