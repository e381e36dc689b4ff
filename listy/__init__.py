"""Listy: incremental list extraction from a growing speech transcript.

WHY: Conversations are full of lists (pros and cons, action items,
options) that nobody writes down. Listy periodically sends the
transcript-so-far to a text-extraction service and keeps a running,
de-duplicated set of named categories.

HOW: Four-stage pipeline: schedule (session timer with single-flight
guard), extract (async API client), sanitize/parse (fenced or bare JSON
reply → Category records), merge (order-preserving de-duplication into
session state). Export formatters and an HTTP API sit on top.

RULES:
- Accumulated categories only ever grow; errors never roll them back
- At most one extraction call is outstanding per session
- The merge engine and parser are pure; the session owns all state
"""

__version__ = "0.1.0"
