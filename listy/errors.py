"""Exception taxonomy for the extraction pipeline.

WHY: The scheduler treats every extraction failure the same way (record,
keep the snapshot, retry next tick) but consumers still want to know
what went wrong. Typed exceptions keep that distinction without the
scheduler having to inspect messages.

HOW: All failures of a single extraction derive from ExtractionError.
Lifecycle misuse of the session controller raises SessionStateError,
which is unrelated to extraction and never recorded as a session error.

RULES:
- ExtractionError subclasses are recoverable; none ends a session
- HTTPStatusError always carries status_code and the raw response body
- str(exc) is the human-readable message shown to users
"""

from __future__ import annotations


class ExtractionError(Exception):
    """Base class for failures of one extraction call."""


class InvalidEndpointError(ExtractionError):
    """The configured service address is not a usable http(s) URL."""


class TransportFailureError(ExtractionError):
    """The service could not be reached (connect error, timeout, ...)."""


class HTTPStatusError(ExtractionError):
    """Raised when the extraction service answers with a non-2xx status.

    RULES:
    - status_code is the HTTP status as an int
    - body is the raw response text, unmodified
    """

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code}: {body}")


class NoContentError(ExtractionError):
    """A successful response carried no usable text payload."""


class MalformedPayloadError(ExtractionError):
    """The reply text could not be decoded into the categories structure."""


class SessionStateError(RuntimeError):
    """A lifecycle call was made in the wrong session state."""
