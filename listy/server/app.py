"""FastAPI application exposing one listening session over HTTP.

WHY: The speech-to-text source and the presentation layer are external
collaborators (a phone app, a browser page, a meeting bot). An HTTP API
lets any of them push transcript updates and read or export the
extracted lists without linking against this package.

HOW: create_app() builds a FastAPI app whose lifespan opens an
ExtractionClient (unless an Extractor is injected, as tests do) and
creates a SessionController on app.state. Endpoints are thin wrappers
around controller calls; SessionStateError becomes 409.

RULES:
- One session per app instance, created at startup
- Lifecycle misuse (start twice, stop while idle, update while idle) → 409
- GET endpoints only read snapshots
- Shutdown stops an active session and waits for the final extraction
- Python 3.9+ compatible (no match/case, no PEP 604 unions)
"""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import Response

from listy import __version__
from listy.api.client import ExtractionClient, Extractor
from listy.config import EXTRACTION_INTERVAL_S
from listy.errors import SessionStateError
from listy.formatters import FORMATTERS
from listy.server.models import (
    CategoryModel,
    ErrorResponse,
    FormatInfo,
    HealthResponse,
    SessionResponse,
    TranscriptUpdate,
)
from listy.session.controller import SessionController
from listy.session.state import SessionSnapshot

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _controller(request: Request) -> SessionController:
    return request.app.state.controller


def _snapshot_to_response(snapshot: SessionSnapshot) -> SessionResponse:
    """Convert a SessionSnapshot to a SessionResponse Pydantic model."""
    return SessionResponse(
        state=snapshot.state.value,
        transcript_length=len(snapshot.transcript),
        in_flight=snapshot.in_flight,
        categories=[
            CategoryModel(name=c.name, items=list(c.items)) for c in snapshot.categories
        ],
        last_error=snapshot.error_message,
    )


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def create_app(
    extractor: Optional[Extractor] = None,
    interval: Optional[float] = None,
) -> FastAPI:
    """Build the API app.

    Args:
        extractor: Extractor to use instead of a real ExtractionClient.
        interval: Extraction interval in seconds (default from config).
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with AsyncExitStack() as stack:
            active_extractor = extractor
            if active_extractor is None:
                active_extractor = await stack.enter_async_context(ExtractionClient())
            controller = SessionController(
                active_extractor,
                interval=interval if interval is not None else EXTRACTION_INTERVAL_S,
            )
            app.state.controller = controller
            yield
            if controller.is_active:
                controller.stop()
            await controller.drain()

    app = FastAPI(
        lifespan=lifespan,
        title="Listy Extraction API",
        description=(
            "Push a growing speech transcript and read back the lists "
            "(pros, cons, action items, ...) extracted from it. Start a "
            "session, post cumulative transcript updates, poll the session, "
            "and export the result."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # -----------------------------------------------------------------------
    # Endpoints: Session
    # -----------------------------------------------------------------------

    @app.post(
        "/session/start",
        response_model=SessionResponse,
        tags=["session"],
        summary="Start a new session",
        description="Reset all session state and start periodic extraction.",
        responses={409: {"model": ErrorResponse, "description": "Session already active"}},
    )
    async def start_session(request: Request) -> SessionResponse:
        controller = _controller(request)
        try:
            controller.start()
        except SessionStateError as exc:
            raise HTTPException(status_code=409, detail=str(exc))
        return _snapshot_to_response(controller.snapshot())

    @app.post(
        "/session/transcript",
        response_model=SessionResponse,
        tags=["session"],
        summary="Post the latest cumulative transcript",
        description=(
            "Replace the session's transcript with the full text so far. "
            "Updates shorter than the current transcript are ignored."
        ),
        responses={409: {"model": ErrorResponse, "description": "Session not active"}},
    )
    async def update_transcript(request: Request, update: TranscriptUpdate) -> SessionResponse:
        controller = _controller(request)
        if not controller.is_active:
            raise HTTPException(status_code=409, detail="Session is not active")
        controller.on_transcript_update(update.text)
        return _snapshot_to_response(controller.snapshot())

    @app.post(
        "/session/stop",
        response_model=SessionResponse,
        tags=["session"],
        summary="Stop the session",
        description=(
            "Stop periodic extraction. Unprocessed transcript text gets one "
            "final extraction whose result is applied when it completes."
        ),
        responses={409: {"model": ErrorResponse, "description": "Session not active"}},
    )
    async def stop_session(request: Request) -> SessionResponse:
        controller = _controller(request)
        try:
            controller.stop()
        except SessionStateError as exc:
            raise HTTPException(status_code=409, detail=str(exc))
        return _snapshot_to_response(controller.snapshot())

    @app.get(
        "/session",
        response_model=SessionResponse,
        tags=["session"],
        summary="Get session state",
        description="Current lifecycle state, categories, and last error.",
    )
    async def get_session(request: Request) -> SessionResponse:
        return _snapshot_to_response(_controller(request).snapshot())

    @app.get(
        "/session/export/{format_key}",
        tags=["session"],
        summary="Export the accumulated categories",
        description="Render the session's categories with one of the formats from GET /formats.",
        responses={404: {"model": ErrorResponse, "description": "Unknown format"}},
    )
    async def export_session(request: Request, format_key: str) -> Response:
        formatter_cls = FORMATTERS.get(format_key)
        if formatter_cls is None:
            available = ", ".join(sorted(FORMATTERS.keys()))
            raise HTTPException(
                status_code=404,
                detail="Unknown format '{}'. Available: {}".format(format_key, available),
            )

        categories = _controller(request).snapshot().categories
        output = formatter_cls().format(categories)[0]
        return Response(
            content=output.content,
            media_type=output.media_type,
            headers={
                "Content-Disposition": 'attachment; filename="session{}"'.format(output.suffix)
            },
        )

    # -----------------------------------------------------------------------
    # Endpoints: Formats / Health
    # -----------------------------------------------------------------------

    @app.get(
        "/formats",
        response_model=List[FormatInfo],
        tags=["formats"],
        summary="List available export formats",
    )
    async def list_formats() -> List[FormatInfo]:
        result = []
        for key, formatter_cls in sorted(FORMATTERS.items()):
            formatter = formatter_cls()
            outputs = formatter.format([])
            result.append(FormatInfo(
                key=key,
                name=formatter.name,
                suffix=outputs[0].suffix if outputs else "",
            ))
        return result

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["health"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    return app


app = create_app()


def run_api():
    """Entry point for the listy-api console script."""
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
