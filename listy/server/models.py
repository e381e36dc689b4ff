"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization, and automatic OpenAPI documentation.

HOW: One model per request/response body. Field descriptions show up
in the /docs UI.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Response models expose snapshots only; nothing here can mutate a session
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class TranscriptUpdate(BaseModel):
    """Latest cumulative transcript from the transcription source."""

    text: str = Field(description="The full transcript so far (not a delta).")


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class CategoryModel(BaseModel):
    """One extracted category."""

    name: str = Field(description="Category name, e.g. 'Pros'.")
    items: List[str] = Field(description="Items in first-observed order.")


class SessionResponse(BaseModel):
    """Current session state.

    RULES:
    - state is 'idle' or 'active'
    - last_error is the most recent extraction failure, None after a success
    - categories are never rolled back by errors
    """

    state: str = Field(description="Session lifecycle state: 'idle' or 'active'.")
    transcript_length: int = Field(description="Characters in the current transcript.")
    in_flight: bool = Field(description="True while an extraction call is outstanding.")
    categories: List[CategoryModel] = Field(description="Accumulated categories.")
    last_error: Optional[str] = Field(
        default=None,
        description="Most recent extraction error message, if any.",
    )

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "state": "active",
                "transcript_length": 31,
                "in_flight": False,
                "categories": [
                    {"name": "Pros", "items": ["fast", "cheap"]},
                    {"name": "Cons", "items": ["slow"]},
                ],
                "last_error": None,
            }
        ]
    }}


class FormatInfo(BaseModel):
    """Description of an available export format."""

    key: str = Field(description="Format identifier used in export URLs.")
    name: str = Field(description="Human-readable format name.")
    suffix: str = Field(description="File suffix produced (e.g. '-lists.md').")


class ErrorResponse(BaseModel):
    """Standard error response body."""

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
