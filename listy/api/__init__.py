"""Extraction service client package.

WHY: The pipeline needs one network operation: send the transcript so
far, get categories back. This package keeps all HTTP details behind
an async client class.

HOW: ExtractionClient wraps httpx.AsyncClient. Wire payloads are typed
dataclasses in models.py. The Extractor protocol is what the scheduler
depends on, so fakes can stand in during tests.

RULES:
- All HTTP calls go through ExtractionClient (no direct httpx usage elsewhere)
- Authentication is via the x-api-key header from config
"""

from listy.api.client import SYSTEM_PROMPT, ExtractionClient, Extractor
from listy.api.models import MessageRequest, MessageResponse

__all__ = [
    "SYSTEM_PROMPT",
    "ExtractionClient",
    "Extractor",
    "MessageRequest",
    "MessageResponse",
]
