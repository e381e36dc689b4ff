"""Configuration constants, .env loading, and credential lookup.

WHY: Centralizes every tunable of the extraction pipeline (service
endpoint, model, token budget, extraction cadence, request timeout) so
they are easy to find and override without touching pipeline code.

HOW: python-dotenv loads the .env file on import. Constants are plain
module-level values read with os.getenv. load_api_key() resolves the
service credential and falls back to a placeholder when none is set.

RULES:
- All defaults can be overridden via environment variables
- The API key is never hardcoded; a missing key yields the placeholder,
  which the service rejects as an auth error (surfaced as HTTP 401)
- Numeric settings are parsed once at import time
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

# Load .env from the project root (where the process is started)
load_dotenv()

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Extraction service
# ---------------------------------------------------------------------------

ANTHROPIC_API_URL = os.getenv("ANTHROPIC_API_URL", "https://api.anthropic.com/v1/messages")
ANTHROPIC_VERSION = os.getenv("ANTHROPIC_VERSION", "2023-06-01")
LISTY_MODEL = os.getenv("LISTY_MODEL", "claude-sonnet-4-20250514")
LISTY_MAX_TOKENS = int(os.getenv("LISTY_MAX_TOKENS", "1024"))

PLACEHOLDER_API_KEY = "your-api-key-here"
"""Sent when no key is configured; the service answers with an auth error."""

# ---------------------------------------------------------------------------
# Pipeline timing
# ---------------------------------------------------------------------------

EXTRACTION_INTERVAL_S = float(os.getenv("LISTY_EXTRACTION_INTERVAL", "10.0"))
"""Seconds between scheduler ticks while a session is active."""

_timeout = float(os.getenv("LISTY_REQUEST_TIMEOUT", "60.0"))
REQUEST_TIMEOUT_S: float | None = _timeout if _timeout > 0 else None
"""Per-request timeout for extraction calls. None disables the timeout."""


def load_api_key(default: str = PLACEHOLDER_API_KEY) -> str:
    """Load the extraction service API key from the environment.

    WHY: Every extraction call authenticates with a secret. Keeping it in
    the environment (or .env) keeps it out of source code.

    HOW: Reads ANTHROPIC_API_KEY from os.environ (populated by
    python-dotenv). Blank values count as missing.

    RULES:
    - Returns the stripped key when present
    - Returns ``default`` (the placeholder unless overridden) when missing,
      and logs a warning so the resulting auth failures are explainable
    """
    key = os.getenv("ANTHROPIC_API_KEY", "").strip()
    if not key:
        logger.warning(
            "ANTHROPIC_API_KEY is not configured; extraction calls will "
            "use a placeholder key and fail authentication."
        )
        return default
    return key
