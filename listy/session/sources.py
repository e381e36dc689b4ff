"""Transcript sources that produce cumulative text updates.

The live speech recognizer is an external collaborator; the pipeline
only needs "the latest cumulative string". These helpers turn text that
arrives in pieces into that shape, for the CLI replay mode and tests.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Iterable


def join_chunks(chunks: Iterable[str]) -> list[str]:
    """Return the cumulative transcript after each non-blank chunk.

    Chunks are stripped and joined with single spaces, the way a speech
    recognizer's formatted transcript grows.
    """
    cumulative: list[str] = []
    text = ""
    for chunk in chunks:
        piece = chunk.strip()
        if not piece:
            continue
        text = "{} {}".format(text, piece) if text else piece
        cumulative.append(text)
    return cumulative


async def replay(chunks: Iterable[str], delay: float = 0.0) -> AsyncIterator[str]:
    """Yield cumulative transcript strings, pausing ``delay`` seconds between them."""
    for index, text in enumerate(join_chunks(chunks)):
        if index and delay > 0:
            await asyncio.sleep(delay)
        yield text
